from app.sales.models.record import SaleRecordModel

__all__ = ["SaleRecordModel"]
