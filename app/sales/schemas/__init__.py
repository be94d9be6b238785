from app.sales.schemas.base import (
    DEFAULT_TOUR_NAME,
    ParseResult,
    ParseRunSummary,
    RecordsFilter,
    RecordsResponse,
    SaleRecord,
    Statistics,
    StoredRecord,
    TextUploadRequest,
    UploadInfo,
    UploadResponse,
    UploadsResponse,
)

__all__ = [
    "DEFAULT_TOUR_NAME",
    "ParseResult",
    "ParseRunSummary",
    "RecordsFilter",
    "RecordsResponse",
    "SaleRecord",
    "Statistics",
    "StoredRecord",
    "TextUploadRequest",
    "UploadInfo",
    "UploadResponse",
    "UploadsResponse",
]
