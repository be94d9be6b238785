"""
Tour sales ingestion pipeline.

Report path: grid → classify rows → records + footer summary.
Text path:   text → split orders → decode each → records + computed summary.
"""
import logging

from app.sales.pipeline.aggregator import aggregate
from app.sales.pipeline.errors import DecodeError
from app.sales.pipeline.materializer import order_to_records
from app.sales.pipeline.orders import decode_order
from app.sales.pipeline.segmenter import split_into_orders
from app.sales.pipeline.spreadsheet import parse_grid
from app.sales.schemas import ParseResult, ParseRunSummary, SaleRecord

logger = logging.getLogger(__name__)

__all__ = ["DecodeError", "aggregate", "parse_grid", "parse_text"]


def parse_text(text: str, upload_id: str) -> ParseResult:
    """Decode pasted order text into sale records.

    Chunks that do not decode as an order are dropped; the summary is
    computed from the records that were produced.
    """
    chunks = split_into_orders(text)
    logger.info("Found %d order chunks in text", len(chunks))

    records: list[SaleRecord] = []
    for chunk in chunks:
        head = chunk[0] if chunk else ""
        try:
            order = decode_order(chunk)
            if order is None:
                logger.debug("Dropped chunk starting with %r", head)
                continue
            records.extend(order_to_records(order, upload_id))
        except Exception as exc:
            logger.error("Error parsing order %r: %s", head, exc)

    summary = ParseRunSummary(
        total_tickets=sum(r.quantity or 0 for r in records),
        total_amount=sum(r.paid_amount or 0 for r in records),
        tours=len({r.tour_name for r in records}),
    )
    logger.info("Parsed %d records across %d tours", len(records), summary.tours)
    return ParseResult(records=records, summary=summary)
