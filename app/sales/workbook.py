"""
Read an uploaded report workbook into a grid of cell strings.

Only the first sheet is read. Cells are rendered the way the report shows
them so the row classifier never sees container-specific types.
"""
from __future__ import annotations

import io
import logging
from pathlib import Path

import pandas as pd

from app.sales.pipeline.errors import DecodeError
from app.sales.pipeline.scalars import cell_text

logger = logging.getLogger(__name__)

ENGINES = {
    ".ods": "odf",
    ".xlsx": "openpyxl",
    ".xlsm": "openpyxl",
}


class WorkbookError(DecodeError):
    """The uploaded container could not be read."""


def load_grid(content: bytes, filename: str) -> list[list[str]]:
    extension = Path(filename).suffix.lower()
    engine = ENGINES.get(extension)
    if engine is None:
        raise WorkbookError(f"Неподдерживаемый формат файла: {extension or filename}")

    try:
        df = pd.read_excel(
            io.BytesIO(content),
            sheet_name=0,
            header=None,
            dtype=object,
            engine=engine,
        )
    except Exception as exc:
        logger.error("Error reading workbook %s: %s", filename, exc)
        raise WorkbookError(f"Не удалось прочитать файл: {exc}") from exc

    grid = [
        ["" if pd.isna(value) else cell_text(value) for value in row]
        for row in df.itertuples(index=False, name=None)
    ]
    logger.info("Read %s: %d rows, %d columns", filename, len(grid), df.shape[1])
    return grid
