"""
Upload API endpoints.

POST   /api/upload               — decode a report workbook → new batch
POST   /api/upload-text          — decode pasted order text → new batch
GET    /api/uploads              — list batches
DELETE /api/uploads              — delete every batch
DELETE /api/uploads/{upload_id}  — delete one batch
"""
from __future__ import annotations

import logging
import secrets
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.orm import Session

from app.config import settings
from app.sales import store
from app.sales.database import get_db
from app.sales.pipeline import DecodeError, parse_grid, parse_text
from app.sales.schemas import (
    ParseResult,
    TextUploadRequest,
    UploadResponse,
    UploadsResponse,
)
from app.sales.workbook import load_grid

logger = logging.getLogger(__name__)
router = APIRouter()


def new_upload_id() -> str:
    return secrets.token_hex(16)


def _commit(db: Session, upload_id: str, result: ParseResult) -> UploadResponse:
    count = store.insert_batch(db, result.records) if result.records else 0
    return UploadResponse(
        upload_id=upload_id,
        record_count=count,
        headers=result.headers,
        summary=result.summary,
        message=f"Успешно загружено {count} записей из {result.summary.tours} экскурсий",
    )


# ── POST /api/upload ─────────────────────────────────────────────────────
@router.post("/upload", response_model=UploadResponse)
def upload_report(
    file: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
):
    if file is None or not file.filename:
        raise HTTPException(status_code=400, detail="Файл не найден")

    extension = Path(file.filename).suffix.lower()
    if extension not in settings.ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail=(
                "Неверный формат файла. Поддерживаются: "
                + ", ".join(settings.ALLOWED_EXTENSIONS)
            ),
        )

    content = file.file.read()
    if len(content) > settings.MAX_UPLOAD_SIZE:
        raise HTTPException(
            status_code=400,
            detail=(
                "Файл слишком большой. Максимальный размер: "
                f"{settings.MAX_UPLOAD_SIZE // (1024 * 1024)}MB"
            ),
        )

    upload_id = new_upload_id()
    logger.info("Upload: file=%s  size=%d  upload_id=%s", file.filename, len(content), upload_id)

    try:
        result = parse_grid(load_grid(content, file.filename), upload_id)
    except DecodeError as exc:
        logger.warning("Rejected upload %s: %s", file.filename, exc)
        raise HTTPException(status_code=400, detail=str(exc))

    return _commit(db, upload_id, result)


# ── POST /api/upload-text ────────────────────────────────────────────────
@router.post("/upload-text", response_model=UploadResponse)
def upload_text(req: TextUploadRequest, db: Session = Depends(get_db)):
    if not req.text.strip():
        raise HTTPException(status_code=400, detail="Текст не найден или пустой")

    upload_id = new_upload_id()
    logger.info("Text upload: len=%d  upload_id=%s", len(req.text), upload_id)

    try:
        result = parse_text(req.text, upload_id)
    except DecodeError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    if not result.records:
        raise HTTPException(
            status_code=400,
            detail="Не удалось распознать данные заказов в тексте. Проверьте формат.",
        )

    return _commit(db, upload_id, result)


# ── GET /api/uploads ─────────────────────────────────────────────────────
@router.get("/uploads", response_model=UploadsResponse)
def list_uploads(db: Session = Depends(get_db)):
    return UploadsResponse(uploads=store.list_uploads(db))


# ── DELETE /api/uploads ──────────────────────────────────────────────────
@router.delete("/uploads")
def delete_all_uploads(db: Session = Depends(get_db)):
    deleted = store.delete_all(db)
    return {"success": True, "deleted": deleted}


# ── DELETE /api/uploads/{upload_id} ──────────────────────────────────────
@router.delete("/uploads/{upload_id}")
def delete_upload(upload_id: str, db: Session = Depends(get_db)):
    deleted = store.delete_batch(db, upload_id)
    if not deleted:
        logger.warning("Upload not found: %s", upload_id)
        raise HTTPException(status_code=404, detail="Загрузка не найдена")
    return {"success": True, "upload_id": upload_id, "deleted": deleted}
