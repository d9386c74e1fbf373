# wardrobe_project/services/ingestion_service.py
import asyncio
import logging
import os
import re
import time
import uuid
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.ai_provider import (
    ClassificationProvider, DEFAULT_COLORS, DEFAULT_GARMENT_TYPE, DEFAULT_ITEM_NAME,
    DEFAULT_OCCASION, DEFAULT_SEASON,
)
from ..core.image_normalizer import normalize_image_async
from ..core.object_store import ObjectStore
from ..models.item_models import (
    AIAnalysis, Item as ItemSchema, ItemCreate, UploadOverrides, UploadResponse, UNTITLED_ITEM_NAME,
)
from . import wardrobe_service

logger = logging.getLogger(__name__)

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024


def build_storage_filename(original_name: Optional[str], now_ms: Optional[int] = None) -> str:
    """'{epoch millis}-{name with whitespace runs replaced by dashes}'."""
    base = os.path.basename((original_name or "").replace("\\", "/")).strip() or "upload"
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{now_ms}-" + re.sub(r"\s+", "-", base)


async def analyze_image(provider: ClassificationProvider, image: bytes, mime_type: str) -> AIAnalysis:
    """
    Runs the five classification calls concurrently and waits for all of them.
    A failed call only costs its own field, which falls back to its default.
    """
    labels = ("colors", "type", "occasion", "season", "name")
    defaults = (list(DEFAULT_COLORS), DEFAULT_GARMENT_TYPE, DEFAULT_OCCASION, DEFAULT_SEASON, DEFAULT_ITEM_NAME)
    results = await asyncio.gather(
        provider.extract_colors(image, mime_type),
        provider.identify_type(image, mime_type),
        provider.suggest_occasion(image, mime_type),
        provider.suggest_season(image, mime_type),
        provider.generate_name(image, mime_type),
        return_exceptions=True,
    )

    values = []
    for label, result, default in zip(labels, results, defaults):
        if isinstance(result, BaseException):
            logger.warning(f"AI {label} analysis failed, using default. Error: {result}")
            values.append(default)
        else:
            values.append(result)
    colors, garment_type, occasion, season, name = values
    return AIAnalysis(name=name, colors=colors, type=garment_type, occasion=occasion, season=season)


def default_analysis() -> AIAnalysis:
    return AIAnalysis(
        name=UNTITLED_ITEM_NAME,
        colors=list(DEFAULT_COLORS),
        type=DEFAULT_GARMENT_TYPE,
        occasion=DEFAULT_OCCASION,
        season=DEFAULT_SEASON,
    )


async def ingest_upload(
    db: AsyncSession,
    provider: Optional[ClassificationProvider],
    store: ObjectStore,
    user_id: uuid.UUID,
    filename: Optional[str],
    content_type: Optional[str],
    data: Optional[bytes],
    overrides: Optional[UploadOverrides] = None,
    ip_address: str = "unknown",
    max_size_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
) -> UploadResponse:
    """
    Normalize, store, classify and persist one uploaded photo.

    Neither image processing nor AI failures abort the upload; the item is
    created with whatever could be determined plus defaults.
    """
    if not data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded.")
    if len(data) > max_size_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File is too large (max {max_size_bytes // (1024 * 1024)}MB).",
        )
    overrides = overrides or UploadOverrides()
    mime_type = content_type or "application/octet-stream"

    storage_name = build_storage_filename(filename)
    thumbnail_name = f"thumb-{storage_name}"
    logger.info(f"Ingesting upload '{storage_name}' ({len(data)} bytes) for user {user_id}.")

    normalized = await normalize_image_async(data, mime_type)
    object_url, thumbnail_url = await asyncio.gather(
        store.put(normalized.primary, storage_name, normalized.mime_type),
        store.put(normalized.thumbnail, thumbnail_name, normalized.mime_type),
    )

    if provider is not None:
        analysis = await analyze_image(provider, normalized.primary, normalized.mime_type)
    else:
        logger.warning("No AI provider configured; using manual values and defaults.")
        analysis = default_analysis()

    name = (overrides.name or "").strip() or analysis.name or UNTITLED_ITEM_NAME
    item_in = ItemCreate(
        name=name,
        colors=analysis.colors,
        type=overrides.type or analysis.type,
        occasion=overrides.occasion or analysis.occasion,
        season=overrides.season or analysis.season,
        filename=storage_name,
        object_url=object_url,
        thumbnail_url=thumbnail_url,
    )
    db_item = await wardrobe_service.create_item(
        db,
        user_id,
        item_in,
        ip_address=ip_address,
        audit_action="UPLOAD_ITEM",
        audit_payload={"filename": storage_name, "aiAnalysis": analysis.model_dump(mode="json")},
    )
    return UploadResponse(success=True, item=ItemSchema.model_validate(db_item), ai_analysis=analysis)
