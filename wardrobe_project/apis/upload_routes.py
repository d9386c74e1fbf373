# wardrobe_project/apis/upload_routes.py
from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.database import get_db
from ..db import orm_models as models
from ..models.item_models import GarmentType, Occasion, Season, UploadOverrides, UploadResponse
from ..core.ai_provider import ClassificationProvider
from ..core.object_store import ObjectStore
from ..core.resources import get_object_store, get_provider
from ..core.security import get_current_user, get_client_ip
from ..services import ingestion_service

router = APIRouter(tags=["Upload"])

@router.post("/upload", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_item(
    request: Request,
    file: Optional[UploadFile] = File(None),
    name: Optional[str] = Form(None),
    type: Optional[GarmentType] = Form(None),
    occasion: Optional[Occasion] = Form(None),
    season: Optional[Season] = Form(None),
    db: AsyncSession = Depends(get_db),
    provider: Optional[ClassificationProvider] = Depends(get_provider),
    store: ObjectStore = Depends(get_object_store),
    current_user: models.User = Depends(get_current_user),
):
    """
    Upload a photo of a clothing item. The image is resized, stored and
    classified by the AI provider; any field given in the form wins over
    the AI's guess.
    """
    data = await file.read() if file is not None else None
    return await ingestion_service.ingest_upload(
        db=db,
        provider=provider,
        store=store,
        user_id=current_user.id,
        filename=file.filename if file is not None else None,
        content_type=file.content_type if file is not None else None,
        data=data,
        overrides=UploadOverrides(name=name, type=type, occasion=occasion, season=season),
        ip_address=get_client_ip(request),
        max_size_bytes=request.app.state.settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024,
    )
