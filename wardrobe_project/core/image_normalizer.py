# wardrobe_project/core/image_normalizer.py
import asyncio
import io
import logging
from dataclasses import dataclass

from PIL import Image, ImageOps

logger = logging.getLogger(__name__)

PRIMARY_MAX_SIZE = (1200, 1200)
PRIMARY_QUALITY = 85
THUMBNAIL_MAX_SIZE = (400, 400)
THUMBNAIL_QUALITY = 80
JPEG_MIME_TYPE = "image/jpeg"


@dataclass
class NormalizedImage:
    primary: bytes
    thumbnail: bytes
    mime_type: str
    processed: bool  # False when the original bytes were passed through


def _to_jpeg(data: bytes, max_size, quality: int) -> bytes:
    with Image.open(io.BytesIO(data)) as image:
        image = ImageOps.exif_transpose(image)
        if image.mode not in ("RGB", "L"):
            image = image.convert("RGB")
        # thumbnail() keeps the aspect ratio and never upscales
        image.thumbnail(max_size)
        output = io.BytesIO()
        image.save(output, format="JPEG", quality=quality, optimize=True)
        return output.getvalue()


def normalize_image(data: bytes, mime_type: str) -> NormalizedImage:
    """
    Produces a bounded JPEG primary image and a smaller thumbnail.

    Fails open: undecodable input is passed through unchanged, and a failed
    thumbnail falls back to the primary bytes. Never raises.
    """
    try:
        primary = _to_jpeg(data, PRIMARY_MAX_SIZE, PRIMARY_QUALITY)
    except Exception as e:
        logger.warning(f"Image normalization failed, storing original bytes. Error: {e}")
        return NormalizedImage(primary=data, thumbnail=data, mime_type=mime_type, processed=False)

    try:
        thumbnail = _to_jpeg(primary, THUMBNAIL_MAX_SIZE, THUMBNAIL_QUALITY)
    except Exception as e:
        logger.warning(f"Thumbnail generation failed, reusing primary image. Error: {e}")
        thumbnail = primary

    return NormalizedImage(primary=primary, thumbnail=thumbnail, mime_type=JPEG_MIME_TYPE, processed=True)


async def normalize_image_async(data: bytes, mime_type: str) -> NormalizedImage:
    return await asyncio.to_thread(normalize_image, data, mime_type)
