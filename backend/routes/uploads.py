import logging

from fastapi import APIRouter, File, UploadFile
from fastapi.responses import JSONResponse

from services.uploads import InvalidUploadError, store_character_image

router = APIRouter(tags=["uploads"])
logger = logging.getLogger(__name__)


@router.post("/upload/character-image")
async def upload_character_image(image: UploadFile | None = File(None)) -> JSONResponse:
    """Store a character portrait and return its URL as {"imageUrl": ...}."""
    if image is None:
        return JSONResponse(status_code=400, content={"error": "No image was uploaded"})
    data = await image.read()
    try:
        url = store_character_image(data, content_type=image.content_type, filename=image.filename)
    except InvalidUploadError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})
    except Exception as e:
        logger.exception("[uploads] Character image upload failed")
        return JSONResponse(status_code=500, content={"error": str(e)})
    return JSONResponse(content={"imageUrl": url})
