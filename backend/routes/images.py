import logging

from fastapi import APIRouter
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from app.schemas import GenerateImageRequest
from services.image_generation import (
    ImageGenerationError,
    ImageProviderNotConfigured,
    generate_scene_image,
)

router = APIRouter(tags=["images"])
logger = logging.getLogger(__name__)


@router.post("/generate-image")
async def generate_image(request: GenerateImageRequest) -> JSONResponse:
    prompt = (request.prompt or "").strip()
    if not prompt:
        return JSONResponse(status_code=400, content={"error": "prompt is required"})
    try:
        image_url = await run_in_threadpool(generate_scene_image, prompt)
    except ImageProviderNotConfigured as e:
        return JSONResponse(status_code=503, content={"error": str(e)})
    except ImageGenerationError as e:
        logger.warning("[images] Image generation failed: %s", e)
        return JSONResponse(status_code=502, content={"error": str(e)})
    return JSONResponse(content={"imageUrl": image_url})
