"""Scene image generation through Gemini."""

from __future__ import annotations

import logging

from app.config import get_google_api_key, get_image_model

logger = logging.getLogger(__name__)

SCENE_PREAMBLE = "Create a high-quality, detailed image for a RPG scene with the following description:"
SCENE_STYLE = (
    "The image should be realistic, with atmospheric lighting and rich details "
    "suitable for a fantasy RPG setting."
)


class ImageProviderNotConfigured(RuntimeError):
    """GOOGLE_API_KEY is missing."""


class ImageGenerationError(RuntimeError):
    """The provider call failed or returned nothing usable."""


def generate_scene_image(prompt: str) -> str:
    """Send a scene prompt to Gemini and return what it produced (URL or data)."""
    api_key = get_google_api_key()
    if not api_key:
        raise ImageProviderNotConfigured("GOOGLE_API_KEY is not set")

    import google.generativeai as genai

    genai.configure(api_key=api_key)
    model = genai.GenerativeModel(get_image_model())
    logger.info("[image_generation] Generating scene image for prompt: %.60s...", prompt)
    try:
        response = model.generate_content([SCENE_PREAMBLE, prompt, SCENE_STYLE])
        image = (response.text or "").strip()
    except Exception as e:
        raise ImageGenerationError(str(e)) from e
    if not image:
        raise ImageGenerationError("Provider returned an empty response")
    logger.info("[image_generation] Scene image generated")
    return image
