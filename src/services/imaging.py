"""Radiology and prescription image analysis."""

from __future__ import annotations

from src.config.settings import settings
from src.llm import ai_client
from src.utils.image_utils import (
    decode_base64_image,
    image_bytes_to_base64,
    image_mime_type,
    resize_image_if_needed,
    split_data_url,
)


def prepare_image(image: bytes | str) -> tuple[str, str]:
    """Validate and downscale an upload; returns ``(mime_type, base64_body)``.

    Accepts raw bytes, plain base64 or a ``data:image/...;base64,`` URL.
    Raises ValueError for empty, oversized or undecodable input.
    """
    if isinstance(image, (bytes, bytearray)):
        raw = bytes(image)
        if not raw:
            raise ValueError("image must not be empty.")
        if len(raw) > settings.IMAGE_MAX_BYTES:
            raise ValueError(f"image exceeds max allowed size of {settings.IMAGE_MAX_BYTES} bytes.")
        mime_type = image_mime_type(raw)
    else:
        mime_type, encoded = split_data_url(image)
        raw = decode_base64_image(encoded, settings.IMAGE_MAX_BYTES)
    resized = resize_image_if_needed(raw, settings.IMAGE_MAX_SIDE)
    return mime_type, image_bytes_to_base64(resized)


async def analyze_radiology_image(image: bytes | str, description: str = "") -> str:
    mime_type, encoded = prepare_image(image)
    return await ai_client.analyze_image(encoded, description, mime_type=mime_type)


async def analyze_prescription_image(image: bytes | str) -> str:
    mime_type, encoded = prepare_image(image)
    return await ai_client.analyze_prescription(encoded, mime_type=mime_type)
