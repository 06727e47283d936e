"""Symptom, advice and image completions against the configured chat model."""

from __future__ import annotations

from src.config.logger import get_logger, log_stage
from src.config.settings import settings
from src.llm.llm import AIServiceError, get_llm
from src.prompts.prompts import (
    PRESCRIPTION_PROMPT,
    PromptType,
    build_advice_prompt,
    build_radiology_prompt,
    build_symptom_prompt,
)

logger = get_logger(__name__)


async def analyze_symptoms(symptoms: str, prompt_type: PromptType = "symptoms") -> str:
    """Return the raw model answer for ``symptoms`` using the selected template.

    Raises:
        ValueError: unknown ``prompt_type``.
        AIServiceError: the model call failed or returned nothing.
    """
    prompt = build_symptom_prompt(symptoms, prompt_type)
    llm = get_llm(agent_key="ANALYZER", temperature=0.2)
    try:
        text = await llm.ainvoke(prompt)
    except AIServiceError:
        logger.exception("[ai_client] %s analysis failed", prompt_type)
        raise
    log_stage(logger, f"analyze_{prompt_type}", text)
    return text


async def get_medical_advice(question: str) -> str:
    llm = get_llm(agent_key="ADVISOR", temperature=0.7)
    try:
        text = await llm.ainvoke(build_advice_prompt(question))
    except AIServiceError:
        logger.exception("[ai_client] medical advice failed")
        raise
    log_stage(logger, "medical_advice", text)
    return text


async def analyze_image(image_base64: str, description: str = "", mime_type: str = "image/jpeg") -> str:
    """Radiology-style reading of a chest X-ray."""
    llm = get_llm(agent_key="VISION", model=settings.DEFAULT_IMAGE_MODEL, temperature=0.2)
    try:
        text = await llm.ainvoke_with_image(build_radiology_prompt(description), image_base64, mime_type)
    except AIServiceError:
        logger.exception("[ai_client] image analysis failed")
        raise
    log_stage(logger, "radiology", text)
    return text


async def analyze_prescription(image_base64: str, mime_type: str = "image/jpeg") -> str:
    llm = get_llm(agent_key="VISION", model=settings.DEFAULT_IMAGE_MODEL, temperature=0.2)
    try:
        text = await llm.ainvoke_with_image(PRESCRIPTION_PROMPT, image_base64, mime_type)
    except AIServiceError:
        logger.exception("[ai_client] prescription analysis failed")
        raise
    log_stage(logger, "prescription", text)
    return text
