"""Symptom check: one model call, parse, persist."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from src.config.logger import get_logger
from src.config.settings import settings
from src.llm import ai_client
from src.parser import DiagnosisResult, parse_diagnosis
from src.utils import db

logger = get_logger(__name__)


class DiagnosisOutcome(BaseModel):
    symptoms: str
    result: DiagnosisResult
    raw_text: str
    session_id: Optional[str] = None
    saved: bool = False


def validate_symptoms(symptoms: str) -> str:
    normalized = (symptoms or "").strip()
    if len(normalized) < settings.SYMPTOMS_MIN_LENGTH:
        raise ValueError("Please describe your symptoms in more detail")
    return normalized


async def run_diagnosis(
    symptoms: str,
    user_id: Optional[str] = None,
    user_role: Optional[str] = None,
) -> DiagnosisOutcome:
    """Analyze ``symptoms`` and store the result for ``user_id`` when given.

    ``AIServiceError`` from the model call propagates; storage failures are
    logged and reported through ``saved=False`` only.
    """
    symptoms = validate_symptoms(symptoms)
    raw_text = await ai_client.analyze_symptoms(symptoms, "symptoms")
    result = parse_diagnosis(raw_text)
    outcome = DiagnosisOutcome(symptoms=symptoms, result=result, raw_text=raw_text)

    if not user_id:
        return outcome

    try:
        outcome.session_id = await db.save_diagnosis(
            user_id=user_id,
            symptoms=symptoms,
            result=result,
            user_role=user_role,
        )
        outcome.saved = True
    except Exception:
        logger.exception("[diagnosis] failed to save session for user=%s", user_id)
    return outcome
