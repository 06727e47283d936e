"""Structured diagnosis records produced by the response parser."""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Level = Literal["High", "Medium", "Low"]


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Confidence(_Record):
    level: Level = Field(description="Extracted certainty label.")
    percentage: Optional[int] = Field(default=None, ge=0, le=100)


class Condition(_Record):
    name: str
    confidence: Confidence
    reasoning: str


class Test(_Record):
    __test__ = False  # keep pytest from collecting this model

    name: str
    purpose: Optional[str] = None
    urgency: Optional[Level] = None


class Treatment(_Record):
    action: str
    explanation: Optional[str] = None


class DiagnosisResult(_Record):
    """Aggregate of every parsed section.

    Serializes with the camelCase keys the web client stores
    (``warningSigns``, ``reasoningTree``) when dumped with ``by_alias=True``.
    """

    conditions: tuple[Condition, ...]
    tests: tuple[Test, ...]
    treatments: tuple[Treatment, ...]
    warning_signs: tuple[str, ...] = Field(default=(), alias="warningSigns")
    reasoning_tree: tuple[str, ...] = Field(alias="reasoningTree")
