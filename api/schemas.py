from pydantic import BaseModel, Field

from src.parser.models import DiagnosisResult


class DiagnosisRequest(BaseModel):
    symptoms: str = Field(min_length=1)
    user_id: str | None = None
    user_role: str | None = None


class DiagnosisResponse(BaseModel):
    symptoms: str
    result: DiagnosisResult
    session_id: str | None = None
    saved: bool = False


class ParseRequest(BaseModel):
    text: str


class SessionSummary(BaseModel):
    id: str
    user_id: str
    user_role: str | None = None
    symptoms: str
    status: str
    summary: str | None = None
    created_at: str


class SessionDetail(SessionSummary):
    result: DiagnosisResult


class AdviceRequest(BaseModel):
    question: str = Field(min_length=1)


class AdviceResponse(BaseModel):
    answer: str


class ImageAnalysisResponse(BaseModel):
    analysis: str
