import time

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from api.schemas import (
    AdviceRequest,
    AdviceResponse,
    DiagnosisRequest,
    DiagnosisResponse,
    ImageAnalysisResponse,
    ParseRequest,
    SessionDetail,
    SessionSummary,
)
from src.config.logger import configure_logging, get_logger
from src.llm import AIServiceError
from src.llm.ai_client import get_medical_advice
from src.parser import DiagnosisResult, parse_diagnosis
from src.services import analyze_prescription_image, analyze_radiology_image, run_diagnosis
from src.utils.db import get_diagnosis, init_db, list_diagnoses
from src.utils.report_pdf import build_diagnosis_pdf_bytes

app = FastAPI(title="Aether Symptom Checker")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

configure_logging()
logger = get_logger(__name__)

_ANALYSIS_FAILED = "Analysis failed. Could not complete the analysis. Please try again later."


@app.middleware("http")
async def log_requests(request, call_next):
    start = time.perf_counter()
    logger.info("[request.start] %s %s", request.method, request.url.path)
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(
        "[request.end] %s %s status=%s elapsed=%.1fms",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
    )
    return response


@app.on_event("startup")
async def startup():
    await init_db()


@app.get("/api/health")
async def health():
    return {"ok": True}


@app.post("/api/diagnosis", response_model=DiagnosisResponse)
async def create_diagnosis(payload: DiagnosisRequest):
    try:
        outcome = await run_diagnosis(payload.symptoms, user_id=payload.user_id, user_role=payload.user_role)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except AIServiceError as exc:
        raise HTTPException(status_code=502, detail=_ANALYSIS_FAILED) from exc
    logger.info(
        "[diagnosis] done conditions=%s saved=%s",
        len(outcome.result.conditions),
        outcome.saved,
    )
    return DiagnosisResponse(
        symptoms=outcome.symptoms,
        result=outcome.result,
        session_id=outcome.session_id,
        saved=outcome.saved,
    )


@app.post("/api/diagnosis/parse", response_model=DiagnosisResult)
async def parse_response_text(payload: ParseRequest):
    return parse_diagnosis(payload.text)


@app.get("/api/diagnosis/{user_id}/sessions", response_model=list[SessionSummary])
async def list_sessions(user_id: str, limit: int = 20):
    return await list_diagnoses(user_id, limit=max(1, min(limit, 100)))


async def _load_session(user_id: str, session_id: str) -> dict:
    session = await get_diagnosis(user_id, session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Diagnosis session not found")
    return session


@app.get("/api/diagnosis/{user_id}/sessions/{session_id}", response_model=SessionDetail)
async def get_session(user_id: str, session_id: str):
    return await _load_session(user_id, session_id)


@app.get("/api/diagnosis/{user_id}/sessions/{session_id}/report.pdf")
async def download_report_pdf(user_id: str, session_id: str):
    session = await _load_session(user_id, session_id)
    pdf_bytes = build_diagnosis_pdf_bytes(
        session["result"],
        symptoms=session["symptoms"],
        session_id=session_id,
    )
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="diagnosis-{session_id[:8]}.pdf"'},
    )


@app.post("/api/advice", response_model=AdviceResponse)
async def medical_advice(payload: AdviceRequest):
    try:
        answer = await get_medical_advice(payload.question)
    except AIServiceError as exc:
        raise HTTPException(status_code=502, detail=f"Medical advice failed: {exc}") from exc
    return AdviceResponse(answer=answer)


@app.post("/api/imaging/radiology", response_model=ImageAnalysisResponse)
async def radiology(image: UploadFile = File(...), description: str = Form("")):
    content = await image.read()
    try:
        analysis = await analyze_radiology_image(content, description)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except AIServiceError as exc:
        raise HTTPException(status_code=502, detail=f"Image analysis failed: {exc}") from exc
    return ImageAnalysisResponse(analysis=analysis)


@app.post("/api/imaging/prescription", response_model=ImageAnalysisResponse)
async def prescription(image: UploadFile = File(...)):
    content = await image.read()
    try:
        analysis = await analyze_prescription_image(content)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except AIServiceError as exc:
        raise HTTPException(status_code=502, detail=f"Prescription analysis failed: {exc}") from exc
    return ImageAnalysisResponse(analysis=analysis)
