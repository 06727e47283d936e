from src.services.diagnosis import DiagnosisOutcome, run_diagnosis
from src.services.imaging import analyze_prescription_image, analyze_radiology_image

__all__ = [
    "DiagnosisOutcome",
    "analyze_prescription_image",
    "analyze_radiology_image",
    "run_diagnosis",
]
