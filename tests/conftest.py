import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from src.config.settings import settings


SAMPLE_RESPONSE = """✅ Possible Condition(s):
• Tension headache - Confidence: High (75%)

🧪 Recommended Tests:
• Blood pressure check - Purpose: rule out hypertension - Urgency: Low

💊 Treatment Recommendations:
• Rest - Reduce screen time

🚨 When to See a Doctor:
• Sudden severe headache

🧠 Medical Reasoning:
• Band-like pain with stress → muscle tension pattern
"""


@pytest.fixture
def sample_response() -> str:
    return SAMPLE_RESPONSE


@pytest.fixture
def temp_db(tmp_path, monkeypatch):
    db_path = tmp_path / "diagnoses.db"
    monkeypatch.setattr(settings, "DB_PATH", str(db_path))
    return db_path
