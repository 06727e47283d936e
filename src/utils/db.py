import json
import os
import uuid
from datetime import datetime, timezone

import aiosqlite

from src.config.settings import settings
from src.parser.models import DiagnosisResult


def _db_path() -> str:
    return settings.DB_PATH


async def init_db():
    db_dir = os.path.dirname(_db_path())
    if db_dir:
        os.makedirs(db_dir, exist_ok=True)
    async with aiosqlite.connect(_db_path()) as db:
        await db.execute("""
            CREATE TABLE IF NOT EXISTS diagnosis_sessions (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                user_role TEXT,
                symptoms TEXT NOT NULL,
                result TEXT NOT NULL,
                status TEXT DEFAULT 'completed',
                summary TEXT,
                created_at TEXT NOT NULL
            )
        """)
        await db.execute(
            "CREATE INDEX IF NOT EXISTS idx_sessions_user ON diagnosis_sessions (user_id, created_at)"
        )
        await db.commit()


def build_summary(symptoms: str) -> str:
    return f"Analysis of symptoms: {symptoms[:settings.SUMMARY_PREVIEW_CHARS]}..."


def _row_to_session(row: aiosqlite.Row) -> dict:
    session = dict(row)
    session["result"] = DiagnosisResult.model_validate(json.loads(session["result"]))
    return session


async def save_diagnosis(
    user_id: str,
    symptoms: str,
    result: DiagnosisResult,
    user_role: str | None = None,
) -> str:
    session_id = uuid.uuid4().hex
    async with aiosqlite.connect(_db_path()) as db:
        await db.execute(
            "INSERT INTO diagnosis_sessions "
            "(id, user_id, user_role, symptoms, result, status, summary, created_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            (
                session_id,
                user_id,
                user_role,
                symptoms,
                result.model_dump_json(by_alias=True),
                "completed",
                build_summary(symptoms),
                datetime.now(timezone.utc).isoformat(),
            ),
        )
        await db.commit()
    return session_id


async def get_diagnosis(user_id: str, session_id: str) -> dict | None:
    async with aiosqlite.connect(_db_path()) as db:
        db.row_factory = aiosqlite.Row
        cursor = await db.execute(
            "SELECT * FROM diagnosis_sessions WHERE user_id = ? AND id = ?",
            (user_id, session_id),
        )
        row = await cursor.fetchone()
        return _row_to_session(row) if row else None


async def list_diagnoses(user_id: str, limit: int = 20) -> list[dict]:
    async with aiosqlite.connect(_db_path()) as db:
        db.row_factory = aiosqlite.Row
        cursor = await db.execute(
            "SELECT id, user_id, user_role, symptoms, status, summary, created_at "
            "FROM diagnosis_sessions WHERE user_id = ? ORDER BY created_at DESC, rowid DESC LIMIT ?",
            (user_id, limit),
        )
        return [dict(r) for r in await cursor.fetchall()]
