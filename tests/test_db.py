import asyncio

from src.parser import parse_diagnosis
from src.utils import db


def _run(coro):
    return asyncio.run(coro)


def test_save_and_get_diagnosis(temp_db, sample_response):
    result = parse_diagnosis(sample_response)

    async def _scenario():
        await db.init_db()
        session_id = await db.save_diagnosis("user-1", "headache for three days", result, user_role="patient")
        return session_id, await db.get_diagnosis("user-1", session_id)

    session_id, session = _run(_scenario())

    assert temp_db.exists()
    assert session["id"] == session_id
    assert session["user_role"] == "patient"
    assert session["status"] == "completed"
    assert session["summary"] == "Analysis of symptoms: headache for three days..."
    assert session["result"] == result


def test_get_diagnosis_is_scoped_to_user(temp_db, sample_response):
    result = parse_diagnosis(sample_response)

    async def _scenario():
        await db.init_db()
        session_id = await db.save_diagnosis("user-1", "headache for three days", result)
        return await db.get_diagnosis("user-2", session_id)

    assert _run(_scenario()) is None


def test_list_diagnoses_newest_first(temp_db, sample_response):
    result = parse_diagnosis(sample_response)

    async def _scenario():
        await db.init_db()
        first = await db.save_diagnosis("user-1", "first symptoms text", result)
        second = await db.save_diagnosis("user-1", "second symptoms text", result)
        await db.save_diagnosis("someone-else", "other symptoms text", result)
        return first, second, await db.list_diagnoses("user-1")

    first, second, sessions = _run(_scenario())

    assert [s["id"] for s in sessions] == [second, first]
    assert "result" not in sessions[0]


def test_summary_is_truncated():
    summary = db.build_summary("x" * 250)

    assert summary == "Analysis of symptoms: " + "x" * 100 + "..."
