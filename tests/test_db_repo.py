import sys
from datetime import datetime
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import pytest

from db import repository as repo


@pytest.fixture(autouse=True)
def temp_db(tmp_path, monkeypatch):
    # Use a temporary database for isolation
    monkeypatch.setenv("MATRI_DB_PATH", str(tmp_path / "matri.db"))
    yield tmp_path / "matri.db"


def _appointment(user_id="u1", **extra):
    return {"user_id": user_id, "doctor_name": "Dr. Lee", "appointment_date": datetime(2024, 7, 1, 10, 0), **extra}


def test_insert_fills_defaults_and_lists_by_owner(temp_db):
    row = repo.insert("appointments", _appointment())
    repo.insert("appointments", _appointment(user_id="someone-else"))

    assert row["id"]
    assert row["status"] == "upcoming"
    assert temp_db.exists()

    rows = repo.list_by_owner("appointments", "u1")
    assert [r["id"] for r in rows] == [row["id"]]
    assert rows[0]["appointment_date"] == datetime(2024, 7, 1, 10, 0)


def test_update_and_delete_by_id():
    row = repo.insert("appointments", _appointment())
    updated = repo.update_by_id("appointments", row["id"], {"status": "completed"})
    assert updated["status"] == "completed"
    assert repo.get_by_id("appointments", row["id"])["status"] == "completed"

    repo.delete_by_id("appointments", row["id"])
    assert repo.get_by_id("appointments", row["id"]) is None


def test_missing_rows_raise():
    with pytest.raises(repo.RecordMissing):
        repo.update_by_id("appointments", "nope", {"status": "completed"})
    with pytest.raises(repo.RecordMissing):
        repo.delete_by_id("appointments", "nope")


def test_insert_many_is_all_or_nothing():
    good = {"user_id": "u1", "symptom_type": "nausea", "severity": 3}
    bad = {"user_id": "u1", "symptom_type": None, "severity": 3}
    with pytest.raises(repo.RemoteStoreError):
        repo.insert_many("symptoms_log", [good, bad])
    assert repo.list_by_owner("symptoms_log", "u1") == []

    rows = repo.insert_many("symptoms_log", [good, {**good, "symptom_type": "fatigue"}])
    assert len(rows) == 2
    assert len(repo.list_by_owner("symptoms_log", "u1")) == 2


def test_unique_violation_is_duplicate():
    repo.insert("auth_accounts", {"email": "a@example.com", "password_hash": "x"})
    with pytest.raises(repo.DuplicateRecord):
        repo.insert("auth_accounts", {"email": "a@example.com", "password_hash": "y"})
    assert repo.find_one("auth_accounts", email="a@example.com")["password_hash"] == "x"


def test_unknown_table():
    with pytest.raises(repo.RemoteStoreError):
        repo.list_by_owner("nope", "u1")
