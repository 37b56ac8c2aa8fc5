import pytest

from record_tool import db as record_db


@pytest.fixture
def record_db_path(tmp_path, monkeypatch):
    path = str(tmp_path / "records.db")
    monkeypatch.setattr(record_db, "DB_PATH", path)
    record_db.init_db()
    return path
