# tests/test_sa/test_database.py
import threading

import pytest
from sqlalchemy.pool import NullPool, QueuePool

from ficsync.sa.database import Database, engine_options
from ficsync.sa.models import Download
from ficsync.sa.repositories import DownloadRepository


def test_sqlite_options():
    options = engine_options("sqlite:///library.db")

    assert options["poolclass"] is NullPool
    assert options["connect_args"]["check_same_thread"] is False


def test_server_options():
    options = engine_options("postgresql://reader@localhost/ficsync")

    assert options["poolclass"] is QueuePool
    assert "connect_args" not in options


def test_url_defaults_to_settings(monkeypatch, tmp_path):
    url = f"sqlite:///{tmp_path / 'env.db'}"
    monkeypatch.setenv("DATABASE_URL", url)

    db = Database()
    try:
        assert db.url == url
        assert db.is_sqlite
    finally:
        db.dispose()


def test_get_db_rolls_back_on_error(database):
    with pytest.raises(RuntimeError):
        with database.get_db() as session:
            session.add(Download(work_id="999", started_at=1000))
            session.flush()
            raise RuntimeError("boom")

    with database.get_db() as session:
        assert DownloadRepository(session).get("999") is None


def test_sessions_usable_from_worker_threads(database):
    """Test a row written on another thread is visible here"""
    def write():
        with database.get_db() as session:
            DownloadRepository(session).reset_pending("999", 3)

    worker = threading.Thread(target=write)
    worker.start()
    worker.join(10)

    with database.get_db() as session:
        assert DownloadRepository(session).get("999").total_chapters == 3
