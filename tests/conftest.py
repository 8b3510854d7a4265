# tests/conftest.py
import sys
import pytest
from pathlib import Path
from typing import List
from unittest.mock import Mock

# Add project root to Python path
project_root = str(Path(__file__).parent.parent)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from ficsync.config import Settings
from ficsync.models import WorkData, ChapterData
from ficsync.remote import ArchiveSource
from ficsync.sa.database import Database

FIXTURES_DIR = Path(__file__).parent / "fixtures"


class FakeClock:
    """Monotonic clock whose sleep advances time instantly"""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def load_fixture():
    """Read an HTML fixture by file name."""
    def _load(name: str) -> str:
        return (FIXTURES_DIR / name).read_text(encoding="utf-8")
    return _load


@pytest.fixture
def database(tmp_path):
    """Create a test database with a fresh schema"""
    db = Database(f"sqlite:///{tmp_path / 'test_ficsync.db'}")
    db.init_db()
    yield db
    db.dispose()


@pytest.fixture
def db_session(database):
    """Create a new database session for a test"""
    session = database.get_session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def test_settings():
    """Settings with no backoff so retries run instantly"""
    return Settings(database_url="sqlite://", backoff_seconds=0, max_attempts=3, max_workers=2)


@pytest.fixture
def work_factory():
    """Build WorkData records with sensible defaults."""
    def _make(work_id: str = "999", **overrides) -> WorkData:
        fields = dict(
            id=work_id,
            title=f"Work {work_id}",
            author="tidewriter",
            author_id="tidewriter",
            summary="<p>A summary.</p>",
            rating="Mature",
            warnings=["No Archive Warnings Apply"],
            categories=["M/M"],
            fandoms=["Star Trek"],
            relationships=["James T. Kirk/Spock"],
            characters=["James T. Kirk", "Spock"],
            additional_tags=["Hurt/Comfort"],
            language="English",
            words=4500,
            current_chapters=3,
            total_chapters="5",
            kudos=120,
            bookmarks_count=14,
            hits=2000,
            published_date=1_685_577_600_000,
            updated_date=1_708_387_200_000,
        )
        fields.update(overrides)
        return WorkData(**fields)
    return _make


@pytest.fixture
def chapter_factory():
    """Build a list of chapters numbered 1..count."""
    def _make(work_id: str = "999", count: int = 3) -> List[ChapterData]:
        return [
            ChapterData(
                work_id=work_id,
                chapter_number=number,
                title=f"Chapter {number}",
                content=f"<p>Text of chapter {number}.</p>",
                word_count=4,
            )
            for number in range(1, count + 1)
        ]
    return _make


@pytest.fixture
def mock_source():
    """ArchiveSource stand-in; configure return values per test"""
    return Mock(spec=ArchiveSource)
