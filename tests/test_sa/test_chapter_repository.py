# tests/test_sa/test_chapter_repository.py
import pytest

from ficsync.models import ChapterData
from ficsync.sa.repositories import ChapterRepository


@pytest.fixture
def chapter_repo(db_session):
    """Fixture to create a ChapterRepository instance"""
    return ChapterRepository(db_session)


def test_upsert_many_and_get_for_work(chapter_repo, chapter_factory):
    """Test chapters come back in reading order"""
    chapters = chapter_factory("999", 3)
    chapter_repo.upsert_many(list(reversed(chapters)))

    stored = chapter_repo.get_for_work("999")
    assert [c.chapter_number for c in stored] == [1, 2, 3]
    assert stored[0].id == "999_1"
    assert stored[1].content == "<p>Text of chapter 2.</p>"
    assert chapter_repo.count_for_work("999") == 3


def test_upsert_keeps_one_row_per_position(chapter_repo):
    """Test re-storing a chapter overwrites it"""
    chapter_repo.upsert(ChapterData(work_id="999", chapter_number=2, title="Draft"))
    chapter_repo.upsert(ChapterData(work_id="999", chapter_number=2, title="Final", notes="Beta'd"))

    assert chapter_repo.count() == 1
    chapter = chapter_repo.get("999", 2)
    assert chapter.title == "Final"
    assert chapter.notes == "Beta'd"
    assert chapter_repo.get_by_id("999_2") is not None


def test_get_missing_chapter(chapter_repo):
    assert chapter_repo.get("999", 7) is None


def test_search_by_title(chapter_repo):
    chapter_repo.upsert_many([
        ChapterData(work_id="1", chapter_number=1, title="Shore Leave"),
        ChapterData(work_id="1", chapter_number=2, title="Red Alert"),
    ])
    assert [c.chapter_number for c in chapter_repo.search("shore")] == [1]


def test_delete_operations(chapter_repo, chapter_factory):
    chapter_repo.upsert_many(chapter_factory("1", 3), cached_at=1000)
    chapter_repo.upsert_many(chapter_factory("2", 2), cached_at=9000)

    assert chapter_repo.delete("1", 3) is True
    assert chapter_repo.delete("1", 3) is False
    assert chapter_repo.delete_older_than(5000) == 2
    assert chapter_repo.delete_for_work("2") == 2
    assert chapter_repo.count() == 0
