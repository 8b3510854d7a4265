# tests/test_services/test_bookmark_service.py
import pytest

from ficsync.sa.repositories import WorkRepository
from ficsync.services import BookmarkService


@pytest.fixture
def bookmarks(database):
    return BookmarkService(database)


def test_add_and_remove(bookmarks, database, work_factory):
    with database.get_db() as session:
        WorkRepository(session).upsert(work_factory("999"))

    info = bookmarks.add_bookmark("999", notes="reread")

    assert info.notes == "reread"
    assert info.work is not None
    assert info.work.is_bookmarked
    assert bookmarks.is_bookmarked("999")
    assert bookmarks.count() == 1

    assert bookmarks.remove_bookmark("999") is True
    assert bookmarks.get_bookmark("999") is None


def test_bookmark_without_cached_work(bookmarks):
    info = bookmarks.add_bookmark("404")
    assert info.work is None
    assert [b.work_id for b in bookmarks.get_all_bookmarks()] == ["404"]


def test_record_chapter_view_bookmarks_on_first_read(bookmarks, database, work_factory):
    """Test opening a chapter tracks position as a share of posted chapters"""
    with database.get_db() as session:
        WorkRepository(session).upsert(work_factory("999", current_chapters=4))

    first = bookmarks.record_chapter_view("999", 1)
    assert first.current_chapter == 1
    assert first.progress == 0.25

    later = bookmarks.record_chapter_view("999", 3, scroll_position=120)
    assert later.current_chapter == 3
    assert later.scroll_position == 120
    assert later.progress == 0.75
    assert bookmarks.count() == 1


def test_record_chapter_view_unknown_work(bookmarks):
    info = bookmarks.record_chapter_view("404", 2)
    assert info.progress == 0.0
    assert info.current_chapter == 2


def test_updates_on_missing_bookmark(bookmarks):
    assert bookmarks.update_reading_progress("404", 2) is False
    assert bookmarks.update_notes("404", "x") is False


def test_update_notes(bookmarks):
    bookmarks.add_bookmark("999")
    assert bookmarks.update_notes("999", "Favorite") is True
    assert bookmarks.get_bookmark("999").notes == "Favorite"
