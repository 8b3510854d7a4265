# tests/test_sa/test_work_repository.py
import pytest

from ficsync.models import ChapterData
from ficsync.sa.models import Work, Chapter, Bookmark, Download, WorkTag
from ficsync.sa.repositories import (
    WorkRepository, ChapterRepository, BookmarkRepository, DownloadRepository, TagRepository,
)


@pytest.fixture
def work_repo(db_session):
    """Fixture to create a WorkRepository instance"""
    return WorkRepository(db_session)


def test_upsert_and_get(work_repo, work_factory):
    """Test storing a work and reading every field back"""
    data = work_factory("999", series_name="The 5 Year Mission", series_part=2)
    work_repo.upsert(data, cached_at=5000)

    work = work_repo.get("999")
    assert work is not None
    assert work.title == "Work 999"
    assert work.fandoms == ["Star Trek"]
    assert work.characters == ["James T. Kirk", "Spock"]
    assert work.total_chapters == "5"
    assert work.series_part == 2
    assert work.cached_at == 5000


def test_upsert_replaces_existing(work_repo, work_factory, db_session):
    """Test that a second upsert overwrites instead of duplicating"""
    work_repo.upsert(work_factory("999", current_chapters=3), cached_at=1000)
    work_repo.upsert(work_factory("999", current_chapters=4, kudos=500), cached_at=2000)

    assert db_session.query(Work).count() == 1
    work = work_repo.get("999")
    assert work.current_chapters == 4
    assert work.kudos == 500
    assert work.cached_at == 2000


def test_get_nonexistent_work(work_repo):
    assert work_repo.get("nonexistent") is None
    assert not work_repo.exists("nonexistent")


def test_search_matches_title_author_and_summary(work_repo, work_factory):
    """Test case-insensitive substring search over cached works"""
    work_repo.upsert_many([
        work_factory("1", title="Shore Leave", updated_date=100),
        work_factory("2", title="Other", author="harborlight", updated_date=300),
        work_factory("3", title="Third", summary="<p>Leave it to McCoy</p>", updated_date=200),
        work_factory("4", title="Unrelated", summary="", author="someone"),
    ])

    assert [w.id for w in work_repo.search("leave")] == ["3", "1"]
    assert [w.id for w in work_repo.search("HARBOR")] == ["2"]
    assert work_repo.search("leave", limit=1)[0].id == "3"


def test_get_by_author(work_repo, work_factory):
    work_repo.upsert_many([
        work_factory("1", author="tidewriter", updated_date=100),
        work_factory("2", author="tidewriter", updated_date=200),
        work_factory("3", author="someone"),
    ])
    assert [w.id for w in work_repo.get_by_author("tidewriter")] == ["2", "1"]


def test_upsert_syncs_tags(work_repo, work_factory, db_session):
    """Test that tag links follow the stored work"""
    work_repo.upsert(work_factory("1", additional_tags=["Hurt/Comfort", "Fluff"]))
    work_repo.upsert(work_factory("2", additional_tags=["Fluff"]))

    tags = TagRepository(db_session)
    assert sorted(tags.get_work_ids_for_tag("Fluff")) == ["1", "2"]
    assert tags.get("Fluff").count == 2
    assert tags.get("Fluff").type == "freeform"
    assert tags.get("Mature").type == "rating"

    work_repo.upsert(work_factory("1", additional_tags=[]))
    assert tags.get("Fluff").count == 1
    assert tags.get("Hurt/Comfort").count == 0
    assert "Fluff" not in tags.get_tag_names_for_work("1")


def test_delete_cascades(work_repo, work_factory, db_session):
    """Test deleting a work removes its chapters, bookmark, download and tag links"""
    work_repo.upsert(work_factory("999"))
    work_repo.upsert(work_factory("1000"))
    ChapterRepository(db_session).upsert(ChapterData(work_id="999", chapter_number=1, content="x"))
    ChapterRepository(db_session).upsert(ChapterData(work_id="1000", chapter_number=1, content="y"))
    BookmarkRepository(db_session).upsert("999")
    DownloadRepository(db_session).reset_pending("999", 3)

    assert work_repo.delete("999") is True

    assert work_repo.get("999") is None
    assert db_session.query(Chapter).filter(Chapter.work_id == "999").count() == 0
    assert db_session.query(Bookmark).count() == 0
    assert db_session.query(Download).count() == 0
    assert db_session.query(WorkTag).filter(WorkTag.work_id == "999").count() == 0
    # The other work is untouched
    assert work_repo.exists("1000")
    assert db_session.query(Chapter).count() == 1


def test_delete_nonexistent(work_repo):
    assert work_repo.delete("nonexistent") is False


def test_delete_older_than(work_repo, work_factory, db_session):
    work_repo.upsert(work_factory("old"), cached_at=1000)
    work_repo.upsert(work_factory("new"), cached_at=9000)
    ChapterRepository(db_session).upsert(ChapterData(work_id="old", chapter_number=1), cached_at=9000)

    deleted = work_repo.delete_older_than(5000)

    assert deleted == 1
    assert work_repo.count() == 1
    assert work_repo.exists("new")
    assert ChapterRepository(db_session).count_for_work("old") == 0
