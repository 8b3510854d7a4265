# tests/test_services/test_following_service.py
import pytest

from ficsync.models import FollowingType
from ficsync.services import FollowingService


@pytest.fixture
def following(database):
    return FollowingService(database)


def test_follow_work_counts_current_chapters_as_seen(following):
    info = following.follow_work("999", "Stars Over Harbor", 3)

    assert info.type == FollowingType.WORK
    assert info.last_known_chapters == 3
    assert info.has_update is False
    assert following.is_following("999")


def test_followed_by_type(following):
    following.follow_work("999", "Stars Over Harbor", 3)
    following.follow_author("tidewriter", "tidewriter")

    assert [f.id for f in following.get_followed_works()] == ["999"]
    assert [f.id for f in following.get_followed_authors()] == ["tidewriter"]
    assert len(following.get_all_following()) == 2


def test_unfollow(following):
    following.follow_work("999", "Stars Over Harbor", 3)
    assert following.unfollow("999") is True
    assert following.unfollow("999") is False
    assert not following.is_following("999")


def test_mark_update_as_read(following, database):
    from ficsync.sa.repositories import FollowingRepository

    following.follow_work("999", "Stars Over Harbor", 3)
    with database.get_db() as session:
        FollowingRepository(session).update_status("999", 4, True)

    assert following.get_update_count() == 1
    assert [f.id for f in following.get_following_with_updates()] == ["999"]
    assert following.mark_update_as_read("999") is True
    assert following.get_update_count() == 0
