# ficsync/services/following_service.py

from typing import List

from ficsync.models import FollowingInfo, FollowingType
from ficsync.sa.database import Database
from ficsync.sa.repositories import FollowingRepository


class FollowingService:
    def __init__(self, database: Database):
        self.database = database

    def follow_work(self, work_id: str, title: str, current_chapters: int) -> FollowingInfo:
        """Follow a work, counting its current chapters as already seen"""
        with self.database.get_db() as session:
            following = FollowingRepository(session).upsert(
                work_id, FollowingType.WORK, title, last_known_chapters=current_chapters
            )
            return FollowingInfo.from_entity(following)

    def follow_author(self, author_id: str, name: str) -> FollowingInfo:
        with self.database.get_db() as session:
            following = FollowingRepository(session).upsert(author_id, FollowingType.AUTHOR, name)
            return FollowingInfo.from_entity(following)

    def unfollow(self, following_id: str) -> bool:
        with self.database.get_db() as session:
            return FollowingRepository(session).delete(following_id)

    def get_all_following(self) -> List[FollowingInfo]:
        with self.database.get_db() as session:
            return [FollowingInfo.from_entity(f) for f in FollowingRepository(session).get_all()]

    def get_following_with_updates(self) -> List[FollowingInfo]:
        with self.database.get_db() as session:
            return [FollowingInfo.from_entity(f) for f in FollowingRepository(session).get_with_updates()]

    def get_followed_works(self) -> List[FollowingInfo]:
        with self.database.get_db() as session:
            rows = FollowingRepository(session).get_by_type(FollowingType.WORK)
            return [FollowingInfo.from_entity(f) for f in rows]

    def get_followed_authors(self) -> List[FollowingInfo]:
        with self.database.get_db() as session:
            rows = FollowingRepository(session).get_by_type(FollowingType.AUTHOR)
            return [FollowingInfo.from_entity(f) for f in rows]

    def is_following(self, following_id: str) -> bool:
        with self.database.get_db() as session:
            return FollowingRepository(session).exists(following_id)

    def mark_update_as_read(self, following_id: str) -> bool:
        with self.database.get_db() as session:
            return FollowingRepository(session).mark_read(following_id)

    def get_update_count(self) -> int:
        with self.database.get_db() as session:
            return FollowingRepository(session).count_updates()
