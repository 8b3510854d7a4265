# ficsync/sa/repositories/following.py

from typing import Optional, List
from sqlalchemy import desc
from sqlalchemy.orm import Session

from ficsync.models import FollowingType
from ficsync.sa.models import Following
from ficsync.utils.time_utils import now_millis


class FollowingRepository:
    def __init__(self, session: Session):
        self.session = session

    def get(self, following_id: str) -> Optional[Following]:
        return self.session.query(Following).filter(Following.id == following_id).first()

    def exists(self, following_id: str) -> bool:
        return self.session.query(Following.id).filter(Following.id == following_id).first() is not None

    def get_all(self) -> List[Following]:
        """Get follows, most recently followed first"""
        return self.session.query(Following).order_by(desc(Following.followed_at)).all()

    def get_by_type(self, following_type: FollowingType) -> List[Following]:
        return (
            self.session.query(Following)
            .filter(Following.type == following_type.value)
            .order_by(desc(Following.followed_at))
            .all()
        )

    def get_with_updates(self) -> List[Following]:
        return (
            self.session.query(Following)
            .filter(Following.has_update.is_(True))
            .order_by(desc(Following.last_checked))
            .all()
        )

    def search(self, query: str, limit: int = 50, offset: int = 0) -> List[Following]:
        return (
            self.session.query(Following)
            .filter(Following.name.ilike(f"%{query}%"))
            .order_by(desc(Following.followed_at))
            .offset(offset)
            .limit(limit)
            .all()
        )

    def upsert(self,
               following_id: str,
               following_type: FollowingType,
               name: str,
               last_known_chapters: int = 0,
               timestamp: Optional[int] = None) -> Following:
        """
        Follow a work or author, replacing any existing follow with the same id.
        """
        following = self.get(following_id)
        if following is None:
            following = Following(id=following_id)
            self.session.add(following)
        following.type = following_type.value
        following.name = name
        following.followed_at = timestamp or now_millis()
        following.last_checked = None
        following.last_known_chapters = last_known_chapters
        following.has_update = False
        try:
            self.session.commit()
            return following
        except Exception:
            self.session.rollback()
            raise

    def update_status(self, following_id: str, chapters: int, has_update: bool,
                      timestamp: Optional[int] = None) -> bool:
        """
        Record the result of an update check.

        Args:
            following_id: Followed work id
            chapters: Chapter count seen on the archive
            has_update: Whether unread chapters are waiting
            timestamp: Check time, defaults to now

        Returns:
            False when the follow no longer exists
        """
        following = self.get(following_id)
        if following is None:
            return False
        following.last_checked = timestamp or now_millis()
        following.last_known_chapters = chapters
        following.has_update = has_update
        self.session.commit()
        return True

    def mark_read(self, following_id: str) -> bool:
        following = self.get(following_id)
        if following is None:
            return False
        following.has_update = False
        self.session.commit()
        return True

    def delete(self, following_id: str) -> bool:
        deleted = self.session.query(Following).filter(Following.id == following_id).delete(synchronize_session=False)
        self.session.commit()
        return deleted > 0

    def count(self) -> int:
        return self.session.query(Following).count()

    def count_updates(self) -> int:
        return self.session.query(Following).filter(Following.has_update.is_(True)).count()
