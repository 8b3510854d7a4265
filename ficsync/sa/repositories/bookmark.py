# ficsync/sa/repositories/bookmark.py

from typing import Optional, List
from sqlalchemy import desc
from sqlalchemy.orm import Session

from ficsync.sa.models import Bookmark
from ficsync.utils.time_utils import now_millis


class BookmarkRepository:
    def __init__(self, session: Session):
        self.session = session

    def get(self, work_id: str) -> Optional[Bookmark]:
        return self.session.query(Bookmark).filter(Bookmark.work_id == work_id).first()

    def exists(self, work_id: str) -> bool:
        return self.session.query(Bookmark.work_id).filter(Bookmark.work_id == work_id).first() is not None

    def get_all(self, limit: Optional[int] = None, offset: int = 0) -> List[Bookmark]:
        """
        Get bookmarks, most recently read first.
        """
        query = self.session.query(Bookmark).order_by(desc(Bookmark.last_read_at)).offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def get_recently_added(self, limit: int = 20) -> List[Bookmark]:
        return (
            self.session.query(Bookmark)
            .order_by(desc(Bookmark.bookmarked_at))
            .limit(limit)
            .all()
        )

    def upsert(self,
               work_id: str,
               current_chapter: int = 1,
               scroll_position: int = 0,
               progress: float = 0.0,
               notes: Optional[str] = None,
               timestamp: Optional[int] = None) -> Bookmark:
        """
        Create a bookmark, replacing any existing one for the work.

        Args:
            work_id: Bookmarked work
            current_chapter: Chapter the reader is on
            scroll_position: Position within the chapter
            progress: Reading progress in [0.0, 1.0]
            notes: Free-form user notes
            timestamp: Creation time, defaults to now

        Returns:
            The stored Bookmark
        """
        now = timestamp or now_millis()
        bookmark = self.get(work_id)
        if bookmark is None:
            bookmark = Bookmark(work_id=work_id)
            self.session.add(bookmark)
        bookmark.current_chapter = current_chapter
        bookmark.scroll_position = scroll_position
        bookmark.progress = min(1.0, max(0.0, progress))
        bookmark.bookmarked_at = now
        bookmark.last_read_at = now
        bookmark.notes = notes
        try:
            self.session.commit()
            return bookmark
        except Exception:
            self.session.rollback()
            raise

    def update_reading_progress(self,
                                work_id: str,
                                chapter: int,
                                scroll_position: int,
                                progress: float,
                                timestamp: Optional[int] = None) -> bool:
        bookmark = self.get(work_id)
        if bookmark is None:
            return False
        bookmark.current_chapter = chapter
        bookmark.scroll_position = scroll_position
        bookmark.progress = min(1.0, max(0.0, progress))
        bookmark.last_read_at = timestamp or now_millis()
        self.session.commit()
        return True

    def update_notes(self, work_id: str, notes: Optional[str]) -> bool:
        bookmark = self.get(work_id)
        if bookmark is None:
            return False
        bookmark.notes = notes
        self.session.commit()
        return True

    def delete(self, work_id: str) -> bool:
        deleted = self.session.query(Bookmark).filter(Bookmark.work_id == work_id).delete(synchronize_session=False)
        self.session.commit()
        return deleted > 0

    def count(self) -> int:
        return self.session.query(Bookmark).count()
