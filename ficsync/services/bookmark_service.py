# ficsync/services/bookmark_service.py

import logging
from typing import List, Optional

from ficsync.models import BookmarkInfo
from ficsync.sa.database import Database
from ficsync.sa.repositories import BookmarkRepository, WorkRepository
from ficsync.services.sync_repository import decorate_work

logger = logging.getLogger(__name__)


class BookmarkService:
    def __init__(self, database: Database):
        self.database = database

    def _to_info(self, session, bookmark) -> BookmarkInfo:
        work = WorkRepository(session).get(bookmark.work_id)
        return BookmarkInfo.from_entity(bookmark, work=decorate_work(session, work) if work else None)

    def add_bookmark(self, work_id: str, notes: Optional[str] = None) -> BookmarkInfo:
        with self.database.get_db() as session:
            bookmark = BookmarkRepository(session).upsert(work_id, notes=notes)
            return self._to_info(session, bookmark)

    def remove_bookmark(self, work_id: str) -> bool:
        with self.database.get_db() as session:
            return BookmarkRepository(session).delete(work_id)

    def get_bookmark(self, work_id: str) -> Optional[BookmarkInfo]:
        with self.database.get_db() as session:
            bookmark = BookmarkRepository(session).get(work_id)
            return self._to_info(session, bookmark) if bookmark else None

    def get_all_bookmarks(self) -> List[BookmarkInfo]:
        """Bookmarks with their works, most recently read first"""
        with self.database.get_db() as session:
            return [self._to_info(session, b) for b in BookmarkRepository(session).get_all()]

    def is_bookmarked(self, work_id: str) -> bool:
        with self.database.get_db() as session:
            return BookmarkRepository(session).exists(work_id)

    def update_reading_progress(self, work_id: str, chapter: int,
                                scroll_position: int = 0, progress: float = 0.0) -> bool:
        with self.database.get_db() as session:
            return BookmarkRepository(session).update_reading_progress(
                work_id, chapter, scroll_position, progress
            )

    def update_notes(self, work_id: str, notes: Optional[str]) -> bool:
        with self.database.get_db() as session:
            return BookmarkRepository(session).update_notes(work_id, notes)

    def record_chapter_view(self, work_id: str, chapter_number: int, scroll_position: int = 0) -> BookmarkInfo:
        """
        Track that a chapter was opened.

        Updates the reading position of a bookmarked work, or bookmarks the
        work on its first viewed chapter.

        Args:
            work_id: Work being read
            chapter_number: Chapter opened
            scroll_position: Position within the chapter

        Returns:
            The updated bookmark
        """
        with self.database.get_db() as session:
            work = WorkRepository(session).get(work_id)
            progress = 0.0
            if work is not None and work.current_chapters > 0:
                progress = min(1.0, chapter_number / work.current_chapters)

            bookmarks = BookmarkRepository(session)
            if bookmarks.exists(work_id):
                bookmarks.update_reading_progress(work_id, chapter_number, scroll_position, progress)
            else:
                logger.info(f"Bookmarking work {work_id} on first read")
                bookmarks.upsert(work_id, current_chapter=chapter_number,
                                 scroll_position=scroll_position, progress=progress)
            return self._to_info(session, bookmarks.get(work_id))

    def count(self) -> int:
        with self.database.get_db() as session:
            return BookmarkRepository(session).count()
