# ficsync/sa/repositories/chapter.py

from typing import Optional, List
from sqlalchemy.orm import Session

from ficsync.models import ChapterData, chapter_key
from ficsync.sa.models import Chapter
from ficsync.utils.time_utils import now_millis

CHAPTER_FIELDS = ['title', 'summary', 'notes', 'end_notes', 'content', 'word_count', 'published_date']


class ChapterRepository:
    def __init__(self, session: Session):
        self.session = session

    def get(self, work_id: str, chapter_number: int) -> Optional[Chapter]:
        return (
            self.session.query(Chapter)
            .filter(Chapter.work_id == work_id, Chapter.chapter_number == chapter_number)
            .first()
        )

    def get_by_id(self, chapter_id: str) -> Optional[Chapter]:
        return self.session.query(Chapter).filter(Chapter.id == chapter_id).first()

    def get_for_work(self, work_id: str) -> List[Chapter]:
        """Get all cached chapters of a work in reading order"""
        return (
            self.session.query(Chapter)
            .filter(Chapter.work_id == work_id)
            .order_by(Chapter.chapter_number)
            .all()
        )

    def count_for_work(self, work_id: str) -> int:
        return self.session.query(Chapter).filter(Chapter.work_id == work_id).count()

    def search(self, query: str, limit: int = 50, offset: int = 0) -> List[Chapter]:
        return (
            self.session.query(Chapter)
            .filter(Chapter.title.ilike(f"%{query}%"))
            .order_by(Chapter.work_id, Chapter.chapter_number)
            .offset(offset)
            .limit(limit)
            .all()
        )

    def _apply(self, data: ChapterData, cached_at: int) -> Chapter:
        chapter = self.get_by_id(chapter_key(data.work_id, data.chapter_number))
        if chapter is None:
            chapter = Chapter(
                id=chapter_key(data.work_id, data.chapter_number),
                work_id=data.work_id,
                chapter_number=data.chapter_number,
            )
            self.session.add(chapter)
        for field in CHAPTER_FIELDS:
            setattr(chapter, field, getattr(data, field))
        chapter.cached_at = cached_at
        return chapter

    def upsert(self, data: ChapterData, cached_at: Optional[int] = None) -> Chapter:
        try:
            chapter = self._apply(data, cached_at or now_millis())
            self.session.commit()
            return chapter
        except Exception:
            self.session.rollback()
            raise

    def upsert_many(self, chapters: List[ChapterData], cached_at: Optional[int] = None) -> List[Chapter]:
        timestamp = cached_at or now_millis()
        try:
            stored = []
            for data in chapters:
                stored.append(self._apply(data, timestamp))
                self.session.flush()
            self.session.commit()
            return stored
        except Exception:
            self.session.rollback()
            raise

    def delete(self, work_id: str, chapter_number: int) -> bool:
        deleted = (
            self.session.query(Chapter)
            .filter(Chapter.work_id == work_id, Chapter.chapter_number == chapter_number)
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return deleted > 0

    def delete_for_work(self, work_id: str) -> int:
        deleted = self.session.query(Chapter).filter(Chapter.work_id == work_id).delete(synchronize_session=False)
        self.session.commit()
        return deleted

    def delete_older_than(self, cutoff: int) -> int:
        deleted = self.session.query(Chapter).filter(Chapter.cached_at < cutoff).delete(synchronize_session=False)
        self.session.commit()
        return deleted

    def count(self) -> int:
        return self.session.query(Chapter).count()
