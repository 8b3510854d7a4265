# ficsync/sa/repositories/work.py

from typing import Optional, List
from sqlalchemy import or_, desc
from sqlalchemy.orm import Session

from ficsync.models import WorkData
from ficsync.sa.models import Work, Chapter, Bookmark, Download
from ficsync.sa.repositories.tag import TagRepository
from ficsync.utils.time_utils import now_millis

WORK_FIELDS = [
    'title', 'author', 'author_id', 'summary', 'rating',
    'warnings', 'categories', 'fandoms', 'relationships', 'characters', 'additional_tags',
    'language', 'words', 'current_chapters', 'total_chapters', 'kudos', 'bookmarks_count', 'hits',
    'published_date', 'updated_date', 'series_name', 'series_part',
]


class WorkRepository:
    def __init__(self, session: Session):
        self.session = session
        self.tags = TagRepository(session)

    def get(self, work_id: str) -> Optional[Work]:
        return self.session.query(Work).filter(Work.id == work_id).first()

    def exists(self, work_id: str) -> bool:
        return self.session.query(Work.id).filter(Work.id == work_id).first() is not None

    def get_all(self, limit: Optional[int] = None, offset: int = 0) -> List[Work]:
        """
        Get cached works, most recently cached first.
        """
        query = self.session.query(Work).order_by(desc(Work.cached_at)).offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def get_by_author(self, author: str) -> List[Work]:
        return (
            self.session.query(Work)
            .filter(Work.author == author)
            .order_by(desc(Work.updated_date))
            .all()
        )

    def search(self, query: str, limit: int = 50, offset: int = 0) -> List[Work]:
        """
        Search cached works whose title, author or summary contains the query (case-insensitive).

        Args:
            query: Substring to match
            limit: Maximum number of works to return
            offset: Number of matches to skip

        Returns:
            Matching works, most recently updated first
        """
        pattern = f"%{query}%"
        return (
            self.session.query(Work)
            .filter(
                or_(
                    Work.title.ilike(pattern),
                    Work.author.ilike(pattern),
                    Work.summary.ilike(pattern),
                )
            )
            .order_by(desc(Work.updated_date))
            .offset(offset)
            .limit(limit)
            .all()
        )

    def _apply(self, data: WorkData, cached_at: int) -> Work:
        work = self.get(data.id)
        if work is None:
            work = Work(id=data.id)
            self.session.add(work)
        for field in WORK_FIELDS:
            value = getattr(data, field)
            setattr(work, field, list(value) if isinstance(value, list) else value)
        work.cached_at = cached_at
        self.tags.sync_work_tags(data.id, data.tag_groups())
        return work

    def upsert(self, data: WorkData, cached_at: Optional[int] = None) -> Work:
        """
        Insert a work or overwrite the cached copy with the same id.

        Args:
            data: Scraped work
            cached_at: Cache timestamp, defaults to now

        Returns:
            The stored Work
        """
        try:
            work = self._apply(data, cached_at or now_millis())
            self.session.commit()
            return work
        except Exception:
            self.session.rollback()
            raise

    def upsert_many(self, works: List[WorkData], cached_at: Optional[int] = None) -> List[Work]:
        timestamp = cached_at or now_millis()
        try:
            stored = [self._apply(data, timestamp) for data in works]
            self.session.commit()
            return stored
        except Exception:
            self.session.rollback()
            raise

    def _delete_cascade(self, work_ids: List[str]) -> None:
        if not work_ids:
            return
        self.session.query(Chapter).filter(Chapter.work_id.in_(work_ids)).delete(synchronize_session=False)
        self.session.query(Bookmark).filter(Bookmark.work_id.in_(work_ids)).delete(synchronize_session=False)
        self.session.query(Download).filter(Download.work_id.in_(work_ids)).delete(synchronize_session=False)
        for work_id in work_ids:
            self.tags.delete_for_work(work_id)
        self.session.query(Work).filter(Work.id.in_(work_ids)).delete(synchronize_session=False)

    def delete(self, work_id: str) -> bool:
        """
        Delete a work together with its chapters, bookmark, download and tag links.
        """
        if not self.exists(work_id):
            return False
        try:
            self._delete_cascade([work_id])
            self.session.commit()
            return True
        except Exception:
            self.session.rollback()
            raise

    def delete_older_than(self, cutoff: int) -> int:
        """
        Delete works cached before the cutoff (epoch millis), cascading as `delete` does.

        Returns:
            Number of works deleted
        """
        work_ids = [row.id for row in self.session.query(Work.id).filter(Work.cached_at < cutoff).all()]
        try:
            self._delete_cascade(work_ids)
            self.session.commit()
            return len(work_ids)
        except Exception:
            self.session.rollback()
            raise

    def count(self) -> int:
        return self.session.query(Work).count()
