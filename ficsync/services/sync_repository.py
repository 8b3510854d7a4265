# ficsync/services/sync_repository.py

import logging
from typing import Dict, Iterator, List, Optional

from sqlalchemy.orm import Session

from ficsync.models import (
    WorkInfo, ChapterInfo, SearchFilters,
    Resource, Loading, Success, Error, Result,
)
from ficsync.remote import ArchiveSource
from ficsync.sa.database import Database
from ficsync.sa.repositories import (
    WorkRepository, ChapterRepository, BookmarkRepository,
    DownloadRepository, FollowingRepository,
)

logger = logging.getLogger(__name__)


def decorate_work(session: Session, work) -> WorkInfo:
    """Convert a stored work to WorkInfo with the user's status flags looked up."""
    return WorkInfo.from_entity(
        work,
        is_bookmarked=BookmarkRepository(session).exists(work.id),
        is_downloaded=DownloadRepository(session).is_downloaded(work.id),
        is_following=FollowingRepository(session).exists(work.id),
    )


class SyncRepository:
    """Cache-first access to works and chapters.

    Reads are served from the local database when present. Missing or
    forced entries are fetched from the archive, stored, then returned.
    Remote failures are returned as `Error` and leave the cache untouched.
    """

    def __init__(self, database: Database, source: ArchiveSource):
        self.database = database
        self.source = source

    def get_work(self, work_id: str, force_refresh: bool = False) -> Resource:
        """
        Get a work, from cache unless missing or refresh is forced.

        Args:
            work_id: Archive work id
            force_refresh: Skip the cache and fetch from the archive

        Returns:
            Success(WorkInfo) or Error(message)
        """
        if not force_refresh:
            with self.database.get_db() as session:
                cached = WorkRepository(session).get(work_id)
                if cached is not None:
                    return Success(decorate_work(session, cached))

        result = self.source.get_work(work_id)
        if not result.is_success:
            return Error(result.message or "Failed to load work")

        with self.database.get_db() as session:
            work = WorkRepository(session).upsert(result.value)
            return Success(decorate_work(session, work))

    def stream_work(self, work_id: str, force_refresh: bool = False) -> Iterator[Resource]:
        """Yield Loading, then the outcome of `get_work`"""
        yield Loading()
        yield self.get_work(work_id, force_refresh)

    def get_chapter(self, work_id: str, chapter_number: int, force_refresh: bool = False) -> Resource:
        if not force_refresh:
            with self.database.get_db() as session:
                cached = ChapterRepository(session).get(work_id, chapter_number)
                if cached is not None:
                    return Success(ChapterInfo.from_entity(cached))

        result = self.source.get_chapter(work_id, chapter_number)
        if not result.is_success:
            return Error(result.message or "Failed to load chapter")

        with self.database.get_db() as session:
            chapter = ChapterRepository(session).upsert(result.value)
            return Success(ChapterInfo.from_entity(chapter))

    def stream_chapter(self, work_id: str, chapter_number: int, force_refresh: bool = False) -> Iterator[Resource]:
        yield Loading()
        yield self.get_chapter(work_id, chapter_number, force_refresh)

    def search_works(self, query: str, page: int = 1, filters: Optional[SearchFilters] = None) -> Resource:
        """
        Search the archive. Results are always fetched fresh and cached as a side effect.

        Args:
            query: Search text. A blank query returns no results without a request.
            page: 1-based result page
            filters: Optional search narrowing

        Returns:
            Success(list of WorkInfo) or Error(message)
        """
        if not query or not query.strip():
            return Success([])

        result = self.source.search_works(query, page, filters)
        if not result.is_success:
            return Error(result.message or "Search failed")

        with self.database.get_db() as session:
            works = WorkRepository(session).upsert_many(result.value)
            return Success([decorate_work(session, work) for work in works])

    def stream_search_works(self, query: str, page: int = 1,
                            filters: Optional[SearchFilters] = None) -> Iterator[Resource]:
        yield Loading()
        yield self.search_works(query, page, filters)

    def search_cached_works(self, query: str, limit: int = 50, offset: int = 0) -> List[WorkInfo]:
        """Search cached works only; no request is made"""
        with self.database.get_db() as session:
            works = WorkRepository(session).search(query, limit, offset)
            return [decorate_work(session, work) for work in works]

    def get_works_by_author(self, author: str) -> List[WorkInfo]:
        with self.database.get_db() as session:
            return [decorate_work(session, work) for work in WorkRepository(session).get_by_author(author)]

    def get_chapters_for_work(self, work_id: str) -> List[ChapterInfo]:
        with self.database.get_db() as session:
            return [ChapterInfo.from_entity(c) for c in ChapterRepository(session).get_for_work(work_id)]

    def download_all_chapters(self, work_id: str) -> Result[List[ChapterInfo]]:
        """
        Fetch every chapter of a work with one request and store them all.

        Returns:
            Result holding the stored chapters
        """
        result = self.source.get_all_chapters(work_id)
        if not result.is_success:
            return Result.failure(result.error)

        with self.database.get_db() as session:
            chapters = ChapterRepository(session).upsert_many(result.value)
            return Result.success([ChapterInfo.from_entity(c) for c in chapters])

    def clear_old_cache(self, cutoff: int) -> Dict[str, int]:
        """
        Delete works and chapters cached before the cutoff.

        Args:
            cutoff: Epoch milliseconds

        Returns:
            Number of deleted works and chapters
        """
        with self.database.get_db() as session:
            works = WorkRepository(session).delete_older_than(cutoff)
            chapters = ChapterRepository(session).delete_older_than(cutoff)
        logger.info(f"Cleared {works} works and {chapters} chapters from cache")
        return {'works': works, 'chapters': chapters}
