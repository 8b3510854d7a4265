# ficsync/remote/archive_source.py

import logging
from typing import Any, Callable, List, Optional

from ficsync.config import Settings, DEFAULT_BASE_URL
from ficsync.models import WorkData, ChapterData, SearchFilters, Result
from ficsync.scrapers import SearchScraper, WorkScraper, ChapterScraper, FullWorkScraper
from ficsync.utils.http import ArchiveDownloader
from ficsync.utils.rate_limit import RateLimiter

logger = logging.getLogger(__name__)


class ArchiveSource:
    """Rate-limited access to the archive.

    Every operation waits for a rate limiter slot, downloads one page and
    parses it. Failures of any kind come back as a failed `Result`; nothing
    raises past this class.
    """

    def __init__(self,
                 downloader: Optional[ArchiveDownloader] = None,
                 rate_limiter: Optional[RateLimiter] = None,
                 base_url: Optional[str] = None):
        self.downloader = downloader or ArchiveDownloader()
        self.rate_limiter = rate_limiter or RateLimiter()
        base_url = base_url or DEFAULT_BASE_URL
        self.search_scraper = SearchScraper(self.downloader, base_url)
        self.work_scraper = WorkScraper(self.downloader, base_url)
        self.chapter_scraper = ChapterScraper(self.downloader, base_url)
        self.full_work_scraper = FullWorkScraper(self.downloader, base_url)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ArchiveSource":
        downloader = ArchiveDownloader(user_agent=settings.user_agent, timeout=settings.http_timeout)
        return cls(
            downloader=downloader,
            rate_limiter=RateLimiter(settings.min_request_interval),
            base_url=settings.base_url,
        )

    def _run(self, description: str, operation: Callable[[], Any]) -> Result:
        try:
            return Result.success(self.rate_limiter.throttle(operation))
        except Exception as e:
            logger.warning(f"{description} failed: {e}")
            return Result.failure(e)

    def search_works(self, query: str, page: int = 1,
                     filters: Optional[SearchFilters] = None) -> Result[List[WorkData]]:
        """
        Search works by free text.

        Args:
            query: Search text, URL-encoded into the request
            page: 1-based result page
            filters: Optional search narrowing

        Returns:
            Result holding the works on the requested page
        """
        return self._run(
            f"Search {query!r} page {page}",
            lambda: self.search_scraper.scrape(query, page, filters),
        )

    def get_work(self, work_id: str) -> Result[WorkData]:
        return self._run(f"Fetch work {work_id}", lambda: self.work_scraper.scrape(work_id))

    def get_chapter(self, work_id: str, chapter_number: int) -> Result[ChapterData]:
        return self._run(
            f"Fetch chapter {chapter_number} of work {work_id}",
            lambda: self.chapter_scraper.scrape(work_id, chapter_number),
        )

    def get_all_chapters(self, work_id: str) -> Result[List[ChapterData]]:
        """Fetch every chapter of a work with a single request"""
        return self._run(f"Fetch all chapters of work {work_id}", lambda: self.full_work_scraper.scrape(work_id))

    def close(self) -> None:
        self.downloader.close()
