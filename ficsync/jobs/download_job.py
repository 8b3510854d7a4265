# ficsync/jobs/download_job.py

import logging
import threading
from typing import Callable, List, Optional

from ficsync.models import (
    ChapterData, DownloadProgress,
    InProgress, Completed, Failed, Cancelled, Result,
)
from ficsync.remote import ArchiveSource
from ficsync.sa.database import Database
from ficsync.sa.repositories import ChapterRepository, DownloadRepository


class DownloadJob:
    """Downloads every chapter of one work, reporting progress per chapter.

    The chapter list is fetched with a single request. Transport failures
    are retried with exponential backoff; parse failures are not. Chapters
    are stored in ascending order and the cancel event is checked between
    chapters, so a cancelled download keeps the chapters stored so far.
    """

    def __init__(self,
                 database: Database,
                 source: ArchiveSource,
                 work_id: str,
                 title: str = "",
                 cancel_event: Optional[threading.Event] = None,
                 publish: Optional[Callable[[DownloadProgress], None]] = None,
                 max_attempts: int = 3,
                 backoff_seconds: float = 10.0):
        self.database = database
        self.source = source
        self.work_id = work_id
        self.title = title or work_id
        self.cancel_event = cancel_event or threading.Event()
        self.publish = publish or (lambda state: None)
        self.max_attempts = max(1, max_attempts)
        self.backoff_seconds = backoff_seconds
        self.logger = logging.getLogger(self.__class__.__name__)

    def run(self) -> DownloadProgress:
        """
        Execute the download.

        Returns:
            The terminal progress state
        """
        if self.cancel_event.is_set():
            return self._cancel(0)

        try:
            with self.database.get_db() as session:
                started = DownloadRepository(session).mark_in_progress(self.work_id)
            if not started:
                # Row cancelled, failed or removed before the job ran
                self.logger.info(f"Download of work {self.work_id} is no longer pending")
                return self._cancel(0)
            self.publish(InProgress(0.0, 0))

            result = self._fetch_chapters()
            if self.cancel_event.is_set():
                return self._cancel(0)
            if not result.is_success:
                return self._fail(result.message or "Download failed")

            chapters: List[ChapterData] = sorted(result.value, key=lambda c: c.chapter_number)
            if not chapters:
                return self._fail("No chapters found")
            return self._store_chapters(chapters)
        except Exception as e:
            self.logger.exception(f"Download of work {self.work_id} crashed")
            return self._fail(str(e) or e.__class__.__name__)

    def _fetch_chapters(self) -> Result:
        delay = self.backoff_seconds
        attempt = 1
        while True:
            result = self.source.get_all_chapters(self.work_id)
            if result.is_success or not result.retryable or attempt >= self.max_attempts:
                return result
            self.logger.warning(
                f"Attempt {attempt} for work {self.work_id} failed: {result.message}. "
                f"Retrying in {delay} seconds."
            )
            # Returns early when cancelled
            if self.cancel_event.wait(delay):
                return result
            attempt += 1
            delay *= 2  # exponential backoff

    def _store_chapters(self, chapters: List[ChapterData]) -> DownloadProgress:
        total = len(chapters)
        with self.database.get_db() as session:
            download = DownloadRepository(session)
            row = download.get(self.work_id)
            if row is not None and row.total_chapters != total:
                self.logger.info(f"Work {self.work_id} has {total} chapters, expected {row.total_chapters}")
                download.update_total(self.work_id, total)

        downloaded = 0
        for chapter in chapters:
            if self.cancel_event.is_set():
                return self._cancel(downloaded)
            with self.database.get_db() as session:
                download = DownloadRepository(session)
                chapter_repo = ChapterRepository(session)
                if not download.is_in_progress(self.work_id):
                    # Row cancelled or deleted by another process
                    self.cancel_event.set()
                    continue
                chapter_repo.upsert(chapter)
                if not download.update_progress(self.work_id, downloaded + 1):
                    # Row left IN_PROGRESS while this chapter was stored
                    chapter_repo.delete(chapter.work_id, chapter.chapter_number)
                    self.cancel_event.set()
                    continue
            downloaded += 1
            self.publish(InProgress(min(1.0, downloaded / total), downloaded))

        if self.cancel_event.is_set():
            return self._cancel(downloaded)
        with self.database.get_db() as session:
            completed = DownloadRepository(session).complete(self.work_id)
        if not completed:
            return self._cancel(downloaded)
        self.logger.info(f"Downloaded {downloaded} chapters of work {self.work_id}")
        state = Completed()
        self.publish(state)
        return state

    def _fail(self, message: str) -> DownloadProgress:
        self.logger.error(f"Download of work {self.work_id} failed: {message}")
        with self.database.get_db() as session:
            failed = DownloadRepository(session).fail(self.work_id, message)
        if not failed:
            return self._cancel(0)
        state = Failed(message)
        self.publish(state)
        return state

    def _cancel(self, downloaded: int) -> DownloadProgress:
        self.logger.info(f"Download of work {self.work_id} cancelled after {downloaded} chapters")
        with self.database.get_db() as session:
            DownloadRepository(session).cancel(self.work_id)
        state = Cancelled()
        self.publish(state)
        return state

