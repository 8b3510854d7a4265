# ficsync/services/download_service.py

import logging
from typing import List, Optional

from ficsync.jobs import JobEngine, ProgressChannel
from ficsync.jobs.progress import ProgressListener
from ficsync.models import DownloadInfo, DownloadStatus
from ficsync.sa.database import Database
from ficsync.sa.repositories import DownloadRepository, ChapterRepository, WorkRepository
from ficsync.services.sync_repository import decorate_work

logger = logging.getLogger(__name__)


class DownloadService:
    def __init__(self, database: Database, engine: JobEngine, cancel_timeout: float = 60.0):
        self.database = database
        self.engine = engine
        self.cancel_timeout = cancel_timeout

    def _to_info(self, session, download) -> DownloadInfo:
        work = WorkRepository(session).get(download.work_id)
        return DownloadInfo.from_entity(download, work=decorate_work(session, work) if work else None)

    def start_download(self, work_id: str, title: str = "", total_chapters: int = 0,
                       listener: Optional[ProgressListener] = None) -> str:
        """
        Start downloading a work for offline reading.

        Returns:
            Job id of the download
        """
        return self.engine.schedule_download(work_id, title, total_chapters, listener=listener)

    def get_progress(self, job_id: str) -> Optional[ProgressChannel]:
        return self.engine.get_progress(job_id)

    def get_download(self, work_id: str) -> Optional[DownloadInfo]:
        with self.database.get_db() as session:
            download = DownloadRepository(session).get(work_id)
            return self._to_info(session, download) if download else None

    def get_all_downloads(self) -> List[DownloadInfo]:
        with self.database.get_db() as session:
            return [self._to_info(session, d) for d in DownloadRepository(session).get_all()]

    def get_completed_downloads(self) -> List[DownloadInfo]:
        with self.database.get_db() as session:
            return [self._to_info(session, d) for d in DownloadRepository(session).get_completed()]

    def get_active_downloads(self) -> List[DownloadInfo]:
        with self.database.get_db() as session:
            rows = DownloadRepository(session).get_by_status(DownloadStatus.IN_PROGRESS)
            return [self._to_info(session, d) for d in rows]

    def cancel_download(self, work_id: str) -> bool:
        return self.engine.cancel_download(work_id)

    def delete_download(self, work_id: str) -> bool:
        """Cancel the download if running, then remove its chapters and row.

        A running job is given up to cancel_timeout seconds to stop so it
        cannot store chapters after they were removed.
        """
        self.engine.cancel_download(work_id, wait_timeout=self.cancel_timeout)
        with self.database.get_db() as session:
            ChapterRepository(session).delete_for_work(work_id)
            deleted = DownloadRepository(session).delete(work_id)
        logger.info(f"Deleted download of work {work_id}")
        return deleted

    def clear_failed_downloads(self) -> int:
        with self.database.get_db() as session:
            return DownloadRepository(session).clear_failed()

    def is_downloaded(self, work_id: str) -> bool:
        with self.database.get_db() as session:
            return DownloadRepository(session).is_downloaded(work_id)
