# ficsync/sa/repositories/download.py

from typing import Optional, List
from sqlalchemy import desc
from sqlalchemy.orm import Session

from ficsync.models import DownloadStatus
from ficsync.sa.models import Download
from ficsync.utils.time_utils import now_millis

UNFINISHED = [DownloadStatus.PENDING.value, DownloadStatus.IN_PROGRESS.value]


class DownloadRepository:
    def __init__(self, session: Session):
        self.session = session

    def get(self, work_id: str) -> Optional[Download]:
        return self.session.query(Download).filter(Download.work_id == work_id).first()

    def get_all(self) -> List[Download]:
        return self.session.query(Download).order_by(desc(Download.started_at)).all()

    def get_by_status(self, status: DownloadStatus) -> List[Download]:
        return (
            self.session.query(Download)
            .filter(Download.status == status.value)
            .order_by(desc(Download.started_at))
            .all()
        )

    def get_completed(self) -> List[Download]:
        return (
            self.session.query(Download)
            .filter(Download.status == DownloadStatus.COMPLETED.value)
            .order_by(desc(Download.completed_at))
            .all()
        )

    def get_unfinished(self) -> List[Download]:
        """Get downloads still PENDING or IN_PROGRESS"""
        return (
            self.session.query(Download)
            .filter(Download.status.in_(UNFINISHED))
            .order_by(Download.started_at)
            .all()
        )

    def is_downloaded(self, work_id: str) -> bool:
        return (
            self.session.query(Download.work_id)
            .filter(Download.work_id == work_id, Download.status == DownloadStatus.COMPLETED.value)
            .first()
        ) is not None

    def reset_pending(self, work_id: str, total_chapters: int, timestamp: Optional[int] = None) -> Download:
        """
        Create or reset the download row for a new start.

        Args:
            work_id: Work being downloaded
            total_chapters: Expected number of chapters
            timestamp: Start time, defaults to now

        Returns:
            The PENDING Download
        """
        download = self.get(work_id)
        if download is None:
            download = Download(work_id=work_id)
            self.session.add(download)
        download.status = DownloadStatus.PENDING.value
        download.total_chapters = total_chapters
        download.downloaded_chapters = 0
        download.started_at = timestamp or now_millis()
        download.completed_at = None
        download.error_message = None
        try:
            self.session.commit()
            return download
        except Exception:
            self.session.rollback()
            raise

    def is_in_progress(self, work_id: str) -> bool:
        download = self.get(work_id)
        return download is not None and download.status == DownloadStatus.IN_PROGRESS.value

    def mark_in_progress(self, work_id: str) -> bool:
        """Start a PENDING download. Rows in any other state are left as they are."""
        download = self.get(work_id)
        if download is None or download.status != DownloadStatus.PENDING.value:
            return False
        download.status = DownloadStatus.IN_PROGRESS.value
        download.downloaded_chapters = 0
        download.error_message = None
        self.session.commit()
        return True

    def update_total(self, work_id: str, total_chapters: int) -> bool:
        download = self.get(work_id)
        if download is None:
            return False
        download.total_chapters = total_chapters
        self.session.commit()
        return True

    def update_progress(self, work_id: str, downloaded_chapters: int) -> bool:
        """
        Record chapters stored so far. The count never decreases while IN_PROGRESS,
        and rows that already left IN_PROGRESS are not touched.
        """
        download = self.get(work_id)
        if download is None or download.status != DownloadStatus.IN_PROGRESS.value:
            return False
        download.downloaded_chapters = max(download.downloaded_chapters, downloaded_chapters)
        self.session.commit()
        return True

    def complete(self, work_id: str, timestamp: Optional[int] = None) -> bool:
        """Finish an IN_PROGRESS download"""
        download = self.get(work_id)
        if download is None or download.status != DownloadStatus.IN_PROGRESS.value:
            return False
        download.status = DownloadStatus.COMPLETED.value
        download.completed_at = timestamp or now_millis()
        download.error_message = None
        self.session.commit()
        return True

    def fail(self, work_id: str, error_message: str) -> bool:
        """Move an unfinished download to FAILED. Terminal rows are left as they are."""
        download = self.get(work_id)
        if download is None or download.status not in UNFINISHED:
            return False
        download.status = DownloadStatus.FAILED.value
        download.error_message = error_message
        self.session.commit()
        return True

    def cancel(self, work_id: str) -> bool:
        """Move an unfinished download to CANCELLED. Terminal rows are left as they are."""
        download = self.get(work_id)
        if download is None or download.status not in UNFINISHED:
            return False
        download.status = DownloadStatus.CANCELLED.value
        self.session.commit()
        return True

    def delete(self, work_id: str) -> bool:
        deleted = self.session.query(Download).filter(Download.work_id == work_id).delete(synchronize_session=False)
        self.session.commit()
        return deleted > 0

    def clear_failed(self) -> int:
        """Delete FAILED and CANCELLED rows"""
        deleted = (
            self.session.query(Download)
            .filter(Download.status.in_([DownloadStatus.FAILED.value, DownloadStatus.CANCELLED.value]))
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return deleted

    def count(self, status: Optional[DownloadStatus] = None) -> int:
        query = self.session.query(Download)
        if status is not None:
            query = query.filter(Download.status == status.value)
        return query.count()
