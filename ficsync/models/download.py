# ficsync/models/download.py

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel

from .work import WorkInfo


class DownloadStatus(str, Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        return self in (DownloadStatus.COMPLETED, DownloadStatus.FAILED, DownloadStatus.CANCELLED)


class DownloadInfo(BaseModel):
    work_id: str
    status: DownloadStatus = DownloadStatus.PENDING
    total_chapters: int = 0
    downloaded_chapters: int = 0
    started_at: int = 0
    completed_at: Optional[int] = None
    error_message: Optional[str] = None
    work: Optional[WorkInfo] = None

    @property
    def progress(self) -> float:
        if self.total_chapters <= 0:
            return 0.0
        return min(1.0, self.downloaded_chapters / self.total_chapters)

    @classmethod
    def from_entity(cls, entity, work: Optional[WorkInfo] = None) -> "DownloadInfo":
        return cls(
            work_id=entity.work_id,
            status=DownloadStatus(entity.status),
            total_chapters=entity.total_chapters,
            downloaded_chapters=entity.downloaded_chapters,
            started_at=entity.started_at,
            completed_at=entity.completed_at,
            error_message=entity.error_message,
            work=work,
        )


# Progress states published by a running download job

@dataclass(frozen=True)
class Pending:
    is_terminal = False


@dataclass(frozen=True)
class InProgress:
    progress: float
    downloaded_chapters: int
    is_terminal = False


@dataclass(frozen=True)
class Completed:
    is_terminal = True


@dataclass(frozen=True)
class Failed:
    error: str
    is_terminal = True


@dataclass(frozen=True)
class Cancelled:
    is_terminal = True


DownloadProgress = Union[Pending, InProgress, Completed, Failed, Cancelled]
