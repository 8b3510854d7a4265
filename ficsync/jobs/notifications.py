"""Events raised by background jobs for whatever notifies the user."""

import logging
from dataclasses import dataclass
from typing import Callable, List

from ficsync.models import DownloadStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DownloadFinished:
    work_id: str
    title: str
    state: DownloadStatus
    error: str = ""


@dataclass(frozen=True)
class UpdatesFound:
    count: int

    @property
    def message(self) -> str:
        if self.count == 1:
            return "1 work has new chapters"
        return f"{self.count} works have new chapters"


@dataclass(frozen=True)
class UpdateCheckFailed:
    message: str


class Notifier:
    """Default notifier: writes events to the log. Subclass to deliver elsewhere."""

    def notify(self, event) -> None:
        if isinstance(event, DownloadFinished):
            if event.state == DownloadStatus.COMPLETED:
                logger.info(f"Download complete: {event.title}")
            elif event.state == DownloadStatus.FAILED:
                logger.warning(f"Download failed: {event.title}: {event.error}")
            else:
                logger.info(f"Download {event.state.value.lower()}: {event.title}")
        elif isinstance(event, UpdatesFound):
            logger.info(event.message)
        elif isinstance(event, UpdateCheckFailed):
            logger.warning(f"Update check failed: {event.message}")


class CallbackNotifier(Notifier):
    """Notifier forwarding events to registered callables."""

    def __init__(self):
        self.callbacks: List[Callable] = []

    def subscribe(self, callback: Callable) -> None:
        self.callbacks.append(callback)

    def notify(self, event) -> None:
        super().notify(event)
        for callback in self.callbacks:
            callback(event)
