# ficsync/jobs/progress.py

import logging
import threading
from typing import Callable, Iterator, List, Optional

from ficsync.models import DownloadProgress, Pending

logger = logging.getLogger(__name__)

ProgressListener = Callable[[DownloadProgress], None]


class ProgressChannel:
    """Progress states of one job, replayable by any number of observers.

    States are kept in order. `stream` yields every state from the first
    one and blocks for new ones until a terminal state has been yielded.
    Listeners are called synchronously on the publishing thread.
    """

    def __init__(self):
        self._condition = threading.Condition()
        self._history: List[DownloadProgress] = [Pending()]
        self._listeners: List[ProgressListener] = []

    @property
    def latest(self) -> DownloadProgress:
        with self._condition:
            return self._history[-1]

    @property
    def is_finished(self) -> bool:
        return self.latest.is_terminal

    def history(self) -> List[DownloadProgress]:
        with self._condition:
            return list(self._history)

    def add_listener(self, listener: ProgressListener) -> None:
        with self._condition:
            self._listeners.append(listener)

    def publish(self, state: DownloadProgress) -> None:
        with self._condition:
            if self._history[-1].is_terminal:
                logger.debug(f"Ignoring {state} after terminal state")
                return
            self._history.append(state)
            listeners = list(self._listeners)
            self._condition.notify_all()
        for listener in listeners:
            try:
                listener(state)
            except Exception as e:
                logger.error(f"Progress listener failed: {e}")

    def stream(self, timeout: Optional[float] = None) -> Iterator[DownloadProgress]:
        """
        Yield states in order until the terminal one.

        Args:
            timeout: Seconds to wait for each new state; None waits forever

        Raises:
            TimeoutError: If no new state arrives in time
        """
        index = 0
        while True:
            with self._condition:
                if index >= len(self._history):
                    if not self._condition.wait_for(lambda: index < len(self._history), timeout):
                        raise TimeoutError("No progress update received")
                state = self._history[index]
            index += 1
            yield state
            if state.is_terminal:
                return

    def __iter__(self) -> Iterator[DownloadProgress]:
        return self.stream()
