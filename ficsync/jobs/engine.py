# ficsync/jobs/engine.py

import logging
import threading
import uuid
from concurrent.futures import Future, ThreadPoolExecutor, wait as wait_futures
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ficsync.config import Settings
from ficsync.models import DownloadStatus, Completed, Failed, Cancelled, DownloadProgress
from ficsync.remote import ArchiveSource
from ficsync.sa.database import Database
from ficsync.sa.repositories import DownloadRepository
from .download_job import DownloadJob
from .notifications import Notifier, DownloadFinished, UpdatesFound, UpdateCheckFailed
from .progress import ProgressChannel, ProgressListener
from .update_check import UpdateChecker, UpdateCheckResult

logger = logging.getLogger(__name__)

DOWNLOAD_KIND = "download"
UPDATE_CHECK_KIND = "update_check"
PERIODIC_UPDATE_KEY = "update_checker"
INTERRUPTED_MESSAGE = "Download interrupted"
MAX_RETAINED_JOBS = 100


def download_key(work_id: str) -> str:
    return f"download_{work_id}"


@dataclass
class JobHandle:
    id: str
    key: str
    kind: str
    cancel_event: threading.Event = field(default_factory=threading.Event)
    channel: ProgressChannel = field(default_factory=ProgressChannel)
    future: Optional[Future] = None

    @property
    def done(self) -> bool:
        return self.future is not None and self.future.done()


def _terminal_status(state: DownloadProgress) -> DownloadStatus:
    if isinstance(state, Completed):
        return DownloadStatus.COMPLETED
    if isinstance(state, Cancelled):
        return DownloadStatus.CANCELLED
    return DownloadStatus.FAILED


class JobEngine:
    """Runs downloads and update checks on a thread pool.

    Downloads are unique per work: starting one while another for the same
    work is still queued or running returns the existing job. The periodic
    update check runs on its own thread and can be registered only once.
    """

    def __init__(self,
                 database: Database,
                 source: ArchiveSource,
                 notifier: Optional[Notifier] = None,
                 settings: Optional[Settings] = None,
                 max_retained_jobs: int = MAX_RETAINED_JOBS):
        self.database = database
        self.source = source
        self.notifier = notifier or Notifier()
        self.settings = settings or Settings()
        self._executor = ThreadPoolExecutor(
            max_workers=self.settings.max_workers,
            thread_name_prefix="ficsync-job",
        )
        self._lock = threading.Lock()
        self._active: Dict[str, JobHandle] = {}
        self._jobs: Dict[str, JobHandle] = {}
        self.max_retained_jobs = max(1, max_retained_jobs)
        self._shutdown = threading.Event()
        self._periodic_stop: Optional[threading.Event] = None
        self._periodic_thread: Optional[threading.Thread] = None

    # Downloads

    def schedule_download(self,
                          work_id: str,
                          title: str = "",
                          total_chapters: int = 0,
                          listener: Optional[ProgressListener] = None) -> str:
        """
        Queue a download of every chapter of a work.

        Args:
            work_id: Work to download
            title: Display title used in notifications
            total_chapters: Expected chapter count
            listener: Called with every progress state of the job

        Returns:
            Job id, of the existing job when one is already queued or running
        """
        key = download_key(work_id)
        with self._lock:
            existing = self._active.get(key)
            if existing is not None and not existing.done:
                logger.info(f"Download of work {work_id} already scheduled as {existing.id}")
                if listener is not None:
                    existing.channel.add_listener(listener)
                return existing.id

            with self.database.get_db() as session:
                DownloadRepository(session).reset_pending(work_id, total_chapters)

            handle = JobHandle(id=str(uuid.uuid4()), key=key, kind=DOWNLOAD_KIND)
            if listener is not None:
                handle.channel.add_listener(listener)
            job = DownloadJob(
                self.database,
                self.source,
                work_id,
                title=title,
                cancel_event=handle.cancel_event,
                publish=handle.channel.publish,
                max_attempts=self.settings.max_attempts,
                backoff_seconds=self.settings.backoff_seconds,
            )
            self._active[key] = handle
            self._register(handle)
            handle.future = self._executor.submit(self._run_download, job)
        logger.info(f"Scheduled download of work {work_id} as job {handle.id}")
        return handle.id

    def _run_download(self, job: DownloadJob) -> DownloadProgress:
        state = job.run()
        self.notifier.notify(DownloadFinished(
            work_id=job.work_id,
            title=job.title,
            state=_terminal_status(state),
            error=state.error if isinstance(state, Failed) else "",
        ))
        return state

    def _register(self, handle: JobHandle) -> None:
        """Track a new job, forgetting the oldest finished ones past the retention cap. Caller holds the lock."""
        self._jobs[handle.id] = handle
        finished = [job_id for job_id, job in self._jobs.items() if job.done]
        for job_id in finished[:max(0, len(self._jobs) - self.max_retained_jobs)]:
            old = self._jobs.pop(job_id)
            if self._active.get(old.key) is old:
                del self._active[old.key]

    def get_job(self, job_id: str) -> Optional[JobHandle]:
        with self._lock:
            return self._jobs.get(job_id)

    def get_progress(self, job_id: str) -> Optional[ProgressChannel]:
        """Progress channel of a download job, or None for unknown ids"""
        handle = self.get_job(job_id)
        return handle.channel if handle is not None else None

    def get_download_job(self, work_id: str) -> Optional[JobHandle]:
        with self._lock:
            handle = self._active.get(download_key(work_id))
        if handle is None or handle.done:
            return None
        return handle

    def cancel_download(self, work_id: str, wait_timeout: Optional[float] = None) -> bool:
        """
        Cancel a queued or running download.

        A running download stops before its next chapter; chapters already
        stored are kept.

        Args:
            work_id: Work whose download to cancel
            wait_timeout: When given, block up to this many seconds for a
                running job to stop

        Returns:
            True when a job or an unfinished download row was cancelled
        """
        handle = self.get_download_job(work_id)
        if handle is not None:
            if handle.future is not None and handle.future.cancel():
                # Never started
                with self.database.get_db() as session:
                    DownloadRepository(session).cancel(work_id)
                handle.channel.publish(Cancelled())
                self.notifier.notify(DownloadFinished(work_id, work_id, DownloadStatus.CANCELLED))
            else:
                handle.cancel_event.set()
                if wait_timeout is not None and handle.future is not None:
                    done, _ = wait_futures([handle.future], timeout=wait_timeout)
                    if not done:
                        logger.warning(f"Download of work {work_id} did not stop within {wait_timeout} seconds")
            return True

        with self.database.get_db() as session:
            return DownloadRepository(session).cancel(work_id)

    def recover_stalled_downloads(self, resume: bool = False) -> List[str]:
        """
        Handle downloads left PENDING or IN_PROGRESS by a previous process.

        Args:
            resume: Reschedule them instead of marking them FAILED

        Returns:
            Work ids that were recovered
        """
        with self.database.get_db() as session:
            stalled = [
                (row.work_id, row.total_chapters)
                for row in DownloadRepository(session).get_unfinished()
                if self.get_download_job(row.work_id) is None
            ]

        for work_id, total in stalled:
            if resume:
                self.schedule_download(work_id, total_chapters=total)
            else:
                with self.database.get_db() as session:
                    DownloadRepository(session).fail(work_id, INTERRUPTED_MESSAGE)
        if stalled:
            logger.info(f"Recovered {len(stalled)} stalled downloads")
        return [work_id for work_id, _ in stalled]

    # Update checks

    def run_update_check(self, stop: Optional[threading.Event] = None) -> UpdateCheckResult:
        """
        Check followed works now, on the calling thread.

        The whole check is retried with exponential backoff only when it
        fails before any work was checked.

        Args:
            stop: Ends the backoff wait early when set. Defaults to the
                engine's shutdown event.

        Raises:
            Exception: The last failure once attempts are exhausted
        """
        stop = stop or self._shutdown
        delay = self.settings.backoff_seconds
        attempt = 1
        while True:
            try:
                result = UpdateChecker(self.database, self.source).run()
                break
            except Exception as e:
                if attempt >= self.settings.max_attempts or stop.is_set():
                    logger.error(f"Update check failed after {attempt} attempts: {e}")
                    self.notifier.notify(UpdateCheckFailed(str(e)))
                    raise
                logger.warning(f"Update check attempt {attempt} failed: {e}. Retrying in {delay} seconds.")
                if stop.wait(delay):
                    raise
                attempt += 1
                delay *= 2

        if result.update_count > 0:
            self.notifier.notify(UpdatesFound(result.update_count))
        return result

    def trigger_update_check(self) -> str:
        """Queue an immediate update check and return its job id"""
        handle = JobHandle(id=str(uuid.uuid4()), key=UPDATE_CHECK_KIND, kind=UPDATE_CHECK_KIND)
        with self._lock:
            self._register(handle)
            handle.future = self._executor.submit(self.run_update_check)
        return handle.id

    def schedule_periodic_update_check(self,
                                       interval_seconds: Optional[float] = None,
                                       run_immediately: bool = True) -> bool:
        """
        Start checking followed works at a fixed interval.

        Args:
            interval_seconds: Seconds between checks, defaults to the configured hours
            run_immediately: Run the first check now instead of after one interval

        Returns:
            False when a periodic check is already registered
        """
        interval = interval_seconds or self.settings.update_interval_seconds
        with self._lock:
            if self._periodic_thread is not None and self._periodic_thread.is_alive():
                logger.info("Periodic update check already scheduled")
                return False
            stop = threading.Event()
            thread = threading.Thread(
                target=self._periodic_loop,
                args=(stop, interval, run_immediately),
                name=PERIODIC_UPDATE_KEY,
                daemon=True,
            )
            self._periodic_stop = stop
            self._periodic_thread = thread
        thread.start()
        logger.info(f"Checking followed works every {interval / 3600:.1f} hours")
        return True

    def _periodic_loop(self, stop: threading.Event, interval: float, run_immediately: bool) -> None:
        if not run_immediately and stop.wait(interval):
            return
        while not stop.is_set():
            try:
                self.run_update_check(stop)
            except Exception as e:
                logger.error(f"Periodic update check failed: {e}")
            if stop.wait(interval):
                return

    def cancel_periodic_update_check(self) -> bool:
        with self._lock:
            stop, thread = self._periodic_stop, self._periodic_thread
            self._periodic_stop = None
            self._periodic_thread = None
        if stop is None:
            return False
        stop.set()
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=5)
        return True

    @property
    def periodic_update_check_scheduled(self) -> bool:
        thread = self._periodic_thread
        return thread is not None and thread.is_alive()

    # Lifecycle

    def wait(self, job_id: str, timeout: Optional[float] = None) -> Any:
        """
        Block until a job finishes.

        Returns:
            The job's result: a terminal DownloadProgress or an UpdateCheckResult
        """
        handle = self.get_job(job_id)
        if handle is None or handle.future is None:
            raise KeyError(f"Unknown job {job_id}")
        return handle.future.result(timeout)

    def shutdown(self, wait: bool = True, cancel_downloads: bool = False) -> None:
        self.cancel_periodic_update_check()
        self._shutdown.set()
        if cancel_downloads:
            with self._lock:
                handles = list(self._active.values())
            for handle in handles:
                handle.cancel_event.set()
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "JobEngine":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()
