# ficsync/jobs/update_check.py

import logging
from dataclasses import dataclass, field
from typing import List

from ficsync.models import FollowingType
from ficsync.remote import ArchiveSource
from ficsync.sa.database import Database
from ficsync.sa.repositories import FollowingRepository, WorkRepository
from ficsync.utils.time_utils import now_millis


@dataclass
class UpdateCheckResult:
    checked: int = 0
    updated: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    @property
    def update_count(self) -> int:
        return len(self.updated)


class UpdateChecker:
    """Checks every followed work for new chapters.

    Loading the follow list may raise; after that, a failure on one work is
    logged and the remaining works are still checked.
    """

    def __init__(self, database: Database, source: ArchiveSource):
        self.database = database
        self.source = source
        self.logger = logging.getLogger(self.__class__.__name__)

    def run(self) -> UpdateCheckResult:
        with self.database.get_db() as session:
            follows = [
                (f.id, f.last_known_chapters, f.has_update)
                for f in FollowingRepository(session).get_by_type(FollowingType.WORK)
            ]

        result = UpdateCheckResult()
        for work_id, last_known, had_update in follows:
            try:
                if self._check_work(work_id, last_known, had_update):
                    result.updated.append(work_id)
                result.checked += 1
            except Exception as e:
                self.logger.warning(f"Failed to check work {work_id} for updates: {e}")
                result.failed.append(work_id)

        self.logger.info(
            f"Checked {result.checked} works, {result.update_count} updated, {len(result.failed)} failed"
        )
        return result

    def _check_work(self, work_id: str, last_known: int, had_update: bool) -> bool:
        """
        Refresh one followed work.

        Returns:
            True when the archive has more chapters than last seen
        """
        fetched = self.source.get_work(work_id)
        if not fetched.is_success:
            raise fetched.error

        remote = fetched.value
        found_new = remote.current_chapters > last_known
        with self.database.get_db() as session:
            # An unread update stays flagged until marked read
            FollowingRepository(session).update_status(
                work_id,
                chapters=remote.current_chapters,
                has_update=had_update or found_new,
                timestamp=now_millis(),
            )
            WorkRepository(session).upsert(remote)
        return found_new
