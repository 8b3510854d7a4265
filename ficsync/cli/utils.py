# ficsync/cli/utils.py
import click
from datetime import datetime
from typing import Optional

from ficsync.config import Settings, load_settings
from ficsync.jobs import JobEngine, Notifier, DownloadFinished, UpdatesFound, UpdateCheckFailed
from ficsync.models import DownloadStatus, WorkInfo, DownloadInfo, FollowingInfo, BookmarkInfo
from ficsync.remote import ArchiveSource
from ficsync.sa.database import Database
from ficsync.services import SyncRepository, BookmarkService, DownloadService, FollowingService
from ficsync.utils.logging_config import setup_logging


class ClickNotifier(Notifier):
    """Prints job events to the terminal"""

    def notify(self, event) -> None:
        if isinstance(event, DownloadFinished):
            color = 'green' if event.state == DownloadStatus.COMPLETED else 'red'
            message = f"\nDownload {event.state.value.lower()}: {event.title}"
            if event.error:
                message += f" ({event.error})"
            click.echo(click.style(message, fg=color))
        elif isinstance(event, UpdatesFound):
            click.echo(click.style(event.message, fg='green'))
        elif isinstance(event, UpdateCheckFailed):
            click.echo(click.style(f"Update check failed: {event.message}", fg='red'), err=True)


class App:
    """Wires the database, archive source, services and job engine for one command."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.database = Database(settings.database_url)
        self.database.init_db()
        self.source = ArchiveSource.from_settings(settings)
        self.sync = SyncRepository(self.database, self.source)
        self.bookmarks = BookmarkService(self.database)
        self.following = FollowingService(self.database)
        self._engine: Optional[JobEngine] = None

    @property
    def engine(self) -> JobEngine:
        if self._engine is None:
            self._engine = JobEngine(self.database, self.source, notifier=ClickNotifier(), settings=self.settings)
        return self._engine

    @property
    def downloads(self) -> DownloadService:
        return DownloadService(self.database, self.engine)

    def close(self) -> None:
        if self._engine is not None:
            self._engine.shutdown(wait=True)
        self.source.close()
        self.database.dispose()


def create_app(verbose: bool = False) -> App:
    """Configure logging and build the application for a command"""
    settings = load_settings()
    setup_logging(settings.log_level, verbose=verbose)
    return App(settings)


def fail(message: str) -> None:
    """Print an error and exit with status 1"""
    click.echo(click.style(f"Error: {message}", fg='red'), err=True)
    raise SystemExit(1)


def format_date(millis: Optional[int]) -> str:
    if not millis:
        return "never"
    return datetime.fromtimestamp(millis / 1000).strftime("%Y-%m-%d")


def print_work_line(work: WorkInfo) -> None:
    """Print a one-line summary of a work"""
    flags = []
    if work.is_bookmarked:
        flags.append('bookmarked')
    if work.is_downloaded:
        flags.append('downloaded')
    if work.is_following:
        flags.append('following')
    status = 'complete' if work.is_complete else 'ongoing'
    click.echo(
        click.style(f"[{work.id}] ", fg='cyan') +
        click.style(work.title, fg='white', bold=True) +
        click.style(f" by {work.author}", fg='blue') +
        f" ({work.current_chapters}/{work.total_chapters} chapters, {work.words:,} words, {status})" +
        (click.style(f" [{', '.join(flags)}]", fg='green') if flags else "")
    )


def print_work_details(work: WorkInfo) -> None:
    print_work_line(work)
    click.echo(click.style("Rating: ", fg='blue') + work.rating)
    if work.fandoms:
        click.echo(click.style("Fandoms: ", fg='blue') + ", ".join(work.fandoms))
    if work.relationships:
        click.echo(click.style("Relationships: ", fg='blue') + ", ".join(work.relationships))
    if work.series_name:
        click.echo(click.style("Series: ", fg='blue') + f"{work.series_name} (part {work.series_part or '?'})")
    click.echo(click.style("Updated: ", fg='blue') + format_date(work.updated_date))
    click.echo(click.style("Kudos: ", fg='blue') + f"{work.kudos:,}  " +
               click.style("Hits: ", fg='blue') + f"{work.hits:,}")


def print_download_line(download: DownloadInfo) -> None:
    colors = {
        DownloadStatus.COMPLETED: 'green',
        DownloadStatus.FAILED: 'red',
        DownloadStatus.CANCELLED: 'yellow',
    }
    title = download.work.title if download.work else download.work_id
    line = (
        click.style(f"[{download.work_id}] ", fg='cyan') + title + " " +
        click.style(download.status.value, fg=colors.get(download.status, 'blue')) +
        f" {download.downloaded_chapters}/{download.total_chapters} ({download.progress:.0%})"
    )
    if download.error_message:
        line += click.style(f" {download.error_message}", fg='red')
    click.echo(line)


def print_following_line(following: FollowingInfo) -> None:
    marker = click.style(" NEW", fg='green', bold=True) if following.has_update else ""
    click.echo(
        click.style(f"[{following.id}] ", fg='cyan') +
        f"{following.name} ({following.type.value.lower()}, "
        f"{following.last_known_chapters} chapters, checked {format_date(following.last_checked)})" +
        marker
    )


def print_bookmark_line(bookmark: BookmarkInfo) -> None:
    title = bookmark.work.title if bookmark.work else bookmark.work_id
    click.echo(
        click.style(f"[{bookmark.work_id}] ", fg='cyan') + title +
        f" chapter {bookmark.current_chapter} ({bookmark.progress:.0%}), "
        f"last read {format_date(bookmark.last_read_at)}" +
        (click.style(f" - {bookmark.notes}", fg='blue') if bookmark.notes else "")
    )


def chapter_progress_bar(total: int, label: str = 'Chapters') -> click.progressbar:
    """Create a progress bar advanced manually as chapters are stored."""
    return click.progressbar(
        length=max(total, 1),
        label=click.style(label, fg='magenta'),
        show_eta=False,
        show_percent=True,
        width=30
    )
