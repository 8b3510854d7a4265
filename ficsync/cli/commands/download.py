# ficsync/cli/commands/download.py
import click

from ficsync.cli.utils import create_app, fail, print_download_line, chapter_progress_bar
from ficsync.models import DownloadStatus, Error, InProgress


@click.group()
def download():
    """Download works for offline reading"""
    pass


@download.command()
@click.argument('work_id')
@click.option('--verbose/--no-verbose', default=False, help='Show detailed progress')
def start(work_id, verbose):
    """Download every chapter of a work."""
    app = create_app(verbose)
    try:
        resource = app.sync.get_work(work_id)
        if isinstance(resource, Error):
            fail(resource.message)
        work_info = resource.data

        click.echo(click.style("Downloading ", fg='blue') +
                   click.style(work_info.title, fg='cyan') +
                   click.style(f" ({work_info.current_chapters} chapters)", fg='blue'))

        with chapter_progress_bar(work_info.current_chapters) as bar:
            shown = {'count': 0}

            def on_progress(state):
                if isinstance(state, InProgress) and state.downloaded_chapters > shown['count']:
                    bar.update(state.downloaded_chapters - shown['count'])
                    shown['count'] = state.downloaded_chapters

            job_id = app.downloads.start_download(
                work_id, work_info.title, work_info.current_chapters, listener=on_progress
            )
            app.engine.wait(job_id)

        result = app.downloads.get_download(work_id)
        if result is not None:
            print_download_line(result)
            if result.status == DownloadStatus.FAILED:
                raise SystemExit(1)
    except KeyboardInterrupt:
        click.echo(click.style("\nCancelling download...", fg='yellow'))
        app.downloads.cancel_download(work_id)
    finally:
        app.close()


@download.command(name='list')
@click.option('--status', type=click.Choice([s.value.lower() for s in DownloadStatus]), help='Only downloads with this status')
@click.option('--verbose/--no-verbose', default=False, help='Show detailed progress')
def list_downloads(status, verbose):
    """List downloads, most recently started first."""
    app = create_app(verbose)
    try:
        if status == DownloadStatus.COMPLETED.value.lower():
            downloads = app.downloads.get_completed_downloads()
        else:
            downloads = app.downloads.get_all_downloads()
            if status:
                downloads = [d for d in downloads if d.status.value.lower() == status]
        if not downloads:
            click.echo(click.style("No downloads", fg='yellow'))
            return
        for item in downloads:
            print_download_line(item)
    finally:
        app.close()


@download.command()
@click.argument('work_id')
@click.option('--verbose/--no-verbose', default=False, help='Show detailed progress')
def cancel(work_id, verbose):
    """Cancel an unfinished download."""
    app = create_app(verbose)
    try:
        if app.downloads.cancel_download(work_id):
            click.echo(click.style(f"Cancelled download of work {work_id}", fg='green'))
        else:
            click.echo(click.style(f"No unfinished download for work {work_id}", fg='yellow'))
    finally:
        app.close()


@download.command()
@click.argument('work_id')
@click.option('--verbose/--no-verbose', default=False, help='Show detailed progress')
def delete(work_id, verbose):
    """Delete a download and its stored chapters."""
    app = create_app(verbose)
    try:
        if app.downloads.delete_download(work_id):
            click.echo(click.style(f"Deleted download of work {work_id}", fg='green'))
        else:
            click.echo(click.style(f"No download for work {work_id}", fg='yellow'))
    finally:
        app.close()


@download.command(name='clear-failed')
@click.option('--verbose/--no-verbose', default=False, help='Show detailed progress')
def clear_failed(verbose):
    """Remove failed and cancelled downloads from the list."""
    app = create_app(verbose)
    try:
        removed = app.downloads.clear_failed_downloads()
        click.echo(click.style("Removed ", fg='blue') +
                   click.style(str(removed), fg='cyan') +
                   click.style(" downloads", fg='blue'))
    finally:
        app.close()


@download.command()
@click.option('--resume', is_flag=True, help='Restart interrupted downloads instead of marking them failed')
@click.option('--verbose/--no-verbose', default=False, help='Show detailed progress')
def recover(resume, verbose):
    """Handle downloads interrupted by a previous run."""
    app = create_app(verbose)
    try:
        recovered = app.engine.recover_stalled_downloads(resume=resume)
        if not recovered:
            click.echo(click.style("No interrupted downloads", fg='yellow'))
            return
        action = "Resuming" if resume else "Marked failed:"
        for work_id in recovered:
            click.echo(click.style(f"{action} ", fg='blue') + click.style(work_id, fg='cyan'))
    finally:
        app.close()
