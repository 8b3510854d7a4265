# ficsync/cli/commands/work.py
import re
import click

from ficsync.cli.utils import create_app, fail, print_work_details, print_work_line
from ficsync.models import Error


def _strip_tags(html: str) -> str:
    text = re.sub(r'<\s*(br|/p)\s*/?>', '\n', html or '', flags=re.IGNORECASE)
    return re.sub(r'<[^>]+>', '', text).strip()


@click.group()
def work():
    """Show works and read chapters"""
    pass


@work.command()
@click.argument('work_id')
@click.option('--refresh', is_flag=True, help='Fetch from the archive even when cached')
@click.option('--verbose/--no-verbose', default=False, help='Show detailed progress')
def show(work_id, refresh, verbose):
    """Show a work's details."""
    app = create_app(verbose)
    try:
        resource = app.sync.get_work(work_id, force_refresh=refresh)
        if isinstance(resource, Error):
            fail(resource.message)
        print_work_details(resource.data)
        if verbose and resource.data.summary:
            click.echo("\n" + _strip_tags(resource.data.summary))
    finally:
        app.close()


@work.command()
@click.argument('work_id')
@click.argument('number', type=int)
@click.option('--refresh', is_flag=True, help='Fetch from the archive even when cached')
@click.option('--no-track', is_flag=True, help='Do not update the reading position')
@click.option('--verbose/--no-verbose', default=False, help='Show detailed progress')
def chapter(work_id, number, refresh, no_track, verbose):
    """Print a chapter of a work."""
    if number < 1:
        raise click.BadParameter("Chapter numbers start at 1", param_hint='NUMBER')
    app = create_app(verbose)
    try:
        resource = app.sync.get_chapter(work_id, number, force_refresh=refresh)
        if isinstance(resource, Error):
            fail(resource.message)
        chapter_info = resource.data
        click.echo(click.style(chapter_info.title or f"Chapter {number}", fg='blue', bold=True))
        if chapter_info.notes:
            click.echo(click.style(_strip_tags(chapter_info.notes), fg='cyan'))
        click.echo("\n" + _strip_tags(chapter_info.content) + "\n")
        if chapter_info.end_notes:
            click.echo(click.style(_strip_tags(chapter_info.end_notes), fg='cyan'))
        if not no_track:
            app.bookmarks.record_chapter_view(work_id, number)
    finally:
        app.close()


@work.command()
@click.argument('work_id')
@click.option('--verbose/--no-verbose', default=False, help='Show detailed progress')
def chapters(work_id, verbose):
    """List the cached chapters of a work."""
    app = create_app(verbose)
    try:
        cached = app.sync.get_chapters_for_work(work_id)
        if not cached:
            click.echo(click.style(f"No cached chapters for work {work_id}", fg='yellow'))
            return
        for item in cached:
            click.echo(click.style(f"{item.chapter_number:>4}. ", fg='cyan') +
                       (item.title or f"Chapter {item.chapter_number}") +
                       click.style(f" ({item.word_count:,} words)", fg='blue'))
    finally:
        app.close()


@work.command()
@click.argument('author')
@click.option('--verbose/--no-verbose', default=False, help='Show detailed progress')
def author(author, verbose):
    """List cached works by an author."""
    app = create_app(verbose)
    try:
        works = app.sync.get_works_by_author(author)
        if not works:
            click.echo(click.style(f"No cached works by {author}", fg='yellow'))
            return
        for item in works:
            print_work_line(item)
    finally:
        app.close()
