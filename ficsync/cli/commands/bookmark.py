# ficsync/cli/commands/bookmark.py
import click

from ficsync.cli.utils import create_app, fail, print_bookmark_line
from ficsync.models import Error


@click.group()
def bookmark():
    """Manage bookmarks and reading progress"""
    pass


@bookmark.command()
@click.argument('work_id')
@click.option('--notes', default=None, help='Notes to keep with the bookmark')
@click.option('--verbose/--no-verbose', default=False, help='Show detailed progress')
def add(work_id, notes, verbose):
    """Bookmark a work."""
    app = create_app(verbose)
    try:
        resource = app.sync.get_work(work_id)
        if isinstance(resource, Error):
            fail(resource.message)
        app.bookmarks.add_bookmark(work_id, notes=notes)
        click.echo(click.style("Bookmarked ", fg='green') + click.style(resource.data.title, fg='cyan'))
    finally:
        app.close()


@bookmark.command()
@click.argument('work_id')
@click.option('--verbose/--no-verbose', default=False, help='Show detailed progress')
def remove(work_id, verbose):
    """Remove a bookmark."""
    app = create_app(verbose)
    try:
        if app.bookmarks.remove_bookmark(work_id):
            click.echo(click.style(f"Removed bookmark for work {work_id}", fg='green'))
        else:
            click.echo(click.style(f"Work {work_id} is not bookmarked", fg='yellow'))
    finally:
        app.close()


@bookmark.command(name='list')
@click.option('--verbose/--no-verbose', default=False, help='Show detailed progress')
def list_bookmarks(verbose):
    """List bookmarks, most recently read first."""
    app = create_app(verbose)
    try:
        bookmarks = app.bookmarks.get_all_bookmarks()
        if not bookmarks:
            click.echo(click.style("No bookmarks", fg='yellow'))
            return
        for item in bookmarks:
            print_bookmark_line(item)
    finally:
        app.close()


@bookmark.command()
@click.argument('work_id')
@click.argument('chapter', type=int)
@click.option('--scroll', default=0, type=int, help='Scroll position within the chapter')
@click.option('--verbose/--no-verbose', default=False, help='Show detailed progress')
def progress(work_id, chapter, scroll, verbose):
    """Record reading progress, bookmarking the work if needed."""
    app = create_app(verbose)
    try:
        print_bookmark_line(app.bookmarks.record_chapter_view(work_id, chapter, scroll))
    finally:
        app.close()
