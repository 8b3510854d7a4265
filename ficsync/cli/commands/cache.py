# ficsync/cli/commands/cache.py
import click

from ficsync.cli.utils import create_app
from ficsync.utils.time_utils import days_ago_millis


@click.group()
def cache():
    """Manage the local cache"""
    pass


@cache.command()
@click.option('--days', default=30, type=int, help='Delete entries cached more than this many days ago')
@click.option('--verbose/--no-verbose', default=False, help='Show detailed progress')
def clear(days, verbose):
    """Delete old cached works and chapters.

    Bookmarks and downloads of deleted works are removed with them.
    """
    app = create_app(verbose)
    try:
        if verbose:
            click.echo(click.style("\nClearing entries cached more than ", fg='blue') +
                       click.style(str(days), fg='cyan') +
                       click.style(" days ago", fg='blue'))
        removed = app.sync.clear_old_cache(days_ago_millis(days))
        click.echo(click.style("Removed ", fg='blue') +
                   click.style(str(removed['works']), fg='cyan') +
                   click.style(" works and ", fg='blue') +
                   click.style(str(removed['chapters']), fg='cyan') +
                   click.style(" chapters", fg='blue'))
    finally:
        app.close()
