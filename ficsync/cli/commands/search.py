# ficsync/cli/commands/search.py
import click

from ficsync.cli.utils import create_app, fail, print_work_line
from ficsync.models import Rating, SearchFilters, Success, Error


@click.command()
@click.argument('query')
@click.option('--page', default=1, type=int, help='Result page to fetch')
@click.option('--cached', is_flag=True, help='Search cached works only, without contacting the archive')
@click.option('--rating', type=click.Choice([r.name.lower() for r in Rating]), help='Only works with this rating')
@click.option('--complete-only', is_flag=True, help='Only complete works')
@click.option('--limit', default=50, type=int, help='Maximum cached results to show')
@click.option('--verbose/--no-verbose', default=False, help='Show detailed progress')
def search(query, page, cached, rating, complete_only, limit, verbose):
    """Search works by title, author or free text."""
    app = create_app(verbose)
    try:
        if cached:
            works = app.sync.search_cached_works(query, limit=limit)
        else:
            filters = None
            if rating or complete_only:
                filters = SearchFilters(
                    rating=Rating[rating.upper()] if rating else None,
                    is_complete=True if complete_only else None,
                )
            if verbose:
                click.echo(click.style("Searching the archive for ", fg='blue') +
                           click.style(query, fg='cyan') +
                           click.style(f" (page {page})", fg='blue'))
            resource = app.sync.search_works(query, page=page, filters=filters)
            if isinstance(resource, Error):
                fail(resource.message)
            works = resource.data if isinstance(resource, Success) else []

        if not works:
            click.echo(click.style("No works found", fg='yellow'))
            return
        for work in works:
            print_work_line(work)
        click.echo(click.style(f"\n{len(works)} works", fg='blue'))
    finally:
        app.close()
