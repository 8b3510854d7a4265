# ficsync/cli/commands/follow.py
import time
import click

from ficsync.cli.utils import create_app, fail, print_following_line
from ficsync.models import Error


@click.group()
def follow():
    """Follow works and authors and check them for updates"""
    pass


@follow.command(name='work')
@click.argument('work_id')
@click.option('--verbose/--no-verbose', default=False, help='Show detailed progress')
def follow_work(work_id, verbose):
    """Follow a work for new chapters."""
    app = create_app(verbose)
    try:
        resource = app.sync.get_work(work_id)
        if isinstance(resource, Error):
            fail(resource.message)
        work_info = resource.data
        app.following.follow_work(work_info.id, work_info.title, work_info.current_chapters)
        click.echo(click.style("Following ", fg='green') + click.style(work_info.title, fg='cyan'))
    finally:
        app.close()


@follow.command(name='author')
@click.argument('author_id')
@click.argument('name', required=False)
@click.option('--verbose/--no-verbose', default=False, help='Show detailed progress')
def follow_author(author_id, name, verbose):
    """Follow an author."""
    app = create_app(verbose)
    try:
        app.following.follow_author(author_id, name or author_id)
        click.echo(click.style("Following ", fg='green') + click.style(name or author_id, fg='cyan'))
    finally:
        app.close()


@follow.command(name='list')
@click.option('--updates', is_flag=True, help='Only follows with unread updates')
@click.option('--verbose/--no-verbose', default=False, help='Show detailed progress')
def list_following(updates, verbose):
    """List followed works and authors."""
    app = create_app(verbose)
    try:
        follows = app.following.get_following_with_updates() if updates else app.following.get_all_following()
        if not follows:
            click.echo(click.style("Nothing followed" if not updates else "No updates", fg='yellow'))
            return
        for item in follows:
            print_following_line(item)
    finally:
        app.close()


@follow.command()
@click.argument('following_id')
@click.option('--verbose/--no-verbose', default=False, help='Show detailed progress')
def unfollow(following_id, verbose):
    """Stop following a work or author."""
    app = create_app(verbose)
    try:
        if app.following.unfollow(following_id):
            click.echo(click.style(f"Unfollowed {following_id}", fg='green'))
        else:
            click.echo(click.style(f"Not following {following_id}", fg='yellow'))
    finally:
        app.close()


@follow.command(name='mark-read')
@click.argument('following_id')
@click.option('--verbose/--no-verbose', default=False, help='Show detailed progress')
def mark_read(following_id, verbose):
    """Clear the update flag of a followed work."""
    app = create_app(verbose)
    try:
        if not app.following.mark_update_as_read(following_id):
            fail(f"Not following {following_id}")
        click.echo(click.style(f"Marked {following_id} as read", fg='green'))
    finally:
        app.close()


@follow.command()
@click.option('--verbose/--no-verbose', default=False, help='Show detailed progress')
def check(verbose):
    """Check followed works for new chapters now."""
    app = create_app(verbose)
    try:
        result = app.engine.run_update_check()
        click.echo(click.style("Checked: ", fg='blue') + click.style(str(result.checked), fg='cyan') +
                   click.style("  Updated: ", fg='blue') + click.style(str(result.update_count), fg='green') +
                   click.style("  Failed: ", fg='blue') + click.style(str(len(result.failed)), fg='red'))
        if verbose:
            for work_id in result.failed:
                click.echo(click.style(f"Could not check {work_id}", fg='red'))
    except Exception as e:
        click.echo(click.style(f"Error: {str(e)}", fg='red'), err=True)
        raise SystemExit(1)
    finally:
        app.close()


@follow.command()
@click.option('--interval-hours', type=float, default=None, help='Hours between checks')
@click.option('--verbose/--no-verbose', default=False, help='Show detailed progress')
def watch(interval_hours, verbose):
    """Check followed works periodically until interrupted."""
    app = create_app(verbose)
    try:
        interval = interval_hours * 3600 if interval_hours else None
        app.engine.schedule_periodic_update_check(interval_seconds=interval)
        click.echo(click.style("Watching for updates, press Ctrl+C to stop", fg='blue'))
        while app.engine.periodic_update_check_scheduled:
            time.sleep(1)
    except KeyboardInterrupt:
        click.echo(click.style("\nStopped watching", fg='yellow'))
    finally:
        app.close()
