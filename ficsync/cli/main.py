# ficsync/cli/main.py
import click
from .commands.search import search
from .commands.work import work
from .commands.download import download
from .commands.follow import follow
from .commands.bookmark import bookmark
from .commands.cache import cache


@click.group()
def cli():
    """FicSync: offline reading and update tracking for Archive of Our Own"""
    pass


cli.add_command(search)
cli.add_command(work)
cli.add_command(download)
cli.add_command(follow)
cli.add_command(bookmark)
cli.add_command(cache)


def main():
    """Entry point for the CLI"""
    cli()


if __name__ == '__main__':
    main()
