"""tradestats CLI main entry point."""

import click

from tradestats import __version__
from tradestats.cli.commands import report_command


@click.group()
@click.version_option(version=__version__)
def main():
    """tradestats - Trading Performance Analytics"""
    pass


# Register commands
main.add_command(report_command)


if __name__ == "__main__":
    main()
