"""Main entry point for tasknc."""
import logging
import sys
from typing import Optional

import click

import logs
import taskwarrior
from cli import CLI
from config import NAME, SHORTNAME, VERSION, load_config
from errors import LoadError, TaskncError
from session import Session

log = logging.getLogger(__name__)


@click.command(context_settings={'help_option_names': ['-h', '--help']})
@click.option('-l', 'loglvl', type=int, default=None, help='Set log level (0-3).')
@click.option('-d', 'debug', is_flag=True, help='Debug mode: load tasks, print the count and exit.')
@click.option('-v', 'version', is_flag=True, help='Print the version of tasknc.')
def main(loglvl: Optional[int], debug: bool, version: bool) -> None:
    """taskwarrior terminal shell."""
    if version:
        click.echo(f'{NAME} v{VERSION}')
        return
    logs.setup_logging(loglvl or 0)
    if loglvl is not None:
        click.echo(f'loglevel: {loglvl}')
    log.debug('%s started', SHORTNAME)

    config = load_config()
    if loglvl is not None:
        config.loglvl = loglvl
    logs.set_level(config.loglvl)
    session = Session(config)
    try:
        config.version = taskwarrior.task_version()
        session.load()
    except LoadError as exc:
        log.error('%s', exc)
    except TaskncError as exc:
        raise click.ClickException(str(exc))

    if not session.tasklist:
        click.echo('it appears that your task list is empty')
        click.echo(f'please add some tasks for {SHORTNAME} to manage')
        sys.exit(1)

    if debug:
        click.echo(f'task count: {session.tasklist.total_count}')
    else:
        log.debug('running shell')
        CLI(session).run()
    log.debug('exiting')


if __name__ == "__main__":
    main()
