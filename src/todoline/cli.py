"""
Command Line Interface for todoline.
"""

import click
from pathlib import Path
from .version import VERSION
from .config import Settings, get_settings
from .commands import Interpreter
from .data import TaskFile
from .logs import setup_logging, get_logger
from .recovery import FatalError
from .store import TaskStore

log = get_logger("cli")

PROMPT = "> "


def read_line() -> str:
    return input(PROMPT)


@click.command()
@click.version_option(version=VERSION, prog_name="todoline")
@click.option('-f', '--file', 'task_file', type=click.Path(dir_okay=False, path_type=Path), default=None,
              help='Task file to use (default: $TODOLINE_FILE or ./tasks.yml)')
def main(task_file):
    """
    todoline - an interactive task list with subtasks and priorities.

    Type "?" at the prompt for the list of commands.
    """
    settings = get_settings()
    if task_file is not None:
        settings = Settings(**{**settings.model_dump(), 'task_file': task_file})
    setup_logging(settings)
    log.info(f"Starting todoline {VERSION} with {settings.task_file}")

    task_store = TaskFile(settings.task_file)
    interpreter = Interpreter(TaskStore(task_store.load_state()), save=task_store.save_state)

    try:
        interpreter.run(read_line)
    except FatalError as e:
        log.critical(f"Session ended: {e}")
        raise click.ClickException(str(e))


if __name__ == "__main__":
    main()
