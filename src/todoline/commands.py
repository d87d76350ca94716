"""
Command interpreter: turns one line of user input into a TaskStore operation.

Every command is a single character followed by its arguments. Commands that
can change the task list are always followed by a save and a fresh listing,
also when they fail, so the user sees the current state after each attempt.
"""
from typing import Callable, Dict, List, NamedTuple, Optional, Tuple

import click

from .models import Task, TaskAddress
from .recovery import CommandError, FileOperationError, InvalidTaskIndex, MissingArgument, UnknownCommand
from .render import HELP_TEXT, render
from .store import TaskStore
from .logs import get_logger

log = get_logger("commands")

Echo = Callable[[str], None]
SaveState = Callable[[List[Task]], None]
ReadLine = Callable[[], str]

class Command(NamedTuple):
    handler: Callable[[str], Optional[str]]
    usage: str
    mutates: bool = True
    lists: bool = True

class Interpreter:
    """Dispatches single-letter commands against a TaskStore."""

    def __init__(self, store: TaskStore, save: Optional[SaveState] = None, echo: Echo = click.echo):
        self.store = store
        self.save = save
        self.echo = echo
        self.running = True
        self.commands: Dict[str, Command] = {
            'a': Command(self._add, "a <task description>"),
            's': Command(self._add_subtask, "s <task number> <subtask description>"),
            't': Command(self._list, "t", mutates=False),
            'x': Command(self._toggle, "x <task number>[.<subtask number>]"),
            'd': Command(self._remove, "d <task number>[.<subtask number>]"),
            'h': Command(self._move_up, "h <task number>[.<subtask number>]"),
            'l': Command(self._move_down, "l <task number>[.<subtask number>]"),
            'r': Command(self._rename, "r <task number>[.<subtask number>] <new task description>"),
            '+': Command(self._increase_priority, "+ <task number>"),
            '-': Command(self._decrease_priority, "- <task number>"),
            '?': Command(self._help, "?", mutates=False, lists=False),
            'q': Command(self._quit, "q", mutates=False, lists=False),
        }

    # ---- session ----

    def run(self, read_line: ReadLine) -> None:
        """Show the task list, then process lines until ``q`` or end of input."""
        self.show()
        while self.running:
            try:
                line = read_line()
            except (EOFError, KeyboardInterrupt):
                log.info("Input closed, ending session")
                self.echo("")
                break
            self.execute(line)

    def execute(self, line: str) -> bool:
        """
        Process one line of input.

        Returns:
            False once the session should end, True otherwise.
        """
        line = line.strip()
        if not line:
            return self.running

        parts = line.split(maxsplit=1)
        token = parts[0].lower()
        args = parts[1].strip() if len(parts) > 1 else ""

        command = self.commands.get(token)
        if command is None:
            log.debug(f"Unknown command: {line!r}")
            self.echo(str(UnknownCommand()))
            return self.running

        log.debug(f"Command {token!r} args={args!r}")
        try:
            message = command.handler(args)
            if message:
                self.echo(message)
        except CommandError as e:
            self.echo(str(e))

        if command.mutates:
            self.persist()
        if command.lists:
            self.show()
        return self.running

    def show(self) -> None:
        self.echo(render(self.store.render_view()))

    def persist(self) -> None:
        if self.save is None:
            return
        try:
            self.save(self.store.tasks)
        except FileOperationError as e:
            log.info(f"Could not save tasks: {e}")
            self.echo(f"Warning: tasks were not saved ({e})")

    # ---- argument helpers ----

    @staticmethod
    def _split(args: str, usage: str) -> Tuple[str, str]:
        parts = args.split(maxsplit=1)
        if len(parts) < 2:
            raise MissingArgument(f"Usage: {usage}")
        return parts[0], parts[1].strip()

    def _address(self, args: str, token: str) -> TaskAddress:
        if not args:
            raise MissingArgument(f"Usage: {self.commands[token].usage}")
        return TaskAddress.parse(args.split()[0])

    def _task_index(self, identifier: str) -> int:
        # Only a task number is accepted here, so any ".M" part is a bad task number
        if '.' in identifier:
            raise InvalidTaskIndex()
        return TaskAddress.parse(identifier).task_index

    # ---- handlers ----

    def _add(self, args: str) -> None:
        if not args:
            raise MissingArgument(f"Usage: {self.commands['a'].usage}")
        self.store.add_task(args)

    def _add_subtask(self, args: str) -> None:
        identifier, description = self._split(args, self.commands['s'].usage)
        self.store.add_subtask(self._task_index(identifier), description)

    def _list(self, args: str) -> None:
        return None

    def _toggle(self, args: str) -> None:
        address = self._address(args, 'x')
        self.store.toggle_completion(address.task_index, address.subtask_index)

    def _remove(self, args: str) -> None:
        address = self._address(args, 'd')
        removed = self.store.remove(address.task_index, address.subtask_index)
        log.info(f"Removed {address}: {removed.description!r}")

    def _move_up(self, args: str) -> None:
        address = self._address(args, 'h')
        self.store.move_up(address.task_index, address.subtask_index)

    def _move_down(self, args: str) -> None:
        address = self._address(args, 'l')
        self.store.move_down(address.task_index, address.subtask_index)

    def _rename(self, args: str) -> str:
        identifier, description = self._split(args, self.commands['r'].usage)
        address = TaskAddress.parse(identifier)
        old_description = self.store.rename(address.task_index, address.subtask_index, description)
        return f"  From: {old_description}\n  To:   {description}"

    def _increase_priority(self, args: str) -> None:
        if not args:
            raise MissingArgument(f"Usage: {self.commands['+'].usage}")
        self.store.increase_priority(self._task_index(args.split()[0]))

    def _decrease_priority(self, args: str) -> None:
        if not args:
            raise MissingArgument(f"Usage: {self.commands['-'].usage}")
        self.store.decrease_priority(self._task_index(args.split()[0]))

    def _help(self, args: str) -> str:
        return HELP_TEXT

    def _quit(self, args: str) -> str:
        self.running = False
        return "Goodbye!"
