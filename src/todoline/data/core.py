"""
TaskFile - loading and saving the task list.

Loading never fails the session: a missing file is an empty list, and a
damaged file is copied aside so the next save cannot destroy it.
"""
import shutil
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

from pydantic import ValidationError

from todoline.recovery import CorruptionError, FileOperationError
from todoline.models import Task
from todoline.logs import get_logger
from .io import atomic_write, data_type_for, load_document

log = get_logger("data")

CORRUPT_SUFFIX = ".corrupt"

def to_records(tasks: List[Task]) -> List[Dict[str, Any]]:
    """Plain records in the persisted layout."""
    return [task.model_dump(mode='json') for task in tasks]

def read_records(data: Any) -> Tuple[List[Task], bool]:
    """
    Coerce a loaded document into tasks.

    Accepts a sequence of records or a mapping holding one under ``tasks``.
    Missing fields get their defaults; a bare string becomes a task with that
    description; anything else that does not validate is skipped.

    Returns:
        The tasks, and whether any part of the document was discarded.
    """
    if isinstance(data, dict):
        if 'tasks' not in data:
            if data:
                log.warning("Task file is a mapping without a 'tasks' list; starting empty")
            return [], bool(data)
        data = data['tasks']
    if data is None:
        return [], False
    if not isinstance(data, list):
        log.warning(f"Expected a list of tasks, found {type(data).__name__}; starting empty")
        return [], True

    tasks = []
    discarded = False
    for position, record in enumerate(data, start=1):
        if isinstance(record, str):
            record = {'description': record}
        if not isinstance(record, dict):
            log.warning(f"Skipping task record {position}: not a mapping")
            discarded = True
            continue
        try:
            tasks.append(Task.model_validate(record))
        except ValidationError as e:
            log.warning(f"Skipping task record {position}: {e.error_count()} invalid field(s)")
            discarded = True
    return tasks, discarded

def from_records(data: Any) -> List[Task]:
    return read_records(data)[0]

class TaskFile:
    """The external store for one task list."""

    def __init__(self, path: Union[Path, str]):
        self.path = Path(path)

    def load_state(self) -> List[Task]:
        try:
            data = load_document(self.path)
        except CorruptionError as e:
            log.warning(f"{e}; starting with an empty task list")
            self._set_aside()
            return []
        except FileOperationError as e:
            log.warning(f"{e}; starting with an empty task list")
            return []

        tasks, discarded = read_records(data)
        if discarded:
            self._set_aside()
        log.info(f"Loaded {len(tasks)} task(s) from {self.path}")
        return tasks

    def save_state(self, tasks: List[Task]) -> None:
        atomic_write(data_type_for(self.path), self.path, to_records(tasks), create_dirs=True)
        log.debug(f"Saved {len(tasks)} task(s) to {self.path}")

    def _set_aside(self) -> None:
        backup = self.path.with_name(self.path.name + CORRUPT_SUFFIX)
        try:
            shutil.copy2(self.path, backup)
            log.warning(f"Copied unreadable task file to {backup}")
        except OSError as e:
            log.error(f"Could not copy unreadable task file to {backup}: {e}")
