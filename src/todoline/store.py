"""
TaskStore - the in-memory task hierarchy and its mutation operations.

All indices are 0-based; the command interpreter converts user-facing
identifiers before calling in. Storage order is only ever changed by
``remove``, ``move_up`` and ``move_down``.
"""
from typing import Iterable, Iterator, List, NamedTuple, Optional, Union

from .models import Priority, Subtask, Task
from .recovery import CannotMove, InvalidSubtaskIndex, InvalidTaskIndex
from .logs import get_logger

log = get_logger("store")

class TaskView(NamedTuple):
    """A task as it is displayed, paired with its stable 1-based number."""
    number: int
    task: Task

def _kind(subtask_index: Optional[int]) -> str:
    return "task" if subtask_index is None else "subtask"

class TaskStore:

    def __init__(self, tasks: Optional[Iterable[Task]] = None):
        self._tasks: List[Task] = list(tasks or [])

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks)

    @property
    def tasks(self) -> List[Task]:
        """A shallow copy of the top-level tasks in storage order."""
        return list(self._tasks)

    def _task(self, task_index: int) -> Task:
        if not 0 <= task_index < len(self._tasks):
            raise InvalidTaskIndex()
        return self._tasks[task_index]

    def _subtask(self, task_index: int, subtask_index: int) -> Subtask:
        subtask = self._task(task_index).find_subtask(subtask_index)
        if subtask is None:
            raise InvalidSubtaskIndex()
        return subtask

    def get(self, task_index: int, subtask_index: Optional[int] = None) -> Union[Task, Subtask]:
        """Return the addressed task or subtask."""
        if subtask_index is None:
            return self._task(task_index)
        return self._subtask(task_index, subtask_index)

    def add_task(self, description: str) -> Task:
        task = Task(description=description)
        self._tasks.append(task)
        log.debug(f"Added task {len(self._tasks)}: {description!r}")
        return task

    def add_subtask(self, task_index: int, description: str) -> Subtask:
        task = self._task(task_index)
        subtask = Subtask(description=description)
        task.subtasks.append(subtask)
        log.debug(f"Added subtask {task_index + 1}.{len(task.subtasks)}: {description!r}")
        return subtask

    def toggle_completion(self, task_index: int, subtask_index: Optional[int] = None) -> bool:
        """Flip the completion flag and return its new value."""
        item = self.get(task_index, subtask_index)
        item.completed = not item.completed
        return item.completed

    def remove(self, task_index: int, subtask_index: Optional[int] = None) -> Union[Task, Subtask]:
        """Remove the addressed task (with all of its subtasks) or subtask."""
        task = self._task(task_index)
        if subtask_index is None:
            return self._tasks.pop(task_index)

        if task.find_subtask(subtask_index) is None:
            raise InvalidSubtaskIndex()
        return task.subtasks.pop(subtask_index)

    def _owning_list(self, task_index: int, subtask_index: Optional[int]) -> tuple:
        if subtask_index is None:
            self._task(task_index)
            return self._tasks, task_index
        self._subtask(task_index, subtask_index)
        return self._tasks[task_index].subtasks, subtask_index

    def move_up(self, task_index: int, subtask_index: Optional[int] = None) -> None:
        items, index = self._owning_list(task_index, subtask_index)
        if index == 0:
            raise CannotMove(f"Cannot move {_kind(subtask_index)} up.")
        items[index - 1], items[index] = items[index], items[index - 1]

    def move_down(self, task_index: int, subtask_index: Optional[int] = None) -> None:
        items, index = self._owning_list(task_index, subtask_index)
        if index == len(items) - 1:
            raise CannotMove(f"Cannot move {_kind(subtask_index)} down.")
        items[index + 1], items[index] = items[index], items[index + 1]

    def rename(self, task_index: int, subtask_index: Optional[int], new_description: str) -> str:
        """Replace the description and return the previous one."""
        item = self.get(task_index, subtask_index)
        old_description = item.description
        item.description = new_description
        return old_description

    def increase_priority(self, task_index: int) -> Priority:
        task = self._task(task_index)
        task.priority = task.priority.raised()
        return task.priority

    def decrease_priority(self, task_index: int) -> Priority:
        task = self._task(task_index)
        task.priority = task.priority.lowered()
        return task.priority

    def render_view(self) -> List[TaskView]:
        """
        Tasks ordered for display: HIGH, then NORMAL, then LOW.

        The sort is stable and runs on a copy, so each task keeps the number
        it is addressed by regardless of where it is shown.
        """
        numbered = [TaskView(number, task) for number, task in enumerate(self._tasks, start=1)]
        return sorted(numbered, key=lambda view: -view.task.priority.rank)
