"""
todoline - an interactive command-line task manager.

Tasks hold an ordered list of subtasks (one level deep) and a priority that
decides display order without changing a task's number.
"""

from .version import VERSION
from .models import Priority, Task, Subtask, TaskAddress
from .store import TaskStore, TaskView
from .commands import Interpreter
from .data import TaskFile

__version__ = VERSION

__all__ = [
    "VERSION",
    "Priority",
    "Task",
    "Subtask",
    "TaskAddress",
    "TaskStore",
    "TaskView",
    "Interpreter",
    "TaskFile",
]
