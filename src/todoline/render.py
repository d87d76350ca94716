from typing import Iterable, List

from .store import TaskView

EMPTY_LISTING = "No tasks."

HELP_TEXT = "\n".join([
    "Available commands:",
    "  a <task description> - Add a new task",
    "  s <task number> <description> - Add a subtask",
    "  t - List all tasks",
    "  x <task number>[.<subtask number>] - Mark task as complete/incomplete",
    "  d <task number>[.<subtask number>] - Remove task",
    "  h <task number>[.<subtask number>] - Move task higher",
    "  l <task number>[.<subtask number>] - Move task lower",
    "  r <task number>[.<subtask number>] <new description> - Rename task",
    "  + <task number> - Increase task priority",
    "  - <task number> - Decrease task priority",
    "  ? - Show this help message",
    "  q - Quit the application",
])

def status_marker(completed: bool) -> str:
    return "[X]" if completed else "[ ]"

def render_lines(view: Iterable[TaskView]) -> List[str]:
    """Format a store view as numbered lines; subtasks are dot-numbered and indented."""
    lines = []
    for number, task in view:
        lines.append(f"{number}. {status_marker(task.completed)} ({task.priority.value}) {task.description}")
        for sub_number, subtask in enumerate(task.subtasks, start=1):
            lines.append(f"   {number}.{sub_number}. {status_marker(subtask.completed)} {subtask.description}")
    return lines

def render(view: Iterable[TaskView]) -> str:
    lines = render_lines(view)
    if not lines:
        return EMPTY_LISTING
    return "\n".join([" "] + lines + [""])
