from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from enum import Enum
from typing import Optional, List
import re

from .recovery import InvalidTaskIndex, InvalidSubtaskIndex

class Priority(Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"

    @property
    def rank(self) -> int:
        """Position in the total order LOW < NORMAL < HIGH."""
        return _PRIORITY_ORDER.index(self)

    def raised(self) -> 'Priority':
        return _PRIORITY_ORDER[min(self.rank + 1, len(_PRIORITY_ORDER) - 1)]

    def lowered(self) -> 'Priority':
        return _PRIORITY_ORDER[max(self.rank - 1, 0)]

    @classmethod
    def coerce(cls, value) -> 'Priority':
        """Map a stored token onto a priority, falling back to NORMAL."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            token = value.strip().lower()
            for priority in cls:
                if priority.value == token or priority.name.lower() == token:
                    return priority
        return cls.NORMAL

_PRIORITY_ORDER = [Priority.LOW, Priority.NORMAL, Priority.HIGH]

_TRUE_TOKENS = ('1', 'true', 'yes', 'y', 'on', 'x', 'done')

class TaskAddress:
    """Utility class for parsing user-facing task identifiers (``N`` or ``N.M``)."""

    NUMBER_PATTERN = re.compile(r'^\d+$', re.ASCII)

    def __init__(self, task_index: int, subtask_index: Optional[int] = None):
        self.task_index = task_index
        self.subtask_index = subtask_index

    @classmethod
    def parse(cls, token: str) -> 'TaskAddress':
        """
        Parse a 1-based identifier into 0-based indices.

        Raises:
            InvalidTaskIndex: if the task part is not a positive integer.
            InvalidSubtaskIndex: if the subtask part is not a positive integer.
        """
        head, sep, tail = token.strip().partition('.')
        task_number = cls._to_number(head)
        if task_number is None:
            raise InvalidTaskIndex()

        if not sep:
            return cls(task_number - 1)

        subtask_number = cls._to_number(tail)
        if subtask_number is None:
            raise InvalidSubtaskIndex()
        return cls(task_number - 1, subtask_number - 1)

    @classmethod
    def _to_number(cls, text: str) -> Optional[int]:
        if not cls.NUMBER_PATTERN.match(text):
            return None
        number = int(text)
        return number if number > 0 else None

    @property
    def is_subtask(self) -> bool:
        return self.subtask_index is not None

    def __eq__(self, other) -> bool:
        if not isinstance(other, TaskAddress):
            return NotImplemented
        return (self.task_index, self.subtask_index) == (other.task_index, other.subtask_index)

    def __repr__(self) -> str:
        return f"TaskAddress({self.task_index!r}, {self.subtask_index!r})"

    def __str__(self) -> str:
        if self.is_subtask:
            return f"{self.task_index + 1}.{self.subtask_index + 1}"
        return str(self.task_index + 1)

class _Item(BaseModel):
    """Fields shared by tasks and subtasks."""

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    description: str = Field(default="", description="What needs doing")
    completed: bool = Field(
        default=False,
        validation_alias=AliasChoices('completed', 'isCompleted'),
        description="Whether the item is done",
    )
    priority: Priority = Field(default=Priority.NORMAL, description="Priority tier")

    @field_validator('description', mode='before')
    @classmethod
    def coerce_description(cls, v):
        if v is None:
            return ""
        return v if isinstance(v, str) else str(v)

    @field_validator('completed', mode='before')
    @classmethod
    def coerce_completed(cls, v):
        if isinstance(v, bool):
            return v
        if isinstance(v, (int, float)):
            return v == 1
        if isinstance(v, str):
            return v.strip().lower() in _TRUE_TOKENS
        return False

    @field_validator('priority', mode='before')
    @classmethod
    def coerce_priority(cls, v):
        return Priority.coerce(v)

class Subtask(_Item):
    """A one-level nested work item. Its priority is kept on disk but never used."""
    pass

class Task(_Item):
    """A top-level work item owning an ordered list of subtasks."""

    subtasks: List[Subtask] = Field(
        default_factory=list,
        description="List of task sub-tasks"
    )

    @field_validator('subtasks', mode='before')
    @classmethod
    def coerce_subtasks(cls, v):
        if not isinstance(v, list):
            return []
        records = []
        for record in v:
            if isinstance(record, str):
                records.append({'description': record})
            elif isinstance(record, (dict, Subtask)):
                records.append(record)
        return records

    def find_subtask(self, index: int) -> Optional[Subtask]:
        """Return the subtask at a 0-based index, or None if out of range."""
        if 0 <= index < len(self.subtasks):
            return self.subtasks[index]
        return None
