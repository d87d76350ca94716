"""
Data management submodule: reading and writing the task file.
"""

from .core import TaskFile, from_records, read_records, to_records
from .io import atomic_write, load_document, DATA_YAML, DATA_JSON

__all__ = [
    'TaskFile',
    'from_records',
    'read_records',
    'to_records',
    'atomic_write',
    'load_document',
    'DATA_YAML',
    'DATA_JSON',
]
