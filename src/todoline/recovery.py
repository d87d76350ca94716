class TodoError(Exception):
    """Base exception for all todoline errors."""
    pass

class RecoverableError(TodoError):
    """An error that can be recovered from without data loss."""
    pass

class FatalError(TodoError):
    """An error that requires application termination or major intervention."""
    pass

class CorruptionError(FatalError):
    """Corrupted Data Error - from syntax errors in data formats, to just unknown data"""
    pass

class FileOperationError(RecoverableError):
    """File operation failed but can be retried."""
    pass

class CommandError(RecoverableError):
    """User input was invalid for the current state of the task list."""
    message = "Invalid command."

    def __init__(self, message: str = None):
        super().__init__(message or self.message)

class InvalidTaskIndex(CommandError):
    message = "Invalid task number."

class InvalidSubtaskIndex(CommandError):
    message = "Invalid subtask number."

class CannotMove(CommandError):
    """ Move at the edge of a list; nothing changed """
    message = "Cannot move task."

class UnknownCommand(CommandError):
    message = 'Unknown command. Type "?" for help.'

class MissingArgument(CommandError):
    message = "Missing argument."
