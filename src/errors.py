"""Exceptions raised by the task store and the persistence layer.

Blank text and unknown ids are deliberately not exceptions: the store
treats them as silent no-ops and returns None.
"""


class TaskError(Exception):
    """Base class for task tracker errors."""


class InvalidIndex(TaskError, IndexError):
    """A reorder position fell outside ``[0, length)``."""

    def __init__(self, index: int, length: int):
        super().__init__(f"Position {index} out of range (0..{length - 1})" if length else
                         f"Position {index} out of range (list is empty)")
        self.index = index
        self.length = length


class StorageError(TaskError):
    """Reading or writing the data directory failed."""
