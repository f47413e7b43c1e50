from __future__ import annotations

from pathlib import Path
from typing import Union


# PUBLIC_INTERFACE
class TodoListError(Exception):
    """Base class for all errors raised by the todolist package."""


# PUBLIC_INTERFACE
class MalformedStorageError(TodoListError):
    """
    Raised when persisted content (JSON or CSV) cannot be turned into a valid
    TodoList: syntax errors, wrong field types, or broken collection invariants.
    """

    def __init__(self, source: Union[str, Path], reason: str) -> None:
        self.source = str(source)
        self.reason = reason
        super().__init__(f"Malformed todo storage {self.source}: {reason}")


# PUBLIC_INTERFACE
class StorageUnavailableError(TodoListError):
    """Raised when a storage file exists but cannot be opened, read or written."""

    def __init__(self, path: Union[str, Path], reason: str) -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Todo storage {self.path} is unavailable: {reason}")


# PUBLIC_INTERFACE
class IdsExhaustedError(TodoListError):
    """Raised by TodoList.insert when every id up to MAX_ITEM_ID has been handed out."""

    def __init__(self, next_id: int) -> None:
        self.next_id = next_id
        super().__init__(f"No todo ids left: next id {next_id} exceeds the largest allowed id")
