"""
Todo list manager package.

This module marks the 'todolist' directory as a Python package and exposes
the core collection types for convenience imports.
"""

from .errors import IdsExhaustedError, MalformedStorageError, StorageUnavailableError, TodoListError
from .models import TodoItem
from .repositories import TodoList

__version__ = "0.1.0"

__all__ = [
    "IdsExhaustedError",
    "MalformedStorageError",
    "StorageUnavailableError",
    "TodoItem",
    "TodoList",
    "TodoListError",
    "__version__",
]
