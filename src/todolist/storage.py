"""
File persistence for TodoList.

Load/save policy:
- a missing file loads as an empty TodoList; the next save creates it
- unparseable content raises MalformedStorageError and is never replaced
  by an empty list
- any other OS-level failure raises StorageUnavailableError

There is no locking. Concurrent invocations against the same file are not
supported and the last save wins.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Union

from .errors import MalformedStorageError, StorageUnavailableError
from .logging_config import get_logger
from .repositories import TodoList
from .settings import STORAGE_FORMATS

log = get_logger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


# PUBLIC_INTERFACE
def storage_path(name: PathLike, fmt: str = "json") -> Path:
    """Return the path of the storage file for base name `name` in format `fmt`."""
    if fmt not in STORAGE_FORMATS:
        raise ValueError(f"Unsupported storage format {fmt!r}; expected one of {', '.join(STORAGE_FORMATS)}")
    return Path(f"{os.fspath(name)}.{fmt}")


def read_file(path: Path) -> str:
    """
    Read a storage file as UTF-8 text.

    Raises:
        FileNotFoundError: if the file does not exist (callers decide what that means).
        MalformedStorageError: if the bytes are not valid UTF-8.
        StorageUnavailableError: for any other OS error.
    """
    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            return f.read()
    except FileNotFoundError:
        raise
    except UnicodeDecodeError as exc:
        raise MalformedStorageError(path, f"not valid UTF-8 ({exc.reason})") from exc
    except OSError as exc:
        raise StorageUnavailableError(path, exc.strerror or str(exc)) from exc


def write_file(path: Path, content: str) -> None:
    """Write `content` as UTF-8, creating parent directories as needed."""
    try:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(content)
    except OSError as exc:
        raise StorageUnavailableError(path, exc.strerror or str(exc)) from exc


# PUBLIC_INTERFACE
def load_path(path: Path, fmt: str = "json") -> TodoList:
    """Load a TodoList from an explicit file path; a missing file gives an empty list."""
    try:
        content = read_file(path)
    except FileNotFoundError:
        log.info("storage.missing", path=str(path))
        return TodoList()

    if fmt == "csv":
        todo_list = TodoList.from_csv(content, origin=str(path))
    else:
        todo_list = TodoList.from_json(content, origin=str(path))
    log.info("storage.loaded", path=str(path), items=len(todo_list), next_id=todo_list.next_id)
    return todo_list


# PUBLIC_INTERFACE
def save_path(todo_list: TodoList, path: Path, fmt: str = "json") -> Path:
    """Write `todo_list` to an explicit file path (JSON is pretty-printed)."""
    content = todo_list.to_csv() if fmt == "csv" else todo_list.to_json_pretty()
    write_file(path, content)
    log.info("storage.saved", path=str(path), items=len(todo_list), next_id=todo_list.next_id)
    return path


# PUBLIC_INTERFACE
def load(name: PathLike, fmt: str = "json") -> TodoList:
    """Load the TodoList stored under base name `name` (e.g. 'todo_list' -> todo_list.json)."""
    return load_path(storage_path(name, fmt), fmt)


# PUBLIC_INTERFACE
def save(todo_list: TodoList, name: PathLike, fmt: str = "json") -> Path:
    """Save `todo_list` under base name `name`; return the written path."""
    return save_path(todo_list, storage_path(name, fmt), fmt)
