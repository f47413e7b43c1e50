from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional

from pydantic import ValidationError

from .csv_codec import dump_csv, parse_csv
from .errors import IdsExhaustedError, MalformedStorageError
from .logging_config import get_logger
from .models import TodoItem
from .schemas import TodoListDocument
from .utils import MAX_ITEM_ID, normalize

log = get_logger(__name__)


# PUBLIC_INTERFACE
class TodoList:
    """
    In-memory todo collection keyed by normalized description.

    Items are stored under their lowercased description. A second index maps
    ids to keys so that id-based operations do not scan the collection; both
    indices are updated together on every insert and remove.

    Lookups return copies, so callers can never mutate a stored item except
    through update_by_id / update_by_description.
    """

    def __init__(self) -> None:
        self._items: Dict[str, TodoItem] = {}
        self._keys_by_id: Dict[int, str] = {}
        self._next_id = 0

    @classmethod
    def _restore(cls, items: Iterable[TodoItem], next_id: int) -> "TodoList":
        todo_list = cls()
        for item in items:
            todo_list._items[item.description] = item
            todo_list._keys_by_id[item.id] = item.description
        todo_list._next_id = next_id
        return todo_list

    @property
    def next_id(self) -> int:
        """Id that the next successful insert will receive."""
        return self._next_id

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[TodoItem]:
        return iter(self.items())

    def __contains__(self, description: object) -> bool:
        return isinstance(description, str) and normalize(description) in self._items

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TodoList):
            return NotImplemented
        return self._next_id == other._next_id and self._items == other._items

    def __repr__(self) -> str:
        return f"TodoList(items={len(self._items)}, next_id={self._next_id})"

    def items(self) -> List[TodoItem]:
        """Return copies of all items, in storage order."""
        return [item.model_copy() for item in self._items.values()]

    def insert(self, description: str) -> bool:
        """
        Add a new item for `description`.

        Returns:
            True if the item was created, False if an item with the same
            normalized description already exists (nothing is changed then).

        Raises:
            IdsExhaustedError: if next_id is past MAX_ITEM_ID (nothing is changed).
        """
        key = normalize(description)
        if key in self._items:
            log.debug("todo.duplicate", description=key)
            return False
        if self._next_id > MAX_ITEM_ID:
            raise IdsExhaustedError(self._next_id)
        item = TodoItem(id=self._next_id, description=key, done=False)
        self._items[key] = item
        self._keys_by_id[item.id] = key
        self._next_id += 1
        log.info("todo.inserted", id=item.id, description=key)
        return True

    def find_by_description(self, description: str) -> Optional[TodoItem]:
        """Return a copy of the item stored under `description`, or None."""
        item = self._items.get(normalize(description))
        return None if item is None else item.model_copy()

    def find_by_id(self, todo_id: int) -> Optional[TodoItem]:
        """Return a copy of the item with `todo_id`, or None."""
        key = self._keys_by_id.get(todo_id)
        return None if key is None else self._items[key].model_copy()

    def update_by_description(self, description: str) -> Optional[bool]:
        """Toggle the item stored under `description`; return its new done flag or None."""
        item = self._items.get(normalize(description))
        if item is None:
            return None
        done = item.toggle()
        log.info("todo.toggled", id=item.id, done=done)
        return done

    def update_by_id(self, todo_id: int) -> Optional[bool]:
        """Toggle the item with `todo_id`; return its new done flag or None."""
        key = self._keys_by_id.get(todo_id)
        if key is None:
            return None
        return self.update_by_description(key)

    def remove_by_description(self, description: str) -> Optional[TodoItem]:
        """Remove and return the item stored under `description`, or None."""
        item = self._items.pop(normalize(description), None)
        if item is None:
            return None
        del self._keys_by_id[item.id]
        log.info("todo.removed", id=item.id, description=item.description)
        return item

    def remove_by_id(self, todo_id: int) -> Optional[TodoItem]:
        """Remove and return the item with `todo_id`, or None."""
        key = self._keys_by_id.get(todo_id)
        if key is None:
            return None
        return self.remove_by_description(key)

    # Serialization

    def to_document(self) -> TodoListDocument:
        return TodoListDocument(items=dict(self._items), next_id=self._next_id)

    def to_json_pretty(self) -> str:
        """Human-readable JSON dump of items and next_id."""
        return self.to_document().model_dump_json(indent=2)

    def to_json(self) -> str:
        """Compact JSON dump of items and next_id."""
        return self.to_document().model_dump_json()

    @classmethod
    def from_json(cls, source: str, origin: str = "<json>") -> "TodoList":
        """
        Rebuild a TodoList from JSON produced by to_json / to_json_pretty.

        Raises:
            MalformedStorageError: if the text is not valid JSON, has the wrong
                shape or types, or breaks the collection invariants.
        """
        try:
            document = TodoListDocument.model_validate_json(source)
        except ValidationError as exc:
            raise MalformedStorageError(origin, str(exc)) from exc
        return cls._restore(document.items.values(), document.next_id)

    def to_csv(self) -> str:
        """CSV dump: header line plus one row per item."""
        return dump_csv(self._items.values())

    @classmethod
    def from_csv(cls, source: str, origin: str = "<csv>") -> "TodoList":
        """
        Rebuild a TodoList from CSV produced by to_csv.

        next_id becomes one more than the highest id read, or 0 for no rows.

        Raises:
            MalformedStorageError: if a row cannot be parsed.
        """
        items, next_id = parse_csv(source, origin)
        return cls._restore(items, next_id)
