from __future__ import annotations

from typing import Dict

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .models import TodoItem
from .utils import MAX_ITEM_ID, normalize


# PUBLIC_INTERFACE
class TodoListDocument(BaseModel):
    """
    Schema of the persisted JSON store.

    Validation enforces the collection invariants so that a document loaded
    from disk can be handed to TodoList without further checks:
    - every key equals the normalized description of its item
    - ids are unique
    - next_id is greater than every stored id
    """

    model_config = ConfigDict(
        strict=True,
        json_schema_extra={
            "example": {
                "items": {
                    "buy milk": {"id": 0, "description": "buy milk", "done": False},
                    "walk dog": {"id": 1, "description": "walk dog", "done": True},
                },
                "next_id": 2,
            }
        },
    )

    items: Dict[str, TodoItem] = Field(default_factory=dict, description="Items keyed by normalized description")
    next_id: int = Field(default=0, ge=0, le=MAX_ITEM_ID + 1, description="Id handed to the next inserted item")

    @model_validator(mode="after")
    def check_invariants(self) -> "TodoListDocument":
        """
        Reject documents whose keys, ids or counter disagree with each other.
        """
        seen_ids = set()
        for key, item in self.items.items():
            if item.description != normalize(item.description):
                raise ValueError(f"description {item.description!r} is not lowercased")
            if key != item.description:
                raise ValueError(
                    f"key {key!r} does not match description {item.description!r}"
                )
            if item.id in seen_ids:
                raise ValueError(f"duplicate id {item.id}")
            seen_ids.add(item.id)
            if item.id >= self.next_id:
                raise ValueError(f"id {item.id} is not below next_id {self.next_id}")
        return self
