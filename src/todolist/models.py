from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .utils import MAX_ITEM_ID


# PUBLIC_INTERFACE
class TodoItem(BaseModel):
    """
    A single todo entry.

    Fields:
    - id: Unique identifier in 0..MAX_ITEM_ID, assigned by TodoList.insert and never changed
    - description: Lowercased text of the entry; doubles as the lookup key
    - done: Completion flag, False at creation and only ever toggled

    `id` and `description` are frozen; assigning to them raises a ValidationError.
    """

    model_config = ConfigDict(
        strict=True,
        json_schema_extra={
            "example": {"id": 0, "description": "buy milk", "done": False}
        },
    )

    id: int = Field(..., ge=0, le=MAX_ITEM_ID, frozen=True, description="Unique identifier of the todo item")
    description: str = Field(..., frozen=True, description="Normalized (lowercased) description")
    done: bool = Field(default=False, description="Completion status flag")

    def toggle(self) -> bool:
        """Flip the completion flag and return its new value."""
        self.done = not self.done
        return self.done
