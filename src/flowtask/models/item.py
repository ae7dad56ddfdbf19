"""Item (task/reminder) data models."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from flowtask.models.recurrence import RecurrenceDescriptor

Priority = Literal["now", "high", "low"]
ItemType = Literal["task", "reminder"]
ItemStatus = Literal["start", "today", "within7", "7plus"]


class ListRef(BaseModel):
    """A user's list, as offered to the AI list matcher.

    Attributes:
        id: List identifier in the hosted store
        name: Display name (e.g., "Personal", "Work")
    """

    id: str
    name: str


class ItemDraft(BaseModel):
    """A new item ready to be inserted into the hosted store.

    Attributes:
        type: "reminder" when a date or recurrence was found, else "task"
        title: Cleaned, spell-corrected title
        priority: AI-inferred priority
        status: Board column the item starts in
        list_id: Target list, None when the user has no lists yet
        reminder_date: One-shot reminder timestamp
        recurrence: Repeating schedule
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    type: ItemType = "task"
    title: str
    priority: Priority = "low"
    status: ItemStatus = "start"
    list_id: str | None = None
    reminder_date: datetime | None = None
    recurrence: RecurrenceDescriptor | None = None

    @model_validator(mode="after")
    def check_single_schedule(self) -> ItemDraft:
        """An item is never both a one-shot reminder and recurring."""
        if self.reminder_date is not None and self.recurrence is not None:
            raise ValueError("an item cannot have both reminder_date and recurrence")
        return self


class ProcessedText(BaseModel):
    """Output of the AI text-processing call."""

    corrected_text: str
    list_id: str | None = None
    priority: Priority = "low"
    has_links: bool = Field(default=False)
