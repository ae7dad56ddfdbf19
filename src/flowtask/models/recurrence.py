"""Recurrence and extraction data models.

``RecurrenceDescriptor`` is the persisted shape of a repeating reminder.
Attributes are snake_case in Python and camelCase on the wire, matching the
columns of the hosted task store.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class Frequency(str, Enum):
    """Known recurrence frequencies."""

    MINUTELY = "minutely"
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKDAYS = "weekdays"
    WEEKENDS = "weekends"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class ExtractionKind(str, Enum):
    """Outcome of running the extractor over a piece of text."""

    NONE = "none"
    RECURRENCE = "recurrence"
    ABSOLUTE_DATE = "absoluteDate"


DEFAULT_TIME = "09:00"


class RecurrenceDescriptor(BaseModel):
    """Structured, persisted representation of a repeating reminder.

    Attributes:
        frequency: One of :class:`Frequency`, or any other string for
            schedules this version does not understand
        time: Anchor time of day, ``HH:MM`` 24-hour
        interval: Multiplier for minutely/hourly schedules
        day_of_week: 0-6, Sunday is 0
        day_of_month: 1-31
        month_of_year: 1-12
        original_text: The exact phrase matched in the user's input
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    frequency: str
    time: str = Field(default=DEFAULT_TIME)
    interval: int = Field(default=1, ge=1)
    day_of_week: int | None = Field(default=None, ge=0, le=6)
    day_of_month: int | None = Field(default=None, ge=1, le=31)
    month_of_year: int | None = Field(default=None, ge=1, le=12)
    original_text: str | None = None

    @field_validator("frequency")
    @classmethod
    def normalize_frequency(cls, v: str) -> str:
        """Lower-case known frequencies, keep unknown ones verbatim."""
        lowered = v.strip().lower()
        if lowered in {f.value for f in Frequency}:
            return lowered
        return v

    @property
    def known_frequency(self) -> Frequency | None:
        """The frequency as an enum member, or None when unrecognized."""
        try:
            return Frequency(self.frequency)
        except ValueError:
            return None

    def to_record(self) -> dict[str, Any]:
        """Dump to the persisted camelCase shape, omitting unset optionals."""
        return self.model_dump(by_alias=True, exclude_none=True)

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> RecurrenceDescriptor:
        """Load from the persisted camelCase shape."""
        return cls.model_validate(record)


class ExtractionResult(BaseModel):
    """Result of scanning one input string for a date or recurrence.

    Never persisted; callers copy ``recurrence`` or ``absolute_date`` onto the
    task they are creating and discard the rest.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    kind: ExtractionKind = ExtractionKind.NONE
    matched_span: str = ""
    time_span: str = ""
    residual_text: str = ""
    recurrence: RecurrenceDescriptor | None = None
    absolute_date: datetime | None = None

    @model_validator(mode="after")
    def check_kind_payload(self) -> ExtractionResult:
        """A result carries exactly the payload its kind announces."""
        if self.kind == ExtractionKind.RECURRENCE:
            if self.recurrence is None or self.absolute_date is not None:
                raise ValueError("recurrence results carry only a recurrence")
        elif self.kind == ExtractionKind.ABSOLUTE_DATE:
            if self.absolute_date is None or self.recurrence is not None:
                raise ValueError("absoluteDate results carry only an absolute date")
        elif self.recurrence is not None or self.absolute_date is not None:
            raise ValueError("empty results carry no payload")
        return self
