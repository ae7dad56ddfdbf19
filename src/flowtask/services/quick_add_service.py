"""Quick add: turn one line of user text into a draft item.

Extraction runs first so the AI only ever sees the title without its date
phrase; the draft is handed to the hosted store by the caller.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Protocol

from flowtask.models.config_models import RecurrenceConfig
from flowtask.models.item import ItemDraft, ItemStatus, ListRef, ProcessedText
from flowtask.models.recurrence import ExtractionResult
from flowtask.services.ai_service import AIServiceError
from flowtask.utils.logger import get_logger
from flowtask.utils.recurrence_parser import extract, rules_for
from flowtask.utils.text import capitalize_first, detect_urls


class TextProcessor(Protocol):
    """Anything that can spell-correct a title and pick a list for it."""

    async def process_text(
        self, title: str, lists: list[ListRef] | None = None
    ) -> ProcessedText: ...


def reminder_status(reminder_date: datetime, now: datetime) -> ItemStatus:
    """Board column for a one-shot reminder, by whole days until it is due."""
    diff_days = math.ceil((reminder_date - now).total_seconds() / 86400)
    if diff_days <= 1:
        return "today"
    if diff_days <= 7:
        return "within7"
    return "7plus"


def choose_list(suggested: str | None, lists: list[ListRef]) -> str | None:
    """Use the suggested list if it exists, else the first list, else None."""
    if suggested and any(lst.id == suggested for lst in lists):
        return suggested
    return lists[0].id if lists else None


def build_draft(
    extraction: ExtractionResult,
    processed: ProcessedText,
    lists: list[ListRef],
    now: datetime,
) -> ItemDraft:
    """Assemble the draft item from an extraction and an AI pass."""
    list_id = choose_list(processed.list_id, lists)
    if extraction.recurrence is not None:
        return ItemDraft(
            type="reminder",
            title=processed.corrected_text,
            priority=processed.priority,
            status="within7",
            list_id=list_id,
            recurrence=extraction.recurrence,
        )
    if extraction.absolute_date is not None:
        return ItemDraft(
            type="reminder",
            title=processed.corrected_text,
            priority=processed.priority,
            status=reminder_status(extraction.absolute_date, now),
            list_id=list_id,
            reminder_date=extraction.absolute_date,
        )
    return ItemDraft(
        type="task",
        title=processed.corrected_text,
        priority=processed.priority,
        status="start",
        list_id=list_id,
    )


class QuickAddService:
    """Parse, correct and classify a quick-add line."""

    def __init__(
        self,
        processor: TextProcessor | None = None,
        recurrence_config: RecurrenceConfig | None = None,
        strict: bool = False,
    ):
        self.processor = processor
        self.recurrence_config = recurrence_config or RecurrenceConfig()
        # strict: let AIServiceError propagate instead of degrading
        self.strict = strict

    def extract(self, text: str, now: datetime) -> ExtractionResult:
        """Run the extractor with the configured rule table and default time."""
        return extract(
            text,
            now,
            rules=rules_for(self.recurrence_config.collapse_weekday_patterns),
            default_time=self.recurrence_config.default_time,
        )

    async def process(self, title: str, lists: list[ListRef]) -> ProcessedText:
        """AI pass over *title*; falls back to plain capitalization on failure."""
        if self.processor is not None and title:
            try:
                return await self.processor.process_text(title, lists)
            except AIServiceError as e:
                if self.strict:
                    raise
                get_logger().warning("AI processing failed, using original text: %s", e)
        return ProcessedText(
            corrected_text=capitalize_first(title),
            has_links=bool(detect_urls(title)),
        )

    async def quick_add(
        self, text: str, lists: list[ListRef], now: datetime
    ) -> tuple[ItemDraft, ExtractionResult]:
        """Build the draft item for *text*.

        Args:
            text: Raw line typed by the user
            lists: The user's lists; empty when none exist yet (the caller
                then creates the default "Personal" list)
            now: Reference time

        Returns:
            The draft item and the extraction it was built from
        """
        extraction = self.extract(text.strip(), now)
        processed = await self.process(extraction.residual_text, lists)
        draft = build_draft(extraction, processed, lists, now)
        get_logger().info(
            "quick add: kind=%s type=%s status=%s",
            extraction.kind.value,
            draft.type,
            draft.status,
        )
        return draft, extraction
