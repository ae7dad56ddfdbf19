"""FlowTask domain models.

Pydantic models for recurrence descriptors, extraction results, draft items
and configuration.
"""

from .config_models import AIConfig, AppConfig, OutputConfig, RecurrenceConfig, UIConfig
from .item import ItemDraft, ListRef, ProcessedText
from .recurrence import (
    DEFAULT_TIME,
    ExtractionKind,
    ExtractionResult,
    Frequency,
    RecurrenceDescriptor,
)

__all__ = [
    # Recurrence models
    "DEFAULT_TIME",
    "ExtractionKind",
    "ExtractionResult",
    "Frequency",
    "RecurrenceDescriptor",
    # Item models
    "ItemDraft",
    "ListRef",
    "ProcessedText",
    # Config models
    "AIConfig",
    "AppConfig",
    "OutputConfig",
    "RecurrenceConfig",
    "UIConfig",
]
