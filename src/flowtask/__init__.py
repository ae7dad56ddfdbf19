"""FlowTask: natural-language reminders and recurrence formatting."""

__version__ = "0.1.0"
