from __future__ import annotations

from enum import StrEnum


class TaskStatus(StrEnum):
    PENDING = "pending"
    COMPLETED = "completed"


class Energy(StrEnum):
    HIGH = "high"
    LOW = "low"


class CompletionKind(StrEnum):
    MAIN = "main"
    SUB = "sub"


class QuoteMode(StrEnum):
    RANDOM = "random"
    FIXED = "fixed"


class Collection(StrEnum):
    TASKS = "tasks"
    TAGS = "tags"
    QUOTES = "quotes"


class HistoryKind(StrEnum):
    SINGLE = "single"
    GROUPED = "grouped"
