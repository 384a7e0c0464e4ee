"""Built-in collections used when the store has nothing to offer.

These are read-time fallbacks only. Nothing here is ever written back to the
store.
"""
from __future__ import annotations

from collections.abc import Sequence

from .entities import QuoteEntity, TagEntity

COLOR_PALETTE = (
    "stone",
    "rose",
    "blue",
    "emerald",
    "amber",
    "purple",
    "orange",
    "cyan",
)

DEFAULT_TAGS = (
    TagEntity(id="default-misc", name="Misc", color="stone"),
    TagEntity(id="default-weekend", name="Weekend", color="rose"),
    TagEntity(id="default-internship", name="Internship", color="blue"),
    TagEntity(id="default-school", name="School", color="emerald"),
    TagEntity(id="default-life", name="Life", color="amber"),
)

DEFAULT_QUOTES = (
    QuoteEntity(
        id="default-quote-1",
        text="We swallow too much meaning; life only asks us to breathe.",
    ),
    QuoteEntity(
        id="default-quote-2",
        text=(
            "Maybe nothing got done today, but being a little gentler than "
            "yesterday is real progress too."
        ),
    ),
    QuoteEntity(
        id="default-quote-3",
        text="Let yourself go slowly. Let yourself not manage it yet.",
    ),
)

# 30 minutes to 8 hours
TIME_OPTIONS = tuple((step + 1) * 30 for step in range(16))


def effective_tags(tags: Sequence[TagEntity]) -> tuple[TagEntity, ...]:
    return tuple(tags) if tags else DEFAULT_TAGS


def effective_quotes(quotes: Sequence[QuoteEntity]) -> tuple[QuoteEntity, ...]:
    return tuple(quotes) if quotes else DEFAULT_QUOTES


def normalize_color(color: str | None) -> str:
    if color in COLOR_PALETTE:
        return color
    return COLOR_PALETTE[0]


def format_minutes(minutes: int | None) -> str:
    if not minutes:
        return ""
    if minutes < 60:
        return f"{minutes}m"
    hours = minutes / 60
    return f"{hours:g}h"
