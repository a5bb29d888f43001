"""Text helpers shared by the command handlers.

Replies are plain newline-delimited text: no markdown emphasis, dates in the
display timezone, names instead of IDs.
"""

import html
import re
from datetime import datetime
from zoneinfo import ZoneInfo

MARKDOWN_EMPHASIS = re.compile(r"(\*\*|__|\*|`)(.+?)\1", re.DOTALL)
LEADING_TO = re.compile(r"^to\s+", re.IGNORECASE)
SENTENCE_ENDINGS = (".", "!", "?")
NOTE_PREVIEW_LENGTH = 50


def strip_entities(text: str) -> str:
    """Decode HTML entities, including double-escaped ones like ``&amp;quot;``."""
    previous = None
    while previous != text:
        previous, text = text, html.unescape(text)
    return text


def strip_emphasis(text: str) -> str:
    """Remove markdown bold, italic and code markers, keeping the text."""
    return MARKDOWN_EMPHASIS.sub(r"\2", text)


def capitalize_first(text: str) -> str:
    """Upper-case the first letter without touching the rest."""
    return text[:1].upper() + text[1:] if text else text


def ensure_terminal_punctuation(text: str) -> str:
    """End the text with a full stop unless it already ends a sentence.

    Closing quotes and brackets after the punctuation are allowed, so
    ``He said "hi."`` is left alone.
    """
    text = text.rstrip()
    if not text or text.rstrip("\"')]").endswith(SENTENCE_ENDINGS):
        return text
    return f"{text}."


def clean_task_description(text: str) -> str:
    """Tidy a task description for display.

    Decodes entities, drops a leading "To " and capitalizes the result.

    Args:
        text: Stored task description.

    Returns:
        Display form of the description.
    """
    cleaned = LEADING_TO.sub("", strip_entities(text).strip())
    return capitalize_first(cleaned)


def note_preview(text: str, length: int = NOTE_PREVIEW_LENGTH) -> str:
    """First characters of a note followed by an ellipsis."""
    return f"{strip_entities(text)[:length]}..."


def format_display_datetime(value: datetime, timezone: ZoneInfo) -> str:
    """Render an instant as a local date and time, e.g. ``18 Oct 2026, 02:30 PM``."""
    return value.astimezone(timezone).strftime("%d %b %Y, %I:%M %p")


def format_display_time(value: datetime, timezone: ZoneInfo) -> str:
    """Render an instant as a local time of day, e.g. ``02:30 PM``."""
    return value.astimezone(timezone).strftime("%I:%M %p")


def format_display_date(value: datetime, timezone: ZoneInfo) -> str:
    """Render an instant as a local calendar date, e.g. ``18 Oct 2026``."""
    return value.astimezone(timezone).strftime("%d %b %Y")


def format_amount(amount: float, currency: str) -> str:
    """Render a money amount with thousands separators, e.g. ``KSH 1,500``."""
    if float(amount).is_integer():
        return f"{currency} {int(amount):,}"
    return f"{currency} {amount:,.2f}"


__all__ = [
    "capitalize_first",
    "clean_task_description",
    "ensure_terminal_punctuation",
    "format_amount",
    "format_display_date",
    "format_display_datetime",
    "format_display_time",
    "note_preview",
    "strip_emphasis",
    "strip_entities",
]
