"""Text normalization for incoming chat messages.

Chat clients send HTML-escaped text (``&quot;Jane&quot;``). Keyword checks run
on a lower-cased copy while captures are taken from the decoded original so
names keep their casing.
"""

import html
from dataclasses import dataclass


@dataclass(frozen=True)
class NormalizedText:
    """A decoded message and its lower-cased form."""

    original: str
    lower: str

    def contains(self, *keywords: str) -> bool:
        """Check that every keyword occurs in the message."""
        return all(keyword in self.lower for keyword in keywords)

    def contains_any(self, *keywords: str) -> bool:
        """Check that at least one keyword occurs in the message."""
        return any(keyword in self.lower for keyword in keywords)


def normalize(message: str) -> NormalizedText:
    """Decode HTML entities and build the matching form of a message.

    Args:
        message: Raw message text.

    Returns:
        The normalized text.
    """
    decoded = html.unescape(message or "").strip()
    return NormalizedText(original=decoded, lower=decoded.lower())


__all__ = ["NormalizedText", "normalize"]
