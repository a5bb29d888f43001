"""Router module for StaffDesk.

Provides message normalization and intent extraction. The router entry
point lives in :mod:`staffdesk.router.action_router`.
"""

from .intent import Intent, IntentExtractor, IntentRule, IntentType
from .normalizer import NormalizedText, normalize

__all__ = [
    "Intent",
    "IntentExtractor",
    "IntentRule",
    "IntentType",
    "NormalizedText",
    "normalize",
]
