"""
Presentation mapper: raw records to human-friendly views (and back).
"""

from stream_mirror.presentation.mapper import (
    UNKNOWN_TOKEN,
    format_timestamp,
    present,
    present_many,
    resolve_decimals,
    scale_amount,
)
from stream_mirror.presentation.models import FriendlyActivity, FriendlyStream, FriendlyTreasury

__all__ = [
    "FriendlyActivity",
    "FriendlyStream",
    "FriendlyTreasury",
    "UNKNOWN_TOKEN",
    "format_timestamp",
    "present",
    "present_many",
    "resolve_decimals",
    "scale_amount",
]
