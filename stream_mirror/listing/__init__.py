"""
Batch listings of streams, treasuries and stream activity.
"""

from stream_mirror.listing.batch import (
    AccountSnapshot,
    find_stream_terms,
    list_stream_activity,
    list_streams,
    list_treasuries,
    list_treasury_mints,
    stream_included,
)

__all__ = [
    "AccountSnapshot",
    "find_stream_terms",
    "list_stream_activity",
    "list_streams",
    "list_treasuries",
    "list_treasury_mints",
    "stream_included",
]
