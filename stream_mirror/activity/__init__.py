"""
Stream activity: deposits and withdrawals recovered from transaction history.
"""

from stream_mirror.activity.models import ACTION_DEPOSITED, ACTION_WITHDREW, StreamActivityRecord
from stream_mirror.activity.parser import parse_activity, parse_activity_batch, parse_contributors

__all__ = [
    "ACTION_DEPOSITED",
    "ACTION_WITHDREW",
    "StreamActivityRecord",
    "parse_activity",
    "parse_activity_batch",
    "parse_contributors",
]
