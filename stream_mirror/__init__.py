"""
Stream Mirror: decode money-streaming account snapshots and project their state.

Turns raw Solana account bytes (streams, treasuries, mints) into canonical
records, projects vested / withdrawable amounts and lifecycle state for a
reference block time, and renders raw or human-friendly views. Pure and
I/O free: fetching account data and transaction history is the caller's job.
"""

__version__ = "0.1.0"

from stream_mirror.core.exceptions import (
    InvalidStreamData,
    MalformedLayout,
    MissingExternalDependency,
    StreamMirrorError,
    UnrecognizedAccountLayout,
    ValueOutOfRange,
)
from stream_mirror.decoder import decode, decode_mint, decode_stream, decode_treasury
from stream_mirror.listing import AccountSnapshot, list_stream_activity, list_streams, list_treasuries
from stream_mirror.presentation import present
from stream_mirror.projection import project, project_treasury
from stream_mirror.projection.refresh import refresh, refresh_many
from stream_mirror.utils.pubkey_utils import to_pubkey

__all__ = [
    "AccountSnapshot",
    "InvalidStreamData",
    "MalformedLayout",
    "MissingExternalDependency",
    "StreamMirrorError",
    "UnrecognizedAccountLayout",
    "ValueOutOfRange",
    "decode",
    "decode_mint",
    "decode_stream",
    "decode_treasury",
    "list_stream_activity",
    "list_streams",
    "list_treasuries",
    "present",
    "project",
    "project_treasury",
    "refresh",
    "refresh_many",
    "to_pubkey",
]
