"""
Projected (time-dependent) records.

A projection is the canonical raw record plus the quantities re-derived
for one reference time. The raw record rides along in `record` so a cached
projection can be re-projected for a later time without new bytes.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Union

from solders.pubkey import Pubkey

from stream_mirror.decoder.models import RawStream, RawTreasury


class StreamState(IntEnum):
    """Lifecycle state of a stream at the reference time."""

    SCHEDULED = 1
    RUNNING = 2
    PAUSED = 3

    @property
    def label(self) -> str:
        return self.name.capitalize()


class TreasuryType(IntEnum):
    OPEN = 0
    LOCK = 1

    @property
    def label(self) -> str:
        return self.name.capitalize()


Amount = Union[int, float]


@dataclass(frozen=True)
class ProjectedStreamState:
    """
    Stream state as of last_projected_at (block time, seconds).

    Amounts are in token units (not scaled by decimals). start_utc_ms,
    funded_on_utc_ms and estimated_depletion_utc_ms are epoch milliseconds
    for every layout version.
    """

    id: Pubkey | None
    version: int
    record: RawStream
    initialized: bool
    name: str
    treasurer: Pubkey
    beneficiary: Pubkey
    treasury: Pubkey
    associated_token: Pubkey
    rate_amount: int
    rate_interval_in_seconds: int
    allocation: int
    allocation_reserved: int
    total_withdrawals: int
    cliff_vest_amount: int
    cliff_vest_percent: int
    start_utc_ms: int
    funded_on_utc_ms: int
    vested_amount: Amount
    unvested_amount: Amount
    withdrawable_amount: Amount | None
    """Anchor streams only; None for legacy versions."""
    estimated_depletion_utc_ms: int
    state: StreamState
    is_streaming: bool
    last_projected_at: int
    created_block_time: int = 0
    transaction_signature: str | None = None
    upgrade_required: bool = False


@dataclass(frozen=True)
class ProjectedTreasuryState:
    """Treasury state; nothing here depends on the reference time."""

    id: Pubkey | None
    version: int
    record: RawTreasury
    initialized: bool
    name: str
    treasurer: Pubkey
    associated_token: Pubkey | None
    """None when the account stores the all-zero default key."""
    mint: Pubkey
    balance: int
    allocation_reserved: int
    allocation_assigned: int
    total_withdrawals: int
    streams_amount: int
    slot: int
    created_on_utc_ms: int
    """0 when unknown; see backfill_treasury."""
    depletion_rate: int
    treasury_type: TreasuryType
    auto_close: bool
    upgrade_required: bool
