"""
Friendly (human-facing) views.

Each view is a separate type from the raw record it was built from: keys
are base58 text, amounts are decimal-scaled floats, timestamps are
ISO-8601 UTC text ("" when unknown). `raw` points back at the source so
the mapper can go back to raw mode and refresh can re-project.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from stream_mirror.activity.models import StreamActivityRecord
from stream_mirror.projection.models import ProjectedStreamState, ProjectedTreasuryState


@dataclass(frozen=True)
class FriendlyStream:
    id: str | None
    version: int
    initialized: bool
    name: str
    treasurer: str
    beneficiary: str
    treasury: str
    associated_token: str
    rate_amount: float
    rate_interval_in_seconds: int
    allocation: float
    allocation_reserved: float
    total_withdrawals: float
    cliff_vest_amount: float
    cliff_vest_percent: float
    start_utc: str
    funded_on_utc: str
    vested_amount: float
    unvested_amount: float
    withdrawable_amount: float | None
    estimated_depletion_utc: str
    state: str
    is_streaming: bool
    last_projected_at: str
    created_on_utc: str
    transaction_signature: str | None
    upgrade_required: bool
    decimals: int
    raw: ProjectedStreamState = field(repr=False, compare=False)


@dataclass(frozen=True)
class FriendlyTreasury:
    id: str | None
    version: int
    initialized: bool
    name: str
    treasurer: str
    associated_token: str
    mint: str
    balance: float
    allocation_reserved: float
    allocation_assigned: float
    total_withdrawals: float
    streams_amount: int
    slot: int
    created_on_utc: str
    depletion_rate: float
    treasury_type: str
    auto_close: bool
    upgrade_required: bool
    decimals: int
    raw: ProjectedTreasuryState = field(repr=False, compare=False)


@dataclass(frozen=True)
class FriendlyActivity:
    signature: str
    initializer: str
    action: str
    amount: float
    mint: str
    block_time: int
    utc_date: str
    decimals: int
    raw: StreamActivityRecord = field(repr=False, compare=False)
