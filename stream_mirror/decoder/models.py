"""
Canonical raw records produced by the versioned decoder.

One frozen dataclass per layout version. Values are exactly as stored:
integer amounts in token units, Pubkey keys, integer timestamps in the
unit the layout stores them (see stream_mirror.layouts.accounts). Nothing
here depends on the reference time.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Union

from solders.pubkey import Pubkey


@dataclass(frozen=True)
class _LegacyStream:
    initialized: bool
    name_bytes: bytes
    name: str
    treasurer: Pubkey
    rate_amount: int
    rate_interval_in_seconds: int
    funded_on_utc: int
    """Epoch milliseconds."""
    start_utc: int
    """Epoch milliseconds."""
    rate_cliff_in_seconds: int
    cliff_vest_amount: int
    cliff_vest_percent: int
    beneficiary: Pubkey
    associated_token: Pubkey
    treasury: Pubkey
    escrow_estimated_depletion_utc: int
    """Epoch milliseconds; 0 when the program did not store an estimate."""
    escrow_vested_amount_snap: int
    escrow_vested_amount_snap_slot: int
    escrow_vested_amount_snap_block_time: int
    stream_resumed_slot: int
    stream_resumed_block_time: int
    auto_pause_in_seconds: int


@dataclass(frozen=True)
class RawStreamV0(_LegacyStream):
    """Legacy stream; allocation is total_deposits - total_withdrawals."""

    version: ClassVar[int] = 0

    total_deposits: int
    total_withdrawals: int

    @property
    def allocation(self) -> int:
        return self.total_deposits - self.total_withdrawals

    @property
    def allocation_reserved(self) -> int:
        return self.allocation


@dataclass(frozen=True)
class RawStreamV1(_LegacyStream):
    """Legacy stream with an explicit allocation field."""

    version: ClassVar[int] = 1

    allocation_reserved: int
    allocation: int

    @property
    def total_withdrawals(self) -> int:
        # v1 accounts do not track withdrawals.
        return 0


@dataclass(frozen=True)
class RawAnchorStream:
    """Anchor stream with cliff vesting and manual pause bookkeeping. Times in seconds."""

    version: ClassVar[int] = 2

    account_version: int
    initialized: bool
    name_bytes: bytes
    name: str
    treasurer: Pubkey
    rate_amount: int
    rate_interval_in_seconds: int
    start_utc: int
    cliff_vest_amount: int
    cliff_vest_percent: int
    """Parts per million of the allocation (1_000_000 = 100%)."""
    beneficiary: Pubkey
    associated_token: Pubkey
    treasury: Pubkey
    allocation: int
    allocation_reserved: int
    total_withdrawals: int
    last_withdrawal_units: int
    last_withdrawal_slot: int
    last_withdrawal_block_time: int
    last_manual_stop_withdrawable_units_snap: int
    last_manual_stop_slot: int
    last_manual_stop_block_time: int
    last_manual_resume_remaining_allocation_units_snap: int
    last_manual_resume_slot: int
    last_manual_resume_block_time: int
    last_known_total_seconds_in_paused_status: int
    last_auto_stop_block_time: int
    fee_payed_by_treasurer: bool
    created_on_utc: int


@dataclass(frozen=True)
class RawTreasuryV0:
    version: ClassVar[int] = 0

    initialized: bool
    slot: int
    mint: Pubkey
    treasurer: Pubkey


@dataclass(frozen=True)
class RawTreasuryV1:
    version: ClassVar[int] = 1

    initialized: bool
    slot: int
    treasurer: Pubkey
    associated_token: Pubkey
    mint: Pubkey
    name_bytes: bytes
    name: str
    balance: int
    allocation_reserved: int
    allocation_committed: int
    streams_amount: int
    created_on_utc: int
    """Epoch milliseconds; 0 when unknown."""
    depletion_rate: int
    treasury_type: int


@dataclass(frozen=True)
class RawAnchorTreasury:
    version: ClassVar[int] = 2

    account_version: int
    initialized: bool
    bump: int
    slot: int
    name_bytes: bytes
    name: str
    treasurer: Pubkey
    associated_token: Pubkey
    mint: Pubkey
    balance: int
    allocation_reserved: int
    allocation_assigned: int
    total_withdrawals: int
    total_streams: int
    created_on_utc: int
    """Epoch seconds; 0 when unknown."""
    treasury_type: int
    auto_close: bool


@dataclass(frozen=True)
class MintRecord:
    """SPL token mint; the source of a token's decimals."""

    version: ClassVar[int] = 0

    mint_authority: Pubkey | None
    supply: int
    decimals: int
    is_initialized: bool
    freeze_authority: Pubkey | None


@dataclass(frozen=True)
class RawStreamTerms:
    """Proposed terms for a legacy stream; amounts in token units."""

    version: ClassVar[int] = 0

    initialized: bool
    proposed_by: Pubkey
    stream_id: Pubkey
    name_bytes: bytes
    name: str
    treasurer: Pubkey
    beneficiary: Pubkey
    associated_token: Pubkey
    rate_amount: int
    rate_interval_in_seconds: int
    rate_cliff_in_seconds: int
    cliff_vest_amount: int
    cliff_vest_percent: int
    auto_pause_in_seconds: int


@dataclass(frozen=True)
class TokenAccountRecord:
    """SPL token account: a balance of one mint held by owner."""

    version: ClassVar[int] = 0

    mint: Pubkey
    owner: Pubkey
    amount: int
    delegate: Pubkey | None
    state: int
    is_native: int | None
    """Rent-exempt reserve for wrapped SOL accounts; None for other mints."""
    delegated_amount: int
    close_authority: Pubkey | None


RawStream = Union[RawStreamV0, RawStreamV1, RawAnchorStream]
RawTreasury = Union[RawTreasuryV0, RawTreasuryV1, RawAnchorTreasury]
RawAccountRecord = Union[RawStream, RawTreasury, MintRecord, RawStreamTerms, TokenAccountRecord]
