"""
Treasury projection and lazy backfill.

Treasuries carry no time-dependent quantities. Older layouts do not store
a creation time or a stream count; backfill_treasury() fills them in from
caller-supplied lookups (block time of the creation slot, number of streams
funded by the treasury).
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable

from solders.pubkey import Pubkey

from stream_mirror.decoder.models import RawAnchorTreasury, RawTreasury, RawTreasuryV0, RawTreasuryV1
from stream_mirror.mirror_logging import get_logger
from stream_mirror.projection.models import ProjectedTreasuryState, TreasuryType
from stream_mirror.utils.pubkey_utils import DEFAULT_PUBKEY, to_pubkey

logger = get_logger(__name__)

MS_PER_SECOND = 1000


def _treasury_type(value: int) -> TreasuryType:
    return TreasuryType.OPEN if value == 0 else TreasuryType.LOCK


def _optional_key(key: Pubkey) -> Pubkey | None:
    return None if key == DEFAULT_PUBKEY else key


def project_treasury(
    record: RawTreasury,
    *,
    address: Pubkey | str | None = None,
) -> ProjectedTreasuryState:
    treasury_id = to_pubkey(address) if address is not None else None
    if isinstance(record, RawTreasuryV0):
        return ProjectedTreasuryState(
            id=treasury_id,
            version=record.version,
            record=record,
            initialized=record.initialized,
            name="",
            treasurer=record.treasurer,
            associated_token=None,
            mint=record.mint,
            balance=0,
            allocation_reserved=0,
            allocation_assigned=0,
            total_withdrawals=0,
            streams_amount=0,
            slot=record.slot,
            created_on_utc_ms=0,
            depletion_rate=0,
            treasury_type=TreasuryType.OPEN,
            auto_close=False,
            upgrade_required=True,
        )
    if isinstance(record, RawTreasuryV1):
        return ProjectedTreasuryState(
            id=treasury_id,
            version=record.version,
            record=record,
            initialized=record.initialized,
            name=record.name,
            treasurer=record.treasurer,
            associated_token=_optional_key(record.associated_token),
            mint=record.mint,
            balance=record.balance,
            allocation_reserved=record.allocation_reserved,
            allocation_assigned=record.allocation_committed,
            total_withdrawals=0,
            streams_amount=record.streams_amount,
            slot=record.slot,
            created_on_utc_ms=record.created_on_utc,
            depletion_rate=record.depletion_rate,
            treasury_type=_treasury_type(record.treasury_type),
            auto_close=False,
            upgrade_required=False,
        )
    if isinstance(record, RawAnchorTreasury):
        return ProjectedTreasuryState(
            id=treasury_id,
            version=record.version,
            record=record,
            initialized=record.initialized,
            name=record.name,
            treasurer=record.treasurer,
            associated_token=_optional_key(record.associated_token),
            mint=record.mint,
            balance=record.balance,
            allocation_reserved=record.allocation_reserved,
            allocation_assigned=record.allocation_assigned,
            total_withdrawals=record.total_withdrawals,
            streams_amount=record.total_streams,
            slot=record.slot,
            created_on_utc_ms=record.created_on_utc * MS_PER_SECOND,
            depletion_rate=0,
            treasury_type=_treasury_type(record.treasury_type),
            auto_close=record.auto_close,
            upgrade_required=False,
        )
    raise TypeError(f"cannot project {type(record).__name__}")


def backfill_treasury(
    state: ProjectedTreasuryState,
    *,
    block_time_lookup: Callable[[int], int | None] | None = None,
    stream_count: int | Callable[[ProjectedTreasuryState], int] | None = None,
) -> ProjectedTreasuryState:
    """
    Return a copy of state with a missing creation time and stream count filled in.

    block_time_lookup(slot) returns the block time (seconds) of the slot or
    None. A failing lookup is logged and leaves created_on_utc_ms at 0; it
    never fails the treasury.
    """
    changes: dict[str, int] = {}
    if not state.created_on_utc_ms and block_time_lookup is not None:
        try:
            block_time = block_time_lookup(state.slot)
        except Exception as e:
            logger.warning(
                "treasury_block_time_lookup_failed",
                treasury=str(state.id) if state.id else None,
                slot=state.slot,
                error=str(e),
            )
            block_time = None
        if block_time:
            changes["created_on_utc_ms"] = int(block_time) * MS_PER_SECOND
    if not state.streams_amount and stream_count is not None:
        count = stream_count(state) if callable(stream_count) else stream_count
        if count:
            changes["streams_amount"] = int(count)
    if not changes:
        return state
    return replace(state, **changes)
