"""
Presentation mapper: raw records to friendly views and back.

present(record, friendly) is pure and idempotent. One flag governs every
field of a record: friendly mode renders all keys, amounts and timestamps;
raw mode leaves them all untouched. The current shape of the value decides
what to do, so presenting an already-friendly view is a no-op.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping, Union

from solders.pubkey import Pubkey

from stream_mirror.activity.models import StreamActivityRecord
from stream_mirror.core.exceptions import MissingExternalDependency
from stream_mirror.presentation.models import FriendlyActivity, FriendlyStream, FriendlyTreasury
from stream_mirror.projection.models import ProjectedStreamState, ProjectedTreasuryState

UNKNOWN_TOKEN = "Unknown Token"
CLIFF_PERCENT_SCALE = 10_000

Decimals = Union[int, Mapping[Any, int], None]
RawView = Union[ProjectedStreamState, ProjectedTreasuryState, StreamActivityRecord]
FriendlyView = Union[FriendlyStream, FriendlyTreasury, FriendlyActivity]

_FRIENDLY_TYPES = (FriendlyStream, FriendlyTreasury, FriendlyActivity)


def resolve_decimals(decimals: Decimals, mint: Pubkey | str | None) -> int:
    """
    Return the decimal count for mint.

    decimals is a single int for every mint or a mapping keyed by Pubkey
    or base58 text. Raises MissingExternalDependency when it is absent.
    """
    if isinstance(decimals, bool):
        raise MissingExternalDependency("mint decimals must be an integer")
    if isinstance(decimals, int):
        return decimals
    if decimals is not None and mint is not None:
        for key in (mint, str(mint)):
            if key in decimals:
                return int(decimals[key])
    raise MissingExternalDependency(
        f"mint decimals not provided for {mint}",
        context={"mint": str(mint) if mint is not None else None},
    )


def scale_amount(units: int | float, decimals: int) -> float:
    """Token units to a decimal amount."""
    return units / 10**decimals


def format_key(key: Pubkey | str | None) -> str:
    if key is None:
        return ""
    return key if isinstance(key, str) else str(key)


def format_timestamp(value: int, *, milliseconds: bool = False) -> str:
    """Epoch seconds (or milliseconds) to ISO-8601 UTC; "" for 0."""
    if not value:
        return ""
    seconds = value / 1000 if milliseconds else value
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc).isoformat()
    except (OverflowError, OSError, ValueError):
        # Estimates for near-zero rates can fall past year 9999.
        return datetime.max.replace(tzinfo=timezone.utc).isoformat()


def _friendly_stream(state: ProjectedStreamState, decimals: Decimals) -> FriendlyStream:
    dec = resolve_decimals(decimals, state.associated_token)
    percent = state.cliff_vest_percent / CLIFF_PERCENT_SCALE if state.version >= 2 else float(state.cliff_vest_percent)
    return FriendlyStream(
        id=format_key(state.id) if state.id is not None else None,
        version=state.version,
        initialized=state.initialized,
        name=state.name,
        treasurer=format_key(state.treasurer),
        beneficiary=format_key(state.beneficiary),
        treasury=format_key(state.treasury),
        associated_token=format_key(state.associated_token),
        rate_amount=scale_amount(state.rate_amount, dec),
        rate_interval_in_seconds=state.rate_interval_in_seconds,
        allocation=scale_amount(state.allocation, dec),
        allocation_reserved=scale_amount(state.allocation_reserved, dec),
        total_withdrawals=scale_amount(state.total_withdrawals, dec),
        cliff_vest_amount=scale_amount(state.cliff_vest_amount, dec),
        cliff_vest_percent=percent,
        start_utc=format_timestamp(state.start_utc_ms, milliseconds=True),
        funded_on_utc=format_timestamp(state.funded_on_utc_ms, milliseconds=True),
        vested_amount=scale_amount(state.vested_amount, dec),
        unvested_amount=scale_amount(state.unvested_amount, dec),
        withdrawable_amount=(
            scale_amount(state.withdrawable_amount, dec) if state.withdrawable_amount is not None else None
        ),
        estimated_depletion_utc=format_timestamp(state.estimated_depletion_utc_ms, milliseconds=True),
        state=state.state.label,
        is_streaming=state.is_streaming,
        last_projected_at=format_timestamp(state.last_projected_at),
        created_on_utc=format_timestamp(state.created_block_time),
        transaction_signature=state.transaction_signature,
        upgrade_required=state.upgrade_required,
        decimals=dec,
        raw=state,
    )


def _friendly_treasury(state: ProjectedTreasuryState, decimals: Decimals) -> FriendlyTreasury:
    dec = resolve_decimals(decimals, state.mint)
    return FriendlyTreasury(
        id=format_key(state.id) if state.id is not None else None,
        version=state.version,
        initialized=state.initialized,
        name=state.name,
        treasurer=format_key(state.treasurer),
        associated_token=format_key(state.associated_token),
        mint=format_key(state.mint),
        balance=scale_amount(state.balance, dec),
        allocation_reserved=scale_amount(state.allocation_reserved, dec),
        allocation_assigned=scale_amount(state.allocation_assigned, dec),
        total_withdrawals=scale_amount(state.total_withdrawals, dec),
        streams_amount=state.streams_amount,
        slot=state.slot,
        created_on_utc=format_timestamp(state.created_on_utc_ms, milliseconds=True),
        depletion_rate=scale_amount(state.depletion_rate, dec),
        treasury_type=state.treasury_type.label,
        auto_close=state.auto_close,
        upgrade_required=state.upgrade_required,
        decimals=dec,
        raw=state,
    )


def _friendly_activity(record: StreamActivityRecord, decimals: Decimals) -> FriendlyActivity:
    # Unknown token: a per-mint mapping has nothing to offer, keep raw units.
    if record.mint is None and not isinstance(decimals, int):
        dec = 0
    else:
        dec = resolve_decimals(decimals, record.mint)
    return FriendlyActivity(
        signature=record.signature,
        initializer=format_key(record.initializer),
        action=record.action,
        amount=scale_amount(record.amount, dec),
        mint=format_key(record.mint) if record.mint is not None else UNKNOWN_TOKEN,
        block_time=record.block_time,
        utc_date=format_timestamp(record.block_time),
        decimals=dec,
        raw=record,
    )


def present(
    record: RawView | FriendlyView,
    friendly: bool,
    *,
    decimals: Decimals = None,
) -> RawView | FriendlyView:
    """
    Return record in the requested mode.

    friendly=True: raw records become friendly views (decimals required,
    see resolve_decimals); friendly views are returned as-is.
    friendly=False: raw records are returned as-is; friendly views give
    back the raw record they were built from.
    """
    if isinstance(record, _FRIENDLY_TYPES):
        return record if friendly else record.raw
    if not friendly:
        if isinstance(record, (ProjectedStreamState, ProjectedTreasuryState, StreamActivityRecord)):
            return record
    elif isinstance(record, ProjectedStreamState):
        return _friendly_stream(record, decimals)
    elif isinstance(record, ProjectedTreasuryState):
        return _friendly_treasury(record, decimals)
    elif isinstance(record, StreamActivityRecord):
        return _friendly_activity(record, decimals)
    raise TypeError(f"cannot present {type(record).__name__}")


def present_many(
    records: list[Any],
    friendly: bool,
    *,
    decimals: Decimals = None,
) -> list[Any]:
    return [present(record, friendly, decimals=decimals) for record in records]
