"""
Vesting model for legacy (v0, v1) streams.

Accrual starts from the last on-chain vesting snapshot:

    is_streaming = resumed_block_time >= snap_block_time
    last_snap    = max(resumed_block_time, snap_block_time)
    rate         = is_streaming * rate_amount / rate_interval   (interval > 0)
    vested       = min(allocation, snap + rate * (t - last_snap))   (t >= last_snap)

The two versions differ in the allocation denominator and in two fallbacks
(rate when the interval is zero, depletion when the rate is zero); see
LEGACY_RULES.
"""

from __future__ import annotations

from dataclasses import dataclass

from stream_mirror.decoder.models import RawStreamV0, RawStreamV1
from stream_mirror.projection.models import Amount, StreamState

MS_PER_SECOND = 1000


@dataclass(frozen=True)
class LegacyRules:
    """Per-version constants of the legacy vesting model."""

    fallback_rate: int
    """Units per second used when rate_interval_in_seconds is 0."""
    depletion_fallback_divisor: int | None
    """Seconds divisor for the depletion estimate when the rate is 0; None gives a zero-length estimate."""
    depletion_from_total_deposits: bool
    """Estimate depletion from total_deposits instead of the allocation."""


# These asymmetries come from the deployed program versions; keep them per version.
LEGACY_RULES: dict[int, LegacyRules] = {
    0: LegacyRules(fallback_rate=1, depletion_fallback_divisor=None, depletion_from_total_deposits=True),
    1: LegacyRules(fallback_rate=0, depletion_fallback_divisor=60, depletion_from_total_deposits=False),
}


@dataclass(frozen=True)
class LegacyProjection:
    vested_amount: Amount
    unvested_amount: Amount
    is_streaming: bool
    estimated_depletion_utc_ms: int
    state: StreamState


def is_streaming(record: RawStreamV0 | RawStreamV1) -> bool:
    """A stream paused after its last vesting snapshot is not accruing."""
    return record.stream_resumed_block_time >= record.escrow_vested_amount_snap_block_time


def last_snapshot_time(record: RawStreamV0 | RawStreamV1) -> int:
    return max(record.stream_resumed_block_time, record.escrow_vested_amount_snap_block_time)


def rate_per_second(record: RawStreamV0 | RawStreamV1) -> Amount:
    rules = LEGACY_RULES[record.version]
    if record.rate_interval_in_seconds > 0:
        if not is_streaming(record):
            return 0
        return record.rate_amount / record.rate_interval_in_seconds
    return rules.fallback_rate


def vested_amount(record: RawStreamV0 | RawStreamV1, reference_time: int) -> Amount:
    allocation = record.allocation
    snap = record.escrow_vested_amount_snap
    last_snap = last_snapshot_time(record)
    if reference_time < last_snap:
        return min(allocation, snap)
    elapsed = reference_time - last_snap
    if record.rate_interval_in_seconds > 0:
        # Multiply before dividing so whole-unit results stay exact.
        accrued = (record.rate_amount * elapsed / record.rate_interval_in_seconds) if is_streaming(record) else 0
    else:
        accrued = LEGACY_RULES[record.version].fallback_rate * elapsed
    return min(allocation, snap + accrued)


def estimated_depletion_utc_ms(record: RawStreamV0 | RawStreamV1) -> int:
    if record.escrow_estimated_depletion_utc:
        return record.escrow_estimated_depletion_utc
    rules = LEGACY_RULES[record.version]
    rate = rate_per_second(record)
    amount = record.total_deposits if rules.depletion_from_total_deposits else record.allocation
    if rate:
        depletion_seconds: Amount = amount / rate
    elif rules.depletion_fallback_divisor:
        depletion_seconds = amount / rules.depletion_fallback_divisor
    else:
        depletion_seconds = 0
    return int(record.start_utc + depletion_seconds * MS_PER_SECOND)


def stream_state(
    record: RawStreamV0 | RawStreamV1,
    reference_time: int,
    vested: Amount,
) -> StreamState:
    # A future start wins over everything else.
    if record.start_utc > reference_time * MS_PER_SECOND:
        return StreamState.SCHEDULED
    if vested < record.allocation and is_streaming(record):
        return StreamState.RUNNING
    return StreamState.PAUSED


def project_legacy(record: RawStreamV0 | RawStreamV1, reference_time: int) -> LegacyProjection:
    vested = vested_amount(record, reference_time)
    return LegacyProjection(
        vested_amount=vested,
        unvested_amount=record.allocation - vested,
        is_streaming=is_streaming(record),
        estimated_depletion_utc_ms=estimated_depletion_utc_ms(record),
        state=stream_state(record, reference_time, vested),
    )
