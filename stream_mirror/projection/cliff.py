"""
Vesting model for anchor streams: cliff plus linear accrual with pauses.

    cliff    = cliff_vest_amount, or cliff_vest_percent (ppm) of the allocation
    entitled = cliff + ups * (t - start) - ups * seconds_known_paused

A manually paused stream reports the withdrawable snapshot taken when it
was stopped instead of a live figure. All times are epoch seconds.
"""

from __future__ import annotations

from stream_mirror.core.exceptions import InvalidStreamData
from stream_mirror.decoder.models import RawAnchorStream
from stream_mirror.projection.models import Amount, StreamState

PERCENT_DENOMINATOR = 1_000_000
MS_PER_SECOND = 1000


def cliff_amount(record: RawAnchorStream) -> Amount:
    if record.cliff_vest_percent > 0:
        return record.cliff_vest_percent * record.allocation / PERCENT_DENOMINATOR
    return record.cliff_vest_amount


def units_per_second(record: RawAnchorStream) -> Amount:
    if record.rate_interval_in_seconds == 0:
        return 0
    return record.rate_amount / record.rate_interval_in_seconds


def _streamed_units(record: RawAnchorStream, seconds: int) -> Amount:
    if record.rate_interval_in_seconds == 0:
        return 0
    return record.rate_amount * seconds / record.rate_interval_in_seconds


def is_manually_paused(record: RawAnchorStream) -> bool:
    if record.last_manual_stop_block_time == 0:
        return False
    return record.last_manual_stop_block_time > record.last_manual_resume_block_time


def entitled_earnings(record: RawAnchorStream, reference_time: int) -> Amount:
    elapsed = reference_time - record.start_utc
    return (
        cliff_amount(record)
        + _streamed_units(record, elapsed)
        - _streamed_units(record, record.last_known_total_seconds_in_paused_status)
    )


def remaining_allocation(record: RawAnchorStream) -> int:
    return record.allocation - record.total_withdrawals


def stream_state(record: RawAnchorStream, reference_time: int) -> StreamState:
    if record.start_utc > reference_time:
        return StreamState.SCHEDULED
    if is_manually_paused(record):
        return StreamState.PAUSED
    if record.allocation > entitled_earnings(record, reference_time):
        return StreamState.RUNNING
    # Ran out of funds.
    return StreamState.PAUSED


def withdrawable_amount(
    record: RawAnchorStream,
    reference_time: int,
    state: StreamState | None = None,
) -> Amount:
    remaining = remaining_allocation(record)
    if remaining == 0:
        return 0
    if state is None:
        state = stream_state(record, reference_time)
    if state is StreamState.SCHEDULED:
        return 0
    if state is StreamState.PAUSED:
        if is_manually_paused(record):
            return record.last_manual_stop_withdrawable_units_snap
        return remaining
    if record.rate_amount == 0 or record.rate_interval_in_seconds == 0:
        raise InvalidStreamData(
            "running stream has a zero rate amount or interval",
            context={
                "rate_amount": record.rate_amount,
                "rate_interval_in_seconds": record.rate_interval_in_seconds,
            },
        )
    earned = entitled_earnings(record, reference_time) - record.total_withdrawals
    return min(remaining, max(0, earned))


def estimated_depletion_utc_ms(record: RawAnchorStream) -> int:
    ups = units_per_second(record)
    if not ups:
        return record.start_utc * MS_PER_SECOND
    streamable = record.allocation - cliff_amount(record)
    duration = streamable / ups + record.last_known_total_seconds_in_paused_status
    return int((record.start_utc + duration) * MS_PER_SECOND)
