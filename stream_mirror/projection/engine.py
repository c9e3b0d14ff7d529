"""
Vesting projection engine: canonical raw stream record to projected state.

project() is the single entry point for every stream version: legacy
records go through the snapshot-accrual model, anchor records through the
cliff model. Both take the reference time as a block time in seconds.
"""

from __future__ import annotations

from typing import Iterable

from solders.pubkey import Pubkey

from stream_mirror.decoder.models import RawAnchorStream, RawStream, RawStreamV0, RawStreamV1
from stream_mirror.projection import cliff, legacy
from stream_mirror.projection.models import ProjectedStreamState, StreamState
from stream_mirror.utils.pubkey_utils import to_pubkey


def _project_legacy(
    record: RawStreamV0 | RawStreamV1,
    reference_time: int,
    **identity: object,
) -> ProjectedStreamState:
    derived = legacy.project_legacy(record, reference_time)
    return ProjectedStreamState(
        version=record.version,
        record=record,
        initialized=record.initialized,
        name=record.name,
        treasurer=record.treasurer,
        beneficiary=record.beneficiary,
        treasury=record.treasury,
        associated_token=record.associated_token,
        rate_amount=record.rate_amount,
        rate_interval_in_seconds=record.rate_interval_in_seconds,
        allocation=record.allocation,
        allocation_reserved=record.allocation_reserved,
        total_withdrawals=record.total_withdrawals,
        cliff_vest_amount=record.cliff_vest_amount,
        cliff_vest_percent=record.cliff_vest_percent,
        start_utc_ms=record.start_utc,
        funded_on_utc_ms=record.funded_on_utc,
        vested_amount=derived.vested_amount,
        unvested_amount=derived.unvested_amount,
        withdrawable_amount=None,
        estimated_depletion_utc_ms=derived.estimated_depletion_utc_ms,
        state=derived.state,
        is_streaming=derived.is_streaming,
        last_projected_at=reference_time,
        upgrade_required=record.version == 0,
        **identity,
    )


def _project_anchor(
    record: RawAnchorStream,
    reference_time: int,
    **identity: object,
) -> ProjectedStreamState:
    state = cliff.stream_state(record, reference_time)
    withdrawable = cliff.withdrawable_amount(record, reference_time, state)
    vested = min(record.allocation, record.total_withdrawals + withdrawable)
    return ProjectedStreamState(
        version=record.version,
        record=record,
        initialized=record.initialized,
        name=record.name,
        treasurer=record.treasurer,
        beneficiary=record.beneficiary,
        treasury=record.treasury,
        associated_token=record.associated_token,
        rate_amount=record.rate_amount,
        rate_interval_in_seconds=record.rate_interval_in_seconds,
        allocation=record.allocation,
        allocation_reserved=record.allocation_reserved,
        total_withdrawals=record.total_withdrawals,
        cliff_vest_amount=record.cliff_vest_amount,
        cliff_vest_percent=record.cliff_vest_percent,
        start_utc_ms=record.start_utc * cliff.MS_PER_SECOND,
        funded_on_utc_ms=record.created_on_utc * cliff.MS_PER_SECOND,
        vested_amount=vested,
        unvested_amount=record.allocation - vested,
        withdrawable_amount=withdrawable,
        estimated_depletion_utc_ms=cliff.estimated_depletion_utc_ms(record),
        state=state,
        is_streaming=state is StreamState.RUNNING,
        last_projected_at=reference_time,
        **identity,
    )


def project(
    record: RawStream,
    reference_time: int,
    *,
    address: Pubkey | str | None = None,
    created_block_time: int = 0,
    transaction_signature: str | None = None,
) -> ProjectedStreamState:
    """
    Project a raw stream record to reference_time (block time, seconds).

    Raises InvalidStreamData when an anchor stream is running with a zero
    rate amount or interval.
    """
    identity = {
        "id": to_pubkey(address) if address is not None else None,
        "created_block_time": created_block_time,
        "transaction_signature": transaction_signature,
    }
    if isinstance(record, RawAnchorStream):
        return _project_anchor(record, reference_time, **identity)
    if isinstance(record, (RawStreamV0, RawStreamV1)):
        return _project_legacy(record, reference_time, **identity)
    raise TypeError(f"cannot project {type(record).__name__}")


def project_many(records: Iterable[RawStream], reference_time: int) -> list[ProjectedStreamState]:
    """Project several records to the same reference time, in input order."""
    return [project(record, reference_time) for record in records]
