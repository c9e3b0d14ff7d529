"""
Projection cache refresh.

A cached projection (raw or friendly) carries the canonical raw record it
was computed from, so moving it to a later reference time is the same
projection function applied again. No bytes are re-read; the result equals
a fresh decode-and-project of the original account data.
"""

from __future__ import annotations

from typing import Iterable, Union

from stream_mirror.presentation.mapper import Decimals, present
from stream_mirror.presentation.models import FriendlyStream
from stream_mirror.projection.engine import project
from stream_mirror.projection.models import ProjectedStreamState

CachedStream = Union[ProjectedStreamState, FriendlyStream]


def refresh(
    previous: CachedStream,
    reference_time: int,
    friendly: bool = False,
    *,
    decimals: Decimals = None,
) -> ProjectedStreamState | FriendlyStream:
    """
    Re-project a cached stream to reference_time (block time, seconds).

    Keeps id, created_block_time and transaction_signature of previous.
    A friendly previous view keeps its decimals unless new ones are given.
    """
    if isinstance(previous, FriendlyStream):
        if decimals is None:
            decimals = previous.decimals
        previous = previous.raw
    if not isinstance(previous, ProjectedStreamState):
        raise TypeError(f"cannot refresh {type(previous).__name__}")
    state = project(
        previous.record,
        reference_time,
        address=previous.id,
        created_block_time=previous.created_block_time,
        transaction_signature=previous.transaction_signature,
    )
    return present(state, friendly, decimals=decimals)


def refresh_many(
    previous_list: Iterable[CachedStream],
    reference_time: int,
    friendly: bool = False,
    *,
    decimals: Decimals = None,
) -> list[ProjectedStreamState | FriendlyStream]:
    return [refresh(previous, reference_time, friendly, decimals=decimals) for previous in previous_list]
