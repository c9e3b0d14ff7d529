"""
Pytest tests for the legacy (v0, v1) vesting model: snapshot accrual, state, depletion.
"""

from __future__ import annotations

import pytest

from stream_mirror.decoder import decode_stream
from stream_mirror.projection import StreamState, project
from stream_mirror.projection.legacy import estimated_depletion_utc_ms, is_streaming, rate_per_second

T0 = 1_700_000_000


@pytest.fixture(params=["v0", "v1"])
def legacy_stream(request, stream_v0_bytes, stream_v1_bytes):
    """Builder for either legacy version; both default to 100 units / 60 s and allocation 1000."""
    build = stream_v0_bytes if request.param == "v0" else stream_v1_bytes

    def make(**overrides):
        return decode_stream(build(**overrides))

    return make


def test_running_halfway(legacy_stream):
    """rate 100/60s, allocation 1000, snap 0 at T0: 300 s later half is vested."""
    state = project(legacy_stream(), T0 + 300)
    assert state.vested_amount == 500
    assert state.unvested_amount == 500
    assert state.state is StreamState.RUNNING
    assert state.is_streaming is True
    assert state.withdrawable_amount is None


def test_fully_vested_is_paused(legacy_stream):
    state = project(legacy_stream(), T0 + 700)
    assert state.vested_amount == 1000
    assert state.unvested_amount == 0
    assert state.state is StreamState.PAUSED


def test_future_start_is_scheduled(legacy_stream):
    state = project(legacy_stream(start_utc=(T0 + 3600) * 1000), T0 + 300)
    assert state.state is StreamState.SCHEDULED


def test_vested_starts_from_snapshot(legacy_stream):
    state = project(legacy_stream(escrow_vested_amount_snap=200), T0 + 60)
    assert state.vested_amount == 300


def test_reference_before_snapshot(legacy_stream):
    """Before the last snapshot the snapshot value stands, clamped to the allocation."""
    record = legacy_stream(escrow_vested_amount_snap=1200)
    assert project(record, T0 - 100).vested_amount == 1000
    record = legacy_stream(escrow_vested_amount_snap=150)
    assert project(record, T0 - 100).vested_amount == 150


def test_paused_after_snapshot(legacy_stream):
    """Resumed before the last snapshot: not streaming, vested stays at the snapshot."""
    record = legacy_stream(
        escrow_vested_amount_snap=400,
        escrow_vested_amount_snap_block_time=T0 + 100,
        stream_resumed_block_time=T0,
    )
    assert is_streaming(record) is False
    assert rate_per_second(record) == 0
    state = project(record, T0 + 1000)
    assert state.vested_amount == 400
    assert state.state is StreamState.PAUSED


def test_vested_bounds_and_monotonic(legacy_stream):
    record = legacy_stream()
    previous = 0
    for t in range(T0, T0 + 1200, 45):
        state = project(record, t)
        assert 0 <= state.vested_amount <= state.allocation
        assert state.unvested_amount == state.allocation - state.vested_amount
        assert state.vested_amount >= previous
        previous = state.vested_amount


# --- Per-version fallbacks ---


def test_zero_interval_fallback_rate(stream_v0_bytes, stream_v1_bytes):
    """v0 falls back to 1 unit per second when the interval is 0; v1 accrues nothing."""
    v0 = decode_stream(stream_v0_bytes(rate_interval_in_seconds=0))
    v1 = decode_stream(stream_v1_bytes(rate_interval_in_seconds=0))
    assert project(v0, T0 + 30).vested_amount == 30
    assert project(v1, T0 + 30).vested_amount == 0


def test_stored_depletion_wins(legacy_stream):
    record = legacy_stream(escrow_estimated_depletion_utc=(T0 + 42) * 1000)
    assert project(record, T0).estimated_depletion_utc_ms == (T0 + 42) * 1000


def test_depletion_from_rate(legacy_stream):
    """1000 units at 100 / 60 s last 600 s from the start."""
    record = legacy_stream()
    assert estimated_depletion_utc_ms(record) == (T0 + 600) * 1000


def test_depletion_fallback_when_rate_is_zero(stream_v0_bytes, stream_v1_bytes):
    """Paused streams have no rate: v0 reports the start time, v1 allocation / 60 seconds later."""
    paused = {
        "escrow_vested_amount_snap_block_time": T0 + 100,
        "stream_resumed_block_time": T0,
    }
    v0 = decode_stream(stream_v0_bytes(**paused))
    v1 = decode_stream(stream_v1_bytes(**paused, allocation=1200))
    assert estimated_depletion_utc_ms(v0) == T0 * 1000
    assert estimated_depletion_utc_ms(v1) == (T0 + 20) * 1000


def test_v0_requires_upgrade(stream_v0_bytes, stream_v1_bytes):
    assert project(decode_stream(stream_v0_bytes()), T0).upgrade_required is True
    assert project(decode_stream(stream_v1_bytes()), T0).upgrade_required is False


def test_project_rejects_unknown_record():
    with pytest.raises(TypeError):
        project(object(), T0)
