"""
Pytest tests for the anchor cliff model: cliff, linear accrual, pauses and withdrawable amount.
"""

from __future__ import annotations

import pytest

from stream_mirror.core.exceptions import InvalidStreamData
from stream_mirror.decoder import decode_stream
from stream_mirror.projection import StreamState, project
from stream_mirror.projection.cliff import cliff_amount, entitled_earnings, is_manually_paused

T0 = 1_700_000_000


@pytest.fixture
def anchor_stream(anchor_stream_bytes):
    def make(**overrides):
        return decode_stream(anchor_stream_bytes(**overrides))

    return make


def test_cliff_from_percent_and_amount(anchor_stream):
    """cliff_vest_percent is parts per million of the allocation; otherwise the fixed amount."""
    assert cliff_amount(anchor_stream(cliff_vest_percent=100_000)) == 100
    assert cliff_amount(anchor_stream(cliff_vest_amount_units=50)) == 50
    assert cliff_amount(anchor_stream()) == 0


def test_running_with_cliff(anchor_stream):
    """10% cliff plus 300 s at 100 / 60 s: 100 + 500 withdrawable."""
    state = project(anchor_stream(cliff_vest_percent=100_000), T0 + 300)
    assert state.state is StreamState.RUNNING
    assert state.withdrawable_amount == 600
    assert state.vested_amount == 600
    assert state.unvested_amount == 400
    assert state.start_utc_ms == T0 * 1000


def test_withdrawals_reduce_withdrawable(anchor_stream):
    state = project(anchor_stream(total_withdrawals_units=200), T0 + 300)
    assert state.withdrawable_amount == 300
    assert state.vested_amount == 500


def test_out_of_funds_is_paused(anchor_stream):
    state = project(anchor_stream(total_withdrawals_units=100), T0 + 3600)
    assert state.state is StreamState.PAUSED
    assert state.withdrawable_amount == 900
    assert state.vested_amount == 1000
    assert state.is_streaming is False


def test_scheduled_has_nothing_withdrawable(anchor_stream):
    state = project(anchor_stream(start_utc=T0 + 1000), T0)
    assert state.state is StreamState.SCHEDULED
    assert state.withdrawable_amount == 0


def test_manual_pause_reports_stop_snapshot(anchor_stream):
    """A manually stopped stream reports the snapshot taken at stop time, whatever the elapsed time."""
    record = anchor_stream(
        last_manual_stop_block_time=T0 + 60,
        last_manual_stop_withdrawable_units_snap=100,
    )
    assert is_manually_paused(record)
    for t in (T0 + 120, T0 + 500, T0 + 100_000):
        state = project(record, t)
        assert state.state is StreamState.PAUSED
        assert state.withdrawable_amount == 100


def test_resumed_stream_accounts_for_paused_seconds(anchor_stream):
    record = anchor_stream(
        last_manual_stop_block_time=T0 + 60,
        last_manual_resume_block_time=T0 + 120,
        last_known_total_seconds_in_paused_status=60,
    )
    assert not is_manually_paused(record)
    assert entitled_earnings(record, T0 + 300) == 400
    state = project(record, T0 + 300)
    assert state.state is StreamState.RUNNING
    assert state.withdrawable_amount == 400
    assert state.estimated_depletion_utc_ms == (T0 + 660) * 1000


def test_zero_rate_while_running_is_invalid(anchor_stream):
    with pytest.raises(InvalidStreamData):
        project(anchor_stream(rate_amount_units=0), T0 + 10)


def test_zero_rate_depletion_is_start(anchor_stream):
    record = anchor_stream(rate_amount_units=0, start_utc=T0 + 50)
    state = project(record, T0)
    assert state.state is StreamState.SCHEDULED
    assert state.estimated_depletion_utc_ms == (T0 + 50) * 1000


def test_nothing_left_to_withdraw(anchor_stream):
    state = project(anchor_stream(total_withdrawals_units=1000), T0 + 10)
    assert state.withdrawable_amount == 0
    assert state.vested_amount == 1000


def test_vested_bounds(anchor_stream):
    record = anchor_stream(cliff_vest_amount_units=250)
    for t in range(T0 - 100, T0 + 800, 37):
        state = project(record, t)
        assert 0 <= state.vested_amount <= state.allocation
        assert state.unvested_amount == state.allocation - state.vested_amount
