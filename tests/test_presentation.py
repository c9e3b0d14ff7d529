"""
Pytest tests for the presentation mapper: friendly views, idempotence, decimals.
"""

from __future__ import annotations

import pytest

from stream_mirror.activity import ACTION_DEPOSITED, StreamActivityRecord
from stream_mirror.core.exceptions import MissingExternalDependency
from stream_mirror.decoder import decode_stream, decode_treasury
from stream_mirror.presentation import (
    UNKNOWN_TOKEN,
    FriendlyActivity,
    FriendlyStream,
    FriendlyTreasury,
    format_timestamp,
    present,
    resolve_decimals,
    scale_amount,
)
from stream_mirror.projection import ProjectedStreamState, project, project_treasury

T0 = 1_700_000_000
T0_ISO = "2023-11-14T22:13:20+00:00"


@pytest.fixture
def running_stream(stream_v1_bytes, keys):
    buf = stream_v1_bytes(allocation=2_000_000, rate_amount=1_000_000)
    return project(decode_stream(buf), T0 + 30, address=keys["other"], created_block_time=T0)


def test_friendly_stream(running_stream, keys):
    view = present(running_stream, True, decimals=6)
    assert isinstance(view, FriendlyStream)
    assert view.id == str(keys["other"])
    assert view.treasurer == str(keys["treasurer"])
    assert view.beneficiary == str(keys["beneficiary"])
    assert view.associated_token == str(keys["mint"])
    assert view.allocation == 2.0
    assert view.rate_amount == 1.0
    assert view.vested_amount == 0.5
    assert view.unvested_amount == 1.5
    assert view.state == "Running"
    assert view.start_utc == T0_ISO
    assert view.created_on_utc == T0_ISO
    assert view.withdrawable_amount is None
    assert view.raw is running_stream


def test_raw_mode_is_identity(running_stream):
    assert present(running_stream, False) is running_stream


def test_present_is_idempotent(running_stream):
    friendly = present(running_stream, True, decimals=6)
    assert present(friendly, True) is friendly
    assert present(friendly, True, decimals=9) == friendly
    assert present(present(running_stream, False), False) == present(running_stream, False)


def test_friendly_back_to_raw(running_stream):
    friendly = present(running_stream, True, decimals=6)
    raw = present(friendly, False)
    assert isinstance(raw, ProjectedStreamState)
    assert raw == running_stream


def test_friendly_requires_decimals(running_stream):
    with pytest.raises(MissingExternalDependency):
        present(running_stream, True)


def test_decimals_by_mint(running_stream, keys):
    view = present(running_stream, True, decimals={str(keys["mint"]): 3})
    assert view.decimals == 3
    view = present(running_stream, True, decimals={keys["mint"]: 6})
    assert view.decimals == 6
    with pytest.raises(MissingExternalDependency):
        present(running_stream, True, decimals={str(keys["other"]): 6})


def test_resolve_decimals():
    assert resolve_decimals(9, None) == 9
    with pytest.raises(MissingExternalDependency):
        resolve_decimals(None, "mint")
    with pytest.raises(MissingExternalDependency):
        resolve_decimals(True, "mint")


def test_friendly_anchor_cliff_percent(anchor_stream_bytes):
    """Anchor cliff percent is stored in parts per million and shown as a percentage."""
    state = project(decode_stream(anchor_stream_bytes(cliff_vest_percent=125_000)), T0 + 60)
    view = present(state, True, decimals=0)
    assert view.cliff_vest_percent == 12.5
    assert view.withdrawable_amount == 225.0


def test_friendly_treasury(anchor_treasury_bytes, keys):
    state = project_treasury(decode_treasury(anchor_treasury_bytes()), address=keys["treasury"])
    view = present(state, True, decimals=2)
    assert isinstance(view, FriendlyTreasury)
    assert view.id == str(keys["treasury"])
    assert view.mint == str(keys["mint"])
    assert view.balance == 90.0
    assert view.treasury_type == "Open"
    assert view.created_on_utc == T0_ISO
    assert present(view, False) is state


def test_friendly_activity(keys):
    record = StreamActivityRecord(
        signature="5ig",
        initializer=keys["treasurer"],
        action=ACTION_DEPOSITED,
        amount=1_500,
        mint=None,
        block_time=T0,
    )
    view = present(record, True, decimals=3)
    assert isinstance(view, FriendlyActivity)
    assert view.amount == 1.5
    assert view.mint == UNKNOWN_TOKEN
    assert view.initializer == str(keys["treasurer"])
    assert view.utc_date == T0_ISO


def test_friendly_activity_unknown_mint_with_mapping(keys):
    """A per-mint mapping cannot resolve an unknown token; the amount stays in units."""
    record = StreamActivityRecord(
        signature="5ig",
        initializer=keys["treasurer"],
        action=ACTION_DEPOSITED,
        amount=1_500,
        mint=None,
        block_time=T0,
    )
    view = present(record, True, decimals={str(keys["mint"]): 6})
    assert view.amount == 1_500
    assert view.decimals == 0
    assert view.mint == UNKNOWN_TOKEN


def test_present_rejects_unknown():
    with pytest.raises(TypeError):
        present("stream", True, decimals=0)


# --- Formatting helpers ---


def test_scale_amount_keeps_precision():
    assert scale_amount(5_005, 1) == 500.5
    assert scale_amount(1, 9) == 1e-9
    # Projected amounts can be fractional units; they are not cut to the mint precision.
    assert scale_amount(1_234.5678, 2) == 1_234.5678 / 100


def test_format_timestamp():
    assert format_timestamp(0) == ""
    assert format_timestamp(T0) == T0_ISO
    assert format_timestamp(T0 * 1000, milliseconds=True) == T0_ISO
    assert format_timestamp(10**20, milliseconds=True).startswith("9999-12-31")


def test_scale_amount():
    assert scale_amount(1_234_567, 6) == 1.234567
    assert scale_amount(5, 0) == 5
