"""
Pytest fixtures for Stream Mirror tests.

Account snapshots are built with the layouts' own encoders so tests never
depend on hand-assembled byte strings. No network access.
"""

from __future__ import annotations

from typing import Any, Callable

import pytest
from solders.pubkey import Pubkey

from stream_mirror.layouts import (
    ANCHOR_STREAM_LAYOUT,
    ANCHOR_TREASURY_LAYOUT,
    MINT_LAYOUT,
    STREAM_TERMS_LAYOUT,
    STREAM_V0_LAYOUT,
    STREAM_V1_LAYOUT,
    TREASURY_V0_LAYOUT,
    TREASURY_V1_LAYOUT,
    TOKEN_ACCOUNT_LAYOUT,
)

# Reference block time used throughout (2023-11-14T22:13:20Z).
T0 = 1_700_000_000

TREASURER = Pubkey(bytes([1] * 32))
BENEFICIARY = Pubkey(bytes([2] * 32))
TREASURY = Pubkey(bytes([3] * 32))
MINT = Pubkey(bytes([4] * 32))
OTHER = Pubkey(bytes([9] * 32))


def _builder(layout, defaults: dict[str, Any]) -> Callable[..., bytes]:
    def build(**overrides: Any) -> bytes:
        unknown = set(overrides) - set(defaults)
        assert not unknown, f"unknown fields for {layout.label}: {unknown}"
        return layout.encode_account({**defaults, **overrides})

    return build


@pytest.fixture
def keys():
    """Named test keys."""
    return {
        "treasurer": TREASURER,
        "beneficiary": BENEFICIARY,
        "treasury": TREASURY,
        "mint": MINT,
        "other": OTHER,
    }


@pytest.fixture
def stream_v0_bytes():
    """Builder for legacy v0 stream accounts: 100 units / 60 s, 1000 deposited, snapshot at T0."""
    return _builder(
        STREAM_V0_LAYOUT,
        {
            "initialized": 1,
            "stream_name": b"payroll",
            "treasurer_address": TREASURER,
            "rate_amount": 100,
            "rate_interval_in_seconds": 60,
            "funded_on_utc": T0 * 1000,
            "start_utc": T0 * 1000,
            "rate_cliff_in_seconds": 0,
            "cliff_vest_amount": 0,
            "cliff_vest_percent": 0,
            "beneficiary_address": BENEFICIARY,
            "stream_associated_token": MINT,
            "treasury_address": TREASURY,
            "escrow_estimated_depletion_utc": 0,
            "total_deposits": 1000,
            "total_withdrawals": 0,
            "escrow_vested_amount_snap": 0,
            "escrow_vested_amount_snap_block_height": 10,
            "escrow_vested_amount_snap_block_time": T0,
            "stream_resumed_block_height": 10,
            "stream_resumed_block_time": T0,
            "auto_pause_in_seconds": 0,
        },
    )


@pytest.fixture
def stream_v1_bytes():
    """Builder for legacy v1 stream accounts (padded to 500 bytes)."""
    return _builder(
        STREAM_V1_LAYOUT,
        {
            "initialized": 1,
            "stream_name": b"payroll",
            "treasurer_address": TREASURER,
            "rate_amount": 100,
            "rate_interval_in_seconds": 60,
            "funded_on_utc": T0 * 1000,
            "start_utc": T0 * 1000,
            "rate_cliff_in_seconds": 0,
            "cliff_vest_amount": 0,
            "cliff_vest_percent": 0,
            "beneficiary_address": BENEFICIARY,
            "beneficiary_associated_token": MINT,
            "treasury_address": TREASURY,
            "escrow_estimated_depletion_utc": 0,
            "allocation_reserved": 0,
            "allocation": 1000,
            "escrow_vested_amount_snap": 0,
            "escrow_vested_amount_snap_slot": 10,
            "escrow_vested_amount_snap_block_time": T0,
            "stream_resumed_slot": 10,
            "stream_resumed_block_time": T0,
            "auto_pause_in_seconds": 0,
        },
    )


@pytest.fixture
def anchor_stream_bytes():
    """Builder for anchor stream accounts: 100 units / 60 s, 1000 allocated, starting at T0."""
    return _builder(
        ANCHOR_STREAM_LAYOUT,
        {
            "version": 2,
            "initialized": 1,
            "name": b"vesting",
            "treasurer_address": TREASURER,
            "rate_amount_units": 100,
            "rate_interval_in_seconds": 60,
            "start_utc": T0,
            "cliff_vest_amount_units": 0,
            "cliff_vest_percent": 0,
            "beneficiary_address": BENEFICIARY,
            "beneficiary_associated_token": MINT,
            "treasury_address": TREASURY,
            "allocation_assigned_units": 1000,
            "allocation_reserved_units": 0,
            "total_withdrawals_units": 0,
            "last_withdrawal_units": 0,
            "last_withdrawal_slot": 0,
            "last_withdrawal_block_time": 0,
            "last_manual_stop_withdrawable_units_snap": 0,
            "last_manual_stop_slot": 0,
            "last_manual_stop_block_time": 0,
            "last_manual_resume_remaining_allocation_units_snap": 0,
            "last_manual_resume_slot": 0,
            "last_manual_resume_block_time": 0,
            "last_known_total_seconds_in_paused_status": 0,
            "last_auto_stop_block_time": 0,
            "fee_payed_by_treasurer": 0,
            "created_on_utc": T0,
        },
    )


@pytest.fixture
def treasury_v0_bytes():
    return _builder(
        TREASURY_V0_LAYOUT,
        {
            "initialized": 1,
            "treasury_block_height": 100,
            "treasury_mint_address": MINT,
            "treasury_base_address": TREASURER,
        },
    )


@pytest.fixture
def treasury_v1_bytes():
    return _builder(
        TREASURY_V1_LAYOUT,
        {
            "initialized": 1,
            "slot": 200,
            "treasurer_address": TREASURER,
            "associated_token_address": MINT,
            "mint_address": MINT,
            "label": b"ops",
            "balance": 5000,
            "allocation_reserved": 100,
            "allocation_committed": 2000,
            "streams_amount": 3,
            "created_on_utc": T0 * 1000,
            "depletion_rate": 7,
            "type": 1,
        },
    )


@pytest.fixture
def anchor_treasury_bytes():
    return _builder(
        ANCHOR_TREASURY_LAYOUT,
        {
            "version": 2,
            "initialized": 1,
            "bump": 254,
            "slot": 300,
            "name": b"grants",
            "treasurer_address": TREASURER,
            "associated_token_address": MINT,
            "mint": MINT,
            "last_known_balance_units": 9000,
            "allocation_reserved_units": 0,
            "allocation_assigned_units": 4000,
            "total_withdrawals_units": 500,
            "total_streams": 2,
            "created_on_utc": T0,
            "treasury_type": 0,
            "auto_close": 1,
        },
    )


@pytest.fixture
def mint_bytes():
    return _builder(
        MINT_LAYOUT,
        {
            "mint_authority_option": 1,
            "mint_authority": TREASURER,
            "supply": 10**12,
            "decimals": 6,
            "is_initialized": 1,
            "freeze_authority_option": 0,
            "freeze_authority": Pubkey.default(),
        },
    )


@pytest.fixture
def stream_terms_bytes():
    """Builder for proposed stream terms: OTHER proposes 200 units / 60 s for stream TREASURY."""
    return _builder(
        STREAM_TERMS_LAYOUT,
        {
            "initialized": 1,
            "proposed_by": OTHER,
            "stream_id": TREASURY,
            "stream_name": b"payroll",
            "treasurer_address": TREASURER,
            "beneficiary_address": BENEFICIARY,
            "associated_token_address": MINT,
            "rate_amount": 200,
            "rate_interval_in_seconds": 60,
            "rate_cliff_in_seconds": 0,
            "cliff_vest_amount": 0,
            "cliff_vest_percent": 0,
            "auto_pause_in_seconds": 0,
        },
    )


@pytest.fixture
def token_account_bytes():
    return _builder(
        TOKEN_ACCOUNT_LAYOUT,
        {
            "mint": MINT,
            "owner": TREASURY,
            "amount": 9000,
            "delegate_option": 0,
            "delegate": Pubkey.default(),
            "state": 1,
            "is_native_option": 0,
            "is_native": 0,
            "delegated_amount": 0,
            "close_authority_option": 0,
            "close_authority": Pubkey.default(),
        },
    )


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every Stream Mirror setting from the environment."""
    for name in (
        "SOLANA_NETWORK",
        "SOLANA_CLUSTER",
        "MSP_LEGACY_PROGRAM_ID",
        "MSP_PROGRAM_ID",
        "MSP_FRIENDLY",
        "MSP_NAME_ENCODING",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
