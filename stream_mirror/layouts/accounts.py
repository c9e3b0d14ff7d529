"""
Account layouts for every historical stream / treasury format, stream terms,
and the SPL mint and token account.

Legacy (v0, v1) accounts have no discriminator and are told apart by
allocated size. Anchor (v2) accounts share an allocated size with v1 and
are told apart by their 8-byte account discriminator.

Time units as stored: legacy funded_on_utc / start_utc /
escrow_estimated_depletion_utc and treasury v1 created_on_utc are epoch
milliseconds; block times are epoch seconds; anchor start_utc and
created_on_utc are epoch seconds.
"""

from __future__ import annotations

from stream_mirror.layouts.fields import (
    AccountLayout,
    anchor_discriminator,
    blob,
    pubkey,
    u8,
    u32,
    u64,
)

NAME_LEN = 32

# Allocated sizes of padded program accounts (v1 and anchor share them).
STREAM_SIZE = 500
TREASURY_SIZE = 300
MINT_SIZE = 82
STREAM_TERMS_SIZE = 241
TOKEN_ACCOUNT_SIZE = 165

STREAM_ACCOUNT_DISCRIMINATOR = anchor_discriminator("account", "Stream")
TREASURY_ACCOUNT_DISCRIMINATOR = anchor_discriminator("account", "Treasury")

STREAM_V0_LAYOUT = AccountLayout(
    kind="stream",
    version=0,
    name="stream_v0",
    fields=(
        u8("initialized"),
        blob("stream_name", NAME_LEN),
        pubkey("treasurer_address"),
        u64("rate_amount"),
        u64("rate_interval_in_seconds"),
        u64("funded_on_utc"),
        u64("start_utc"),
        u64("rate_cliff_in_seconds"),
        u64("cliff_vest_amount"),
        u64("cliff_vest_percent"),
        pubkey("beneficiary_address"),
        pubkey("stream_associated_token"),
        pubkey("treasury_address"),
        u64("escrow_estimated_depletion_utc"),
        u64("total_deposits"),
        u64("total_withdrawals"),
        u64("escrow_vested_amount_snap"),
        u64("escrow_vested_amount_snap_block_height"),
        u64("escrow_vested_amount_snap_block_time"),
        u64("stream_resumed_block_height"),
        u64("stream_resumed_block_time"),
        u64("auto_pause_in_seconds"),
    ),
)

STREAM_V1_LAYOUT = AccountLayout(
    kind="stream",
    version=1,
    name="stream_v1",
    account_size=STREAM_SIZE,
    fields=(
        u8("initialized"),
        blob("stream_name", NAME_LEN),
        pubkey("treasurer_address"),
        u64("rate_amount"),
        u64("rate_interval_in_seconds"),
        u64("funded_on_utc"),
        u64("start_utc"),
        u64("rate_cliff_in_seconds"),
        u64("cliff_vest_amount"),
        u64("cliff_vest_percent"),
        pubkey("beneficiary_address"),
        pubkey("beneficiary_associated_token"),
        pubkey("treasury_address"),
        u64("escrow_estimated_depletion_utc"),
        u64("allocation_reserved"),
        u64("allocation"),
        u64("escrow_vested_amount_snap"),
        u64("escrow_vested_amount_snap_slot"),
        u64("escrow_vested_amount_snap_block_time"),
        u64("stream_resumed_slot"),
        u64("stream_resumed_block_time"),
        u64("auto_pause_in_seconds"),
    ),
)

ANCHOR_STREAM_LAYOUT = AccountLayout(
    kind="stream",
    version=2,
    name="stream_anchor",
    account_size=STREAM_SIZE,
    discriminator=STREAM_ACCOUNT_DISCRIMINATOR,
    fields=(
        u8("version"),
        u8("initialized"),
        blob("name", NAME_LEN),
        pubkey("treasurer_address"),
        u64("rate_amount_units"),
        u64("rate_interval_in_seconds"),
        u64("start_utc"),
        u64("cliff_vest_amount_units"),
        u64("cliff_vest_percent"),
        pubkey("beneficiary_address"),
        pubkey("beneficiary_associated_token"),
        pubkey("treasury_address"),
        u64("allocation_assigned_units"),
        u64("allocation_reserved_units"),
        u64("total_withdrawals_units"),
        u64("last_withdrawal_units"),
        u64("last_withdrawal_slot"),
        u64("last_withdrawal_block_time"),
        u64("last_manual_stop_withdrawable_units_snap"),
        u64("last_manual_stop_slot"),
        u64("last_manual_stop_block_time"),
        u64("last_manual_resume_remaining_allocation_units_snap"),
        u64("last_manual_resume_slot"),
        u64("last_manual_resume_block_time"),
        u64("last_known_total_seconds_in_paused_status"),
        u64("last_auto_stop_block_time"),
        u8("fee_payed_by_treasurer"),
        u64("created_on_utc"),
    ),
)

TREASURY_V0_LAYOUT = AccountLayout(
    kind="treasury",
    version=0,
    name="treasury_v0",
    fields=(
        u8("initialized"),
        u64("treasury_block_height"),
        pubkey("treasury_mint_address"),
        pubkey("treasury_base_address"),
    ),
)

TREASURY_V1_LAYOUT = AccountLayout(
    kind="treasury",
    version=1,
    name="treasury_v1",
    account_size=TREASURY_SIZE,
    fields=(
        u8("initialized"),
        u64("slot"),
        pubkey("treasurer_address"),
        pubkey("associated_token_address"),
        pubkey("mint_address"),
        blob("label", NAME_LEN),
        u64("balance"),
        u64("allocation_reserved"),
        u64("allocation_committed"),
        u64("streams_amount"),
        u64("created_on_utc"),
        u64("depletion_rate"),
        u8("type"),
    ),
)

ANCHOR_TREASURY_LAYOUT = AccountLayout(
    kind="treasury",
    version=2,
    name="treasury_anchor",
    account_size=TREASURY_SIZE,
    discriminator=TREASURY_ACCOUNT_DISCRIMINATOR,
    fields=(
        u8("version"),
        u8("initialized"),
        u8("bump"),
        u64("slot"),
        blob("name", NAME_LEN),
        pubkey("treasurer_address"),
        pubkey("associated_token_address"),
        pubkey("mint"),
        u64("last_known_balance_units"),
        u64("allocation_reserved_units"),
        u64("allocation_assigned_units"),
        u64("total_withdrawals_units"),
        u64("total_streams"),
        u64("created_on_utc"),
        u8("treasury_type"),
        u8("auto_close"),
    ),
)

# SPL Token mint account.
MINT_LAYOUT = AccountLayout(
    kind="mint",
    version=0,
    name="spl_mint",
    fields=(
        u32("mint_authority_option"),
        pubkey("mint_authority"),
        u64("supply"),
        u8("decimals"),
        u8("is_initialized"),
        u32("freeze_authority_option"),
        pubkey("freeze_authority"),
    ),
)

# Proposed terms for a legacy stream, written before the stream is agreed.
STREAM_TERMS_LAYOUT = AccountLayout(
    kind="terms",
    version=0,
    name="stream_terms",
    fields=(
        u8("initialized"),
        pubkey("proposed_by"),
        pubkey("stream_id"),
        blob("stream_name", NAME_LEN),
        pubkey("treasurer_address"),
        pubkey("beneficiary_address"),
        pubkey("associated_token_address"),
        u64("rate_amount"),
        u64("rate_interval_in_seconds"),
        u64("rate_cliff_in_seconds"),
        u64("cliff_vest_amount"),
        u64("cliff_vest_percent"),
        u64("auto_pause_in_seconds"),
    ),
)

# SPL Token account (a token balance held by an owner).
TOKEN_ACCOUNT_LAYOUT = AccountLayout(
    kind="token_account",
    version=0,
    name="spl_token_account",
    fields=(
        pubkey("mint"),
        pubkey("owner"),
        u64("amount"),
        u32("delegate_option"),
        pubkey("delegate"),
        u8("state"),
        u32("is_native_option"),
        u64("is_native"),
        u64("delegated_amount"),
        u32("close_authority_option"),
        pubkey("close_authority"),
    ),
)
