"""
Instruction data layouts for the deposit / withdraw instructions.

These are the layouts written by transaction builders and read back when
parsing stream activity from transaction history. Legacy instructions are
tagged by a leading u8; anchor instructions by an 8-byte
sha256("global:<name>") discriminator.
"""

from __future__ import annotations

from stream_mirror.layouts.fields import AccountLayout, anchor_discriminator, u8, u64

LEGACY_ADD_FUNDS_TAG = 1
LEGACY_RECOVER_FUNDS_TAG = 2
LEGACY_WITHDRAW_TAG = 3

ADD_FUNDS_DISCRIMINATOR = anchor_discriminator("global", "add_funds")
WITHDRAW_DISCRIMINATOR = anchor_discriminator("global", "withdraw")

LEGACY_ADD_FUNDS_LAYOUT = AccountLayout(
    kind="instruction",
    version=0,
    name="legacy_add_funds",
    fields=(u8("tag"), u64("amount")),
)

LEGACY_WITHDRAW_LAYOUT = AccountLayout(
    kind="instruction",
    version=0,
    name="legacy_withdraw",
    fields=(u8("tag"), u64("amount")),
)

ADD_FUNDS_LAYOUT = AccountLayout(
    kind="instruction",
    version=2,
    name="add_funds",
    discriminator=ADD_FUNDS_DISCRIMINATOR,
    fields=(u64("amount"),),
)

WITHDRAW_LAYOUT = AccountLayout(
    kind="instruction",
    version=2,
    name="withdraw",
    discriminator=WITHDRAW_DISCRIMINATOR,
    fields=(u64("amount"),),
)


def encode_legacy_add_funds(amount: int) -> bytes:
    return LEGACY_ADD_FUNDS_LAYOUT.encode({"tag": LEGACY_ADD_FUNDS_TAG, "amount": amount})


def encode_legacy_withdraw(amount: int) -> bytes:
    return LEGACY_WITHDRAW_LAYOUT.encode({"tag": LEGACY_WITHDRAW_TAG, "amount": amount})


def encode_add_funds(amount: int) -> bytes:
    return ADD_FUNDS_LAYOUT.encode({"amount": amount})


def encode_withdraw(amount: int) -> bytes:
    return WITHDRAW_LAYOUT.encode({"amount": amount})
