"""
Stream activity parser: getTransaction (jsonParsed) payloads to activity records.

Recognises deposit (add funds) and withdraw instructions of both the
legacy and the anchor streaming programs. Purely structural; payloads that
are not deposits or withdrawals yield None.
"""

from __future__ import annotations

from typing import Any, Collection

import base58
from solders.pubkey import Pubkey

from stream_mirror.activity.models import ACTION_DEPOSITED, ACTION_WITHDREW, StreamActivityRecord
from stream_mirror.core.exceptions import MalformedLayout
from stream_mirror.layouts.instructions import (
    ADD_FUNDS_DISCRIMINATOR,
    ADD_FUNDS_LAYOUT,
    LEGACY_ADD_FUNDS_LAYOUT,
    LEGACY_ADD_FUNDS_TAG,
    LEGACY_WITHDRAW_LAYOUT,
    LEGACY_WITHDRAW_TAG,
    WITHDRAW_DISCRIMINATOR,
    WITHDRAW_LAYOUT,
)
from stream_mirror.mirror_logging import get_logger
from stream_mirror.utils.pubkey_utils import to_pubkey

logger = get_logger(__name__)


def _get_message_and_meta(raw: dict[str, Any]) -> tuple[dict[str, Any] | None, dict[str, Any]]:
    """Return (transaction.message, meta) from a getTransaction-style result."""
    tx_obj = raw.get("transaction")
    if not isinstance(tx_obj, dict):
        return None, {}
    message = tx_obj.get("message")
    if not isinstance(message, dict):
        return None, {}
    meta = raw.get("meta")
    return message, meta if isinstance(meta, dict) else {}


def _get_signer(message: dict[str, Any]) -> str | None:
    """First signer from accountKeys (jsonParsed dicts), or the fee payer for plain key lists."""
    keys = message.get("accountKeys") or []
    for key in keys:
        if isinstance(key, dict) and key.get("signer"):
            return key.get("pubkey")
    if keys and isinstance(keys[0], str):
        return keys[0]
    return None


def _get_mint(meta: dict[str, Any]) -> str | None:
    for balances_key in ("preTokenBalances", "postTokenBalances"):
        balances = meta.get(balances_key) or []
        if balances and isinstance(balances[0], dict) and balances[0].get("mint"):
            return balances[0]["mint"]
    return None


def _instruction_data(ix: dict[str, Any]) -> bytes | None:
    data = ix.get("data")
    if not isinstance(data, str) or not data:
        return None
    try:
        return base58.b58decode(data)
    except ValueError:
        return None


def _program_allowed(ix: dict[str, Any], program_ids: Collection[str] | None) -> bool:
    if not program_ids:
        return True
    program_id = ix.get("programId")
    # Instructions without a resolved programId cannot be checked.
    return program_id is None or str(program_id) in program_ids


def _decode_anchor(data: bytes) -> tuple[str, int] | None:
    if data.startswith(ADD_FUNDS_DISCRIMINATOR) and len(data) == ADD_FUNDS_LAYOUT.span:
        return ACTION_DEPOSITED, ADD_FUNDS_LAYOUT.decode(data)["amount"]
    if data.startswith(WITHDRAW_DISCRIMINATOR) and len(data) == WITHDRAW_LAYOUT.span:
        return ACTION_WITHDREW, WITHDRAW_LAYOUT.decode(data)["amount"]
    return None


def _decode_legacy(data: bytes) -> tuple[str, int] | None:
    if len(data) != LEGACY_ADD_FUNDS_LAYOUT.span:
        return None
    if data[0] == LEGACY_ADD_FUNDS_TAG:
        return ACTION_DEPOSITED, LEGACY_ADD_FUNDS_LAYOUT.decode(data)["amount"]
    if data[0] == LEGACY_WITHDRAW_TAG:
        return ACTION_WITHDREW, LEGACY_WITHDRAW_LAYOUT.decode(data)["amount"]
    return None


def _find_action(
    instructions: list[dict[str, Any]],
    program_ids: Collection[str] | None,
) -> tuple[str, int] | None:
    """Anchor: first add_funds / withdraw instruction. Legacy: the last instruction."""
    for ix in instructions:
        if not isinstance(ix, dict) or not _program_allowed(ix, program_ids):
            continue
        data = _instruction_data(ix)
        if data is None:
            continue
        found = _decode_anchor(data)
        if found is not None:
            return found
    if not instructions or not isinstance(instructions[-1], dict):
        return None
    last = instructions[-1]
    if not _program_allowed(last, program_ids):
        return None
    data = _instruction_data(last)
    return _decode_legacy(data) if data is not None else None


def parse_activity(
    raw: dict[str, Any],
    *,
    program_ids: Collection[str] | None = None,
) -> StreamActivityRecord | None:
    """
    Parse one getTransaction (jsonParsed) result into an activity record.

    program_ids, when given, restricts matching to instructions of those
    programs. Returns None for payloads that are not a non-zero deposit or
    withdrawal or that lack a signature or signer.
    """
    message, meta = _get_message_and_meta(raw)
    if not message:
        return None
    signatures = (raw.get("transaction") or {}).get("signatures") or []
    if not signatures:
        return None
    signer = _get_signer(message)
    if not signer:
        return None

    found = _find_action(message.get("instructions") or [], program_ids)
    if found is None:
        return None
    action, amount = found
    if not amount:
        return None

    mint = _get_mint(meta)
    block_time = raw.get("blockTime")
    try:
        block_time = int(block_time) if block_time is not None else 0
    except (TypeError, ValueError):
        block_time = 0
    try:
        return StreamActivityRecord(
            signature=str(signatures[0]),
            initializer=to_pubkey(signer),
            action=action,
            amount=amount,
            mint=to_pubkey(mint) if mint else None,
            block_time=block_time,
        )
    except MalformedLayout as e:
        logger.warning("activity_skipped", signature=str(signatures[0]), error=e.message)
        return None


def parse_activity_batch(
    raw_list: list[dict[str, Any] | None],
    *,
    program_ids: Collection[str] | None = None,
) -> list[StreamActivityRecord]:
    """Parse many payloads; skips None and unrecognised items, keeps input order."""
    out: list[StreamActivityRecord] = []
    for raw in raw_list:
        if not raw:
            continue
        record = parse_activity(raw, program_ids=program_ids)
        if record is not None:
            out.append(record)
    return out


def parse_contributors(raw_list: list[dict[str, Any] | None]) -> list[Pubkey]:
    """
    First account of each payload's last instruction, in input order.

    Skips None payloads, instructions without accounts and keys that do
    not parse. Duplicates are kept.
    """
    contributors: list[Pubkey] = []
    for raw in raw_list:
        if not raw:
            continue
        message, _ = _get_message_and_meta(raw)
        instructions = (message or {}).get("instructions") or []
        if not instructions or not isinstance(instructions[-1], dict):
            continue
        accounts = instructions[-1].get("accounts") or []
        if not accounts:
            continue
        try:
            contributors.append(to_pubkey(accounts[0]))
        except MalformedLayout as e:
            logger.warning("contributor_skipped", account=str(accounts[0]), error=e.message)
    return contributors
