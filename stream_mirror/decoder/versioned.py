"""
Versioned decoder: raw account bytes to canonical raw records.

Selects the layout by buffer size (and discriminator) newest version
first, slices the buffer to the layout's span so trailing account padding
is ignored, and builds the record class for that version. Purely
structural; no time-dependent computation.
"""

from __future__ import annotations

import base64
import binascii
from typing import Any, Callable

from stream_mirror.core.exceptions import MalformedLayout, UnrecognizedAccountLayout
from stream_mirror.decoder.models import (
    MintRecord,
    RawAccountRecord,
    RawAnchorStream,
    RawAnchorTreasury,
    RawStream,
    RawStreamTerms,
    RawStreamV0,
    RawStreamV1,
    RawTreasury,
    RawTreasuryV0,
    RawTreasuryV1,
    TokenAccountRecord,
)
from stream_mirror.layouts.fields import AccountLayout
from stream_mirror.layouts.registry import DEFAULT_REGISTRY, LayoutRegistry
from stream_mirror.mirror_logging import bind_layout

DEFAULT_NAME_ENCODING = "utf-8"


def decode_name(raw: bytes, encoding: str = DEFAULT_NAME_ENCODING) -> str:
    """
    Decode a fixed-width, null-padded name field.

    Only the trailing run of null bytes is padding; nulls before it are data.
    Invalid byte sequences are replaced rather than rejected.
    """
    return bytes(raw).rstrip(b"\x00").decode(encoding, errors="replace")


def account_data_to_bytes(data: Any) -> bytes:
    """
    Extract raw bytes from whatever an RPC client returned as account data.
    Handles: bytes/bytearray/memoryview, base64 str, ["<base64>", "base64"], list of ints.
    """
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    if isinstance(data, str):
        try:
            return base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise MalformedLayout("account data string is not valid base64") from e
    if isinstance(data, (list, tuple)):
        if not data:
            return b""
        first = data[0]
        if isinstance(first, str):
            return account_data_to_bytes(first)
        if all(isinstance(x, int) for x in data):
            try:
                return bytes(data)
            except ValueError as e:
                raise MalformedLayout("account data list holds values outside 0..255") from e
    raise MalformedLayout(
        f"unsupported account data type {type(data).__name__}",
        context={"type": type(data).__name__},
    )


def _legacy_stream_common(f: dict[str, Any], encoding: str) -> dict[str, Any]:
    return {
        "initialized": bool(f["initialized"]),
        "name_bytes": f["stream_name"],
        "name": decode_name(f["stream_name"], encoding),
        "treasurer": f["treasurer_address"],
        "rate_amount": f["rate_amount"],
        "rate_interval_in_seconds": f["rate_interval_in_seconds"],
        "funded_on_utc": f["funded_on_utc"],
        "start_utc": f["start_utc"],
        "rate_cliff_in_seconds": f["rate_cliff_in_seconds"],
        "cliff_vest_amount": f["cliff_vest_amount"],
        "cliff_vest_percent": f["cliff_vest_percent"],
        "beneficiary": f["beneficiary_address"],
        "treasury": f["treasury_address"],
        "escrow_estimated_depletion_utc": f["escrow_estimated_depletion_utc"],
        "escrow_vested_amount_snap": f["escrow_vested_amount_snap"],
        "escrow_vested_amount_snap_block_time": f["escrow_vested_amount_snap_block_time"],
        "stream_resumed_block_time": f["stream_resumed_block_time"],
        "auto_pause_in_seconds": f["auto_pause_in_seconds"],
    }


def _build_stream_v0(f: dict[str, Any], encoding: str) -> RawStreamV0:
    return RawStreamV0(
        **_legacy_stream_common(f, encoding),
        associated_token=f["stream_associated_token"],
        escrow_vested_amount_snap_slot=f["escrow_vested_amount_snap_block_height"],
        stream_resumed_slot=f["stream_resumed_block_height"],
        total_deposits=f["total_deposits"],
        total_withdrawals=f["total_withdrawals"],
    )


def _build_stream_v1(f: dict[str, Any], encoding: str) -> RawStreamV1:
    return RawStreamV1(
        **_legacy_stream_common(f, encoding),
        associated_token=f["beneficiary_associated_token"],
        escrow_vested_amount_snap_slot=f["escrow_vested_amount_snap_slot"],
        stream_resumed_slot=f["stream_resumed_slot"],
        allocation_reserved=f["allocation_reserved"],
        allocation=f["allocation"],
    )


def _build_anchor_stream(f: dict[str, Any], encoding: str) -> RawAnchorStream:
    return RawAnchorStream(
        account_version=f["version"],
        initialized=bool(f["initialized"]),
        name_bytes=f["name"],
        name=decode_name(f["name"], encoding),
        treasurer=f["treasurer_address"],
        rate_amount=f["rate_amount_units"],
        rate_interval_in_seconds=f["rate_interval_in_seconds"],
        start_utc=f["start_utc"],
        cliff_vest_amount=f["cliff_vest_amount_units"],
        cliff_vest_percent=f["cliff_vest_percent"],
        beneficiary=f["beneficiary_address"],
        associated_token=f["beneficiary_associated_token"],
        treasury=f["treasury_address"],
        allocation=f["allocation_assigned_units"],
        allocation_reserved=f["allocation_reserved_units"],
        total_withdrawals=f["total_withdrawals_units"],
        last_withdrawal_units=f["last_withdrawal_units"],
        last_withdrawal_slot=f["last_withdrawal_slot"],
        last_withdrawal_block_time=f["last_withdrawal_block_time"],
        last_manual_stop_withdrawable_units_snap=f["last_manual_stop_withdrawable_units_snap"],
        last_manual_stop_slot=f["last_manual_stop_slot"],
        last_manual_stop_block_time=f["last_manual_stop_block_time"],
        last_manual_resume_remaining_allocation_units_snap=f[
            "last_manual_resume_remaining_allocation_units_snap"
        ],
        last_manual_resume_slot=f["last_manual_resume_slot"],
        last_manual_resume_block_time=f["last_manual_resume_block_time"],
        last_known_total_seconds_in_paused_status=f["last_known_total_seconds_in_paused_status"],
        last_auto_stop_block_time=f["last_auto_stop_block_time"],
        fee_payed_by_treasurer=bool(f["fee_payed_by_treasurer"]),
        created_on_utc=f["created_on_utc"],
    )


def _build_treasury_v0(f: dict[str, Any], encoding: str) -> RawTreasuryV0:
    return RawTreasuryV0(
        initialized=bool(f["initialized"]),
        slot=f["treasury_block_height"],
        mint=f["treasury_mint_address"],
        treasurer=f["treasury_base_address"],
    )


def _build_treasury_v1(f: dict[str, Any], encoding: str) -> RawTreasuryV1:
    return RawTreasuryV1(
        initialized=bool(f["initialized"]),
        slot=f["slot"],
        treasurer=f["treasurer_address"],
        associated_token=f["associated_token_address"],
        mint=f["mint_address"],
        name_bytes=f["label"],
        name=decode_name(f["label"], encoding),
        balance=f["balance"],
        allocation_reserved=f["allocation_reserved"],
        allocation_committed=f["allocation_committed"],
        streams_amount=f["streams_amount"],
        created_on_utc=f["created_on_utc"],
        depletion_rate=f["depletion_rate"],
        treasury_type=f["type"],
    )


def _build_anchor_treasury(f: dict[str, Any], encoding: str) -> RawAnchorTreasury:
    return RawAnchorTreasury(
        account_version=f["version"],
        initialized=bool(f["initialized"]),
        bump=f["bump"],
        slot=f["slot"],
        name_bytes=f["name"],
        name=decode_name(f["name"], encoding),
        treasurer=f["treasurer_address"],
        associated_token=f["associated_token_address"],
        mint=f["mint"],
        balance=f["last_known_balance_units"],
        allocation_reserved=f["allocation_reserved_units"],
        allocation_assigned=f["allocation_assigned_units"],
        total_withdrawals=f["total_withdrawals_units"],
        total_streams=f["total_streams"],
        created_on_utc=f["created_on_utc"],
        treasury_type=f["treasury_type"],
        auto_close=bool(f["auto_close"]),
    )


def _build_mint(f: dict[str, Any], encoding: str) -> MintRecord:
    return MintRecord(
        mint_authority=f["mint_authority"] if f["mint_authority_option"] else None,
        supply=f["supply"],
        decimals=f["decimals"],
        is_initialized=bool(f["is_initialized"]),
        freeze_authority=f["freeze_authority"] if f["freeze_authority_option"] else None,
    )


def _build_stream_terms(f: dict[str, Any], encoding: str) -> RawStreamTerms:
    return RawStreamTerms(
        initialized=bool(f["initialized"]),
        proposed_by=f["proposed_by"],
        stream_id=f["stream_id"],
        name_bytes=f["stream_name"],
        name=decode_name(f["stream_name"], encoding),
        treasurer=f["treasurer_address"],
        beneficiary=f["beneficiary_address"],
        associated_token=f["associated_token_address"],
        rate_amount=f["rate_amount"],
        rate_interval_in_seconds=f["rate_interval_in_seconds"],
        rate_cliff_in_seconds=f["rate_cliff_in_seconds"],
        cliff_vest_amount=f["cliff_vest_amount"],
        cliff_vest_percent=f["cliff_vest_percent"],
        auto_pause_in_seconds=f["auto_pause_in_seconds"],
    )


def _build_token_account(f: dict[str, Any], encoding: str) -> TokenAccountRecord:
    return TokenAccountRecord(
        mint=f["mint"],
        owner=f["owner"],
        amount=f["amount"],
        delegate=f["delegate"] if f["delegate_option"] else None,
        state=f["state"],
        is_native=f["is_native"] if f["is_native_option"] else None,
        delegated_amount=f["delegated_amount"],
        close_authority=f["close_authority"] if f["close_authority_option"] else None,
    )


_BUILDERS: dict[tuple[str, int], Callable[[dict[str, Any], str], RawAccountRecord]] = {
    ("stream", 0): _build_stream_v0,
    ("stream", 1): _build_stream_v1,
    ("stream", 2): _build_anchor_stream,
    ("treasury", 0): _build_treasury_v0,
    ("treasury", 1): _build_treasury_v1,
    ("treasury", 2): _build_anchor_treasury,
    ("mint", 0): _build_mint,
    ("terms", 0): _build_stream_terms,
    ("token_account", 0): _build_token_account,
}


def detect_layout(
    kind: str,
    buffer: bytes,
    *,
    registry: LayoutRegistry = DEFAULT_REGISTRY,
) -> AccountLayout:
    """Return the layout decode() would use for buffer, or raise UnrecognizedAccountLayout."""
    return registry.select(kind, buffer)


def decode(
    kind: str,
    buffer: Any,
    *,
    registry: LayoutRegistry = DEFAULT_REGISTRY,
    name_encoding: str = DEFAULT_NAME_ENCODING,
) -> RawAccountRecord:
    """
    Decode one account snapshot of the given kind.

    Kinds: "stream", "treasury", "terms", "mint", "token_account".

    Raises UnrecognizedAccountLayout when no registered layout matches the
    buffer, MalformedLayout when the matched layout cannot decode it.
    """
    data = account_data_to_bytes(buffer)
    layout = registry.select(kind, data)
    builder = _BUILDERS.get((layout.kind, layout.version))
    if builder is None:
        raise UnrecognizedAccountLayout(
            f"no record type for {layout.label}",
            context={"kind": kind, "version": layout.version},
        )
    log = bind_layout(kind, layout.label, layout.version)
    try:
        fields = layout.decode(data[: layout.span])
    except MalformedLayout as e:
        log.warning("layout_decode_failed", size=len(data), error=e.message)
        raise
    log.debug("layout_selected", size=len(data), span=layout.span)
    return builder(fields, name_encoding)


def decode_stream(buffer: Any, **kwargs: Any) -> RawStream:
    return decode("stream", buffer, **kwargs)  # type: ignore[return-value]


def decode_treasury(buffer: Any, **kwargs: Any) -> RawTreasury:
    return decode("treasury", buffer, **kwargs)  # type: ignore[return-value]


def decode_mint(buffer: Any, **kwargs: Any) -> MintRecord:
    return decode("mint", buffer, **kwargs)  # type: ignore[return-value]


def decode_stream_terms(buffer: Any, **kwargs: Any) -> RawStreamTerms:
    return decode("terms", buffer, **kwargs)  # type: ignore[return-value]


def decode_token_account(buffer: Any, **kwargs: Any) -> TokenAccountRecord:
    """Decode an SPL token account; any other length raises UnrecognizedAccountLayout."""
    return decode("token_account", buffer, **kwargs)  # type: ignore[return-value]
