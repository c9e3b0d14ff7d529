"""
Batch listing over caller-fetched account snapshots and transactions.

The caller runs the RPC queries (getProgramAccounts, getTransaction) and
hands the results in; this module decodes, filters, projects, orders and
presents them. One bad account never aborts a listing: decode and
projection errors are logged and the account is skipped.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable

from solders.pubkey import Pubkey

from stream_mirror.activity.models import StreamActivityRecord
from stream_mirror.activity.parser import parse_activity
from stream_mirror.config import get_settings
from stream_mirror.core.exceptions import (
    InvalidStreamData,
    MalformedLayout,
    MissingExternalDependency,
    UnrecognizedAccountLayout,
)
from stream_mirror.decoder.models import RawStreamTerms
from stream_mirror.decoder.versioned import (
    account_data_to_bytes,
    decode_stream,
    decode_stream_terms,
    decode_token_account,
    decode_treasury,
)
from stream_mirror.mirror_logging import bind_account, get_logger
from stream_mirror.presentation.mapper import Decimals, present
from stream_mirror.projection.engine import project
from stream_mirror.projection.models import ProjectedStreamState, ProjectedTreasuryState
from stream_mirror.projection.treasury import backfill_treasury, project_treasury
from stream_mirror.utils.pubkey_utils import same_key, to_pubkey

logger = get_logger(__name__)

_SKIPPABLE = (UnrecognizedAccountLayout, MalformedLayout, InvalidStreamData)
_UNPRESENTABLE = _SKIPPABLE + (MissingExternalDependency,)


@dataclass(frozen=True)
class AccountSnapshot:
    """
    One program account as returned by getProgramAccounts.

    data: raw bytes, base64 text or the RPC [base64, "base64"] pair.
    lamports: 0 marks a closed account; None when unknown.
    created_block_time / transaction_signature: from the account's first
    signature, when the caller looked it up.
    """

    address: Pubkey | str
    data: Any
    lamports: int | None = None
    created_block_time: int = 0
    transaction_signature: str | None = None


def _is_closed(snapshot: AccountSnapshot) -> bool:
    return snapshot.lamports is not None and snapshot.lamports <= 0


def _present_each(
    records: list[Any],
    friendly: bool,
    decimals: Decimals,
    event: str,
    address: Callable[[Any], Any],
) -> list[Any]:
    """Present records in order, dropping any whose mint decimals are missing."""
    out = []
    for record in records:
        try:
            out.append(present(record, friendly, decimals=decimals))
        except _UNPRESENTABLE as e:
            bind_account(str(address(record))).warning(event, error_code=e.code, error=e.message)
    return out


def stream_included(
    state: ProjectedStreamState,
    *,
    treasurer: Pubkey | str | None = None,
    treasury: Pubkey | str | None = None,
    beneficiary: Pubkey | str | None = None,
) -> bool:
    """
    Apply the listing filters to one stream.

    treasurer and beneficiary each pass when unset; the beneficiary filter
    is only consulted when the treasurer filter is set and does not match.
    treasury, when set, must match regardless.
    """
    if treasurer is None or same_key(treasurer, state.treasurer):
        included = True
    else:
        included = beneficiary is None or same_key(beneficiary, state.beneficiary)
    if treasury is not None and not same_key(treasury, state.treasury):
        included = False
    return included


def _project_snapshot(
    snapshot: AccountSnapshot,
    reference_time: int,
    name_encoding: str,
) -> ProjectedStreamState | None:
    log = bind_account(str(snapshot.address))
    try:
        record = decode_stream(account_data_to_bytes(snapshot.data), name_encoding=name_encoding)
        return project(
            record,
            reference_time,
            address=snapshot.address,
            created_block_time=snapshot.created_block_time,
            transaction_signature=snapshot.transaction_signature,
        )
    except _SKIPPABLE as e:
        log.warning("stream_skipped", error_code=e.code, error=e.message)
        return None


def list_streams(
    snapshots: Iterable[AccountSnapshot],
    reference_time: int,
    *,
    treasurer: Pubkey | str | None = None,
    treasury: Pubkey | str | None = None,
    beneficiary: Pubkey | str | None = None,
    friendly: bool | None = None,
    decimals: Decimals = None,
) -> list[Any]:
    """
    Decode, filter and project stream snapshots at reference_time (seconds).

    Closed accounts (lamports == 0) and accounts that fail to decode or
    project are skipped. Ordered by created_block_time, newest first.
    """
    settings = get_settings()
    friendly = settings.friendly if friendly is None else friendly
    treasurer = to_pubkey(treasurer) if treasurer is not None else None
    treasury = to_pubkey(treasury) if treasury is not None else None
    beneficiary = to_pubkey(beneficiary) if beneficiary is not None else None

    streams: list[ProjectedStreamState] = []
    for snapshot in snapshots:
        if _is_closed(snapshot):
            continue
        state = _project_snapshot(snapshot, reference_time, settings.name_encoding)
        if state is None:
            continue
        if stream_included(state, treasurer=treasurer, treasury=treasury, beneficiary=beneficiary):
            streams.append(state)

    streams.sort(key=lambda s: s.created_block_time, reverse=True)
    logger.debug("streams_listed", count=len(streams), reference_time=reference_time)
    return _present_each(streams, friendly, decimals, "stream_skipped", lambda s: s.id)


def list_treasuries(
    snapshots: Iterable[AccountSnapshot],
    *,
    treasurer: Pubkey | str | None = None,
    friendly: bool | None = None,
    decimals: Decimals = None,
    block_time_lookup: Callable[[int], int | None] | None = None,
) -> list[Any]:
    """
    Decode treasury snapshots, optionally filtered by treasurer.

    block_time_lookup(slot) backfills the creation time of layouts that do
    not store one. Ordered by slot, newest first.
    """
    settings = get_settings()
    friendly = settings.friendly if friendly is None else friendly
    treasurer = to_pubkey(treasurer) if treasurer is not None else None

    treasuries: list[ProjectedTreasuryState] = []
    for snapshot in snapshots:
        if _is_closed(snapshot):
            continue
        try:
            record = decode_treasury(
                account_data_to_bytes(snapshot.data),
                name_encoding=settings.name_encoding,
            )
            state = project_treasury(record, address=snapshot.address)
        except _SKIPPABLE as e:
            bind_account(str(snapshot.address)).warning(
                "treasury_skipped", error_code=e.code, error=e.message
            )
            continue
        if treasurer is not None and not same_key(treasurer, state.treasurer):
            continue
        if block_time_lookup is not None:
            state = backfill_treasury(state, block_time_lookup=block_time_lookup)
        treasuries.append(state)

    treasuries.sort(key=lambda t: t.slot, reverse=True)
    return _present_each(treasuries, friendly, decimals, "treasury_skipped", lambda t: t.id)


def list_stream_activity(
    transactions: Iterable[dict[str, Any] | None],
    *,
    friendly: bool | None = None,
    decimals: Decimals = None,
    program_ids: Iterable[str] | None = None,
) -> list[Any]:
    """
    Deposits and withdrawals found in getTransaction (jsonParsed) payloads.

    program_ids defaults to the configured legacy and anchor programs.
    Ordered by block time, newest first.
    """
    settings = get_settings()
    friendly = settings.friendly if friendly is None else friendly
    allowed = set(program_ids) if program_ids is not None else {settings.legacy_program_id, settings.program_id}

    activity: list[StreamActivityRecord] = []
    for tx in transactions:
        if not tx:
            continue
        record = parse_activity(tx, program_ids=allowed)
        if record is not None:
            activity.append(record)

    activity.sort(key=lambda a: a.block_time, reverse=True)
    return _present_each(activity, friendly, decimals, "activity_skipped", lambda a: a.signature)


def find_stream_terms(
    snapshots: Iterable[AccountSnapshot],
    stream_id: Pubkey | str,
) -> RawStreamTerms | None:
    """
    Pending terms proposed for stream_id, or None.

    Only snapshots of exactly the terms layout size are considered; the
    first whose stream_id matches wins.
    """
    settings = get_settings()
    stream_id = to_pubkey(stream_id)
    for snapshot in snapshots:
        try:
            terms = decode_stream_terms(
                account_data_to_bytes(snapshot.data),
                name_encoding=settings.name_encoding,
            )
        except _SKIPPABLE:
            continue
        if same_key(stream_id, terms.stream_id):
            return terms
    return None


def list_treasury_mints(snapshots: Iterable[AccountSnapshot]) -> list[Pubkey]:
    """
    Mints of the token accounts a treasury owns, in snapshot order.

    Closed and unreadable token accounts are logged and skipped.
    """
    mints: list[Pubkey] = []
    for snapshot in snapshots:
        if _is_closed(snapshot):
            continue
        try:
            account = decode_token_account(account_data_to_bytes(snapshot.data))
        except _SKIPPABLE as e:
            bind_account(str(snapshot.address)).warning(
                "token_account_skipped", error_code=e.code, error=e.message
            )
            continue
        mints.append(account.mint)
    return mints
