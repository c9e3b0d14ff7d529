"""Stream activity records derived from transaction history."""

from __future__ import annotations

from dataclasses import dataclass

from solders.pubkey import Pubkey

ACTION_DEPOSITED = "deposited"
ACTION_WITHDREW = "withdrew"


@dataclass(frozen=True)
class StreamActivityRecord:
    """One deposit or withdrawal against a stream."""

    signature: str
    initializer: Pubkey
    """First signer of the transaction."""
    action: str
    """ACTION_DEPOSITED or ACTION_WITHDREW."""
    amount: int
    """Token units, not scaled by decimals."""
    mint: Pubkey | None
    """None when the transaction carries no token balances."""
    block_time: int
    """Unix timestamp (seconds); 0 if the payload had none."""
