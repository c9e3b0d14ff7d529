"""Public key helpers: text to key conversion and validation."""

from __future__ import annotations

from solders.pubkey import Pubkey

from stream_mirror.core.exceptions import MalformedLayout

PUBKEY_LEN = 32
DEFAULT_PUBKEY = Pubkey.default()


def to_pubkey(value: Pubkey | str | bytes) -> Pubkey:
    """Return value as a Pubkey. Accepts a Pubkey, base58 text or 32 raw bytes."""
    if isinstance(value, Pubkey):
        return value
    if isinstance(value, (bytes, bytearray)):
        if len(value) != PUBKEY_LEN:
            raise MalformedLayout(
                f"public key must be {PUBKEY_LEN} bytes, got {len(value)}",
                context={"length": len(value)},
            )
        return Pubkey(bytes(value))
    if isinstance(value, str):
        try:
            return Pubkey.from_string(value.strip())
        except ValueError as e:
            raise MalformedLayout(f"invalid public key text: {value!r}") from e
    raise MalformedLayout(f"cannot convert {type(value).__name__} to a public key")


def is_valid_pubkey(value: str) -> bool:
    """Return True if value is a valid base58 public key."""
    try:
        Pubkey.from_string(value.strip())
        return True
    except ValueError:
        return False


def same_key(a: Pubkey | str | None, b: Pubkey | str | None) -> bool:
    """Compare two keys given as Pubkey or base58 text. None never matches."""
    if a is None or b is None:
        return False
    return str(a) == str(b)
