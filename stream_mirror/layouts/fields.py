"""
Fixed-width little-endian field codecs and the AccountLayout descriptor.

A layout is an ordered list of fields; offsets are cumulative and the
span is the sum of field sizes. Decoding requires the buffer to be exactly
span bytes long. Encoding never truncates: integers that do not fit their
width raise ValueOutOfRange.
"""

from __future__ import annotations

import hashlib
import struct
from dataclasses import dataclass, field
from typing import Any, Mapping

from solders.pubkey import Pubkey

from stream_mirror.core.exceptions import MalformedLayout, ValueOutOfRange

DISCRIMINATOR_LEN = 8
PUBKEY_LEN = 32

# kind -> (struct format, size, signed)
_INT_FORMATS: dict[str, tuple[str, int, bool]] = {
    "u8": ("<B", 1, False),
    "u16": ("<H", 2, False),
    "u32": ("<I", 4, False),
    "u64": ("<Q", 8, False),
    "i64": ("<q", 8, True),
}


def anchor_discriminator(namespace: str, name: str) -> bytes:
    """Anchor discriminator: first 8 bytes of sha256("<namespace>:<name>")."""
    return hashlib.sha256(f"{namespace}:{name}".encode("utf-8")).digest()[:DISCRIMINATOR_LEN]


@dataclass(frozen=True)
class Field:
    """One fixed-width field: integer, public key or raw byte blob."""

    name: str
    kind: str
    size: int

    def decode(self, buffer: bytes, offset: int) -> Any:
        if self.kind in _INT_FORMATS:
            fmt, _, _ = _INT_FORMATS[self.kind]
            return struct.unpack_from(fmt, buffer, offset)[0]
        raw = bytes(buffer[offset : offset + self.size])
        if self.kind == "pubkey":
            return Pubkey(raw)
        return raw

    def encode(self, value: Any) -> bytes:
        if self.kind in _INT_FORMATS:
            fmt, size, signed = _INT_FORMATS[self.kind]
            if isinstance(value, bool):
                value = int(value)
            if not isinstance(value, int):
                raise MalformedLayout(
                    f"field {self.name} expects an integer, got {type(value).__name__}",
                    context={"field": self.name},
                )
            bits = size * 8
            low, high = (-(1 << (bits - 1)), (1 << (bits - 1)) - 1) if signed else (0, (1 << bits) - 1)
            if not low <= value <= high:
                raise ValueOutOfRange(
                    f"field {self.name} ({self.kind}) cannot hold {value}",
                    context={"field": self.name, "value": value, "min": low, "max": high},
                )
            return struct.pack(fmt, value)
        if self.kind == "pubkey":
            raw = bytes(value) if isinstance(value, Pubkey) else value
        else:
            raw = value.encode("utf-8") if isinstance(value, str) else value
        if not isinstance(raw, (bytes, bytearray)):
            raise MalformedLayout(
                f"field {self.name} expects bytes, got {type(value).__name__}",
                context={"field": self.name},
            )
        if self.kind == "pubkey" and len(raw) != self.size:
            raise MalformedLayout(
                f"field {self.name} expects a {self.size}-byte key, got {len(raw)} bytes",
                context={"field": self.name, "length": len(raw)},
            )
        if len(raw) > self.size:
            raise ValueOutOfRange(
                f"field {self.name} holds {self.size} bytes, got {len(raw)}",
                context={"field": self.name, "length": len(raw), "max": self.size},
            )
        # Fixed-width text/blob fields are null padded.
        return bytes(raw).ljust(self.size, b"\x00")


def u8(name: str) -> Field:
    return Field(name, "u8", 1)


def u32(name: str) -> Field:
    return Field(name, "u32", 4)


def u64(name: str) -> Field:
    return Field(name, "u64", 8)


def i64(name: str) -> Field:
    return Field(name, "i64", 8)


def pubkey(name: str) -> Field:
    return Field(name, "pubkey", PUBKEY_LEN)


def blob(name: str, size: int) -> Field:
    return Field(name, "blob", size)


@dataclass(frozen=True)
class AccountLayout:
    """
    Byte-exact schema for one account (or instruction) format version.

    account_size is the allocated length of accounts using this layout; it
    is larger than span when the program pads accounts for future fields.
    discriminator, when set, is written at offset 0 and disambiguates layouts
    that share an account size.
    """

    kind: str
    version: int
    fields: tuple[Field, ...]
    discriminator: bytes | None = None
    account_size: int | None = None
    name: str = ""
    _offsets: dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        offsets: dict[str, int] = {}
        pos = len(self.discriminator) if self.discriminator else 0
        for f in self.fields:
            if f.name in offsets:
                raise MalformedLayout(f"duplicate field {f.name} in {self.kind} v{self.version}")
            offsets[f.name] = pos
            pos += f.size
        object.__setattr__(self, "_offsets", offsets)
        if self.account_size is None:
            object.__setattr__(self, "account_size", pos)
        elif self.account_size < pos:
            raise MalformedLayout(
                f"{self.kind} v{self.version}: account size {self.account_size} smaller than span {pos}"
            )

    @property
    def span(self) -> int:
        head = len(self.discriminator) if self.discriminator else 0
        return head + sum(f.size for f in self.fields)

    @property
    def label(self) -> str:
        return self.name or f"{self.kind}_v{self.version}"

    def offset_of(self, field_name: str) -> int:
        return self._offsets[field_name]

    def has_discriminator(self, buffer: bytes) -> bool:
        if not self.discriminator:
            return True
        return bytes(buffer[: len(self.discriminator)]) == self.discriminator

    def matches(self, buffer: bytes) -> bool:
        """True if buffer has this layout's allocated size and discriminator."""
        return len(buffer) == self.account_size and self.has_discriminator(buffer)

    def decode(self, buffer: bytes) -> dict[str, Any]:
        """Decode an exactly span-sized buffer into a field map."""
        if len(buffer) != self.span:
            raise MalformedLayout(
                f"{self.label}: expected {self.span} bytes, got {len(buffer)}",
                context={"layout": self.label, "expected": self.span, "got": len(buffer)},
            )
        if not self.has_discriminator(buffer):
            raise MalformedLayout(
                f"{self.label}: discriminator mismatch",
                context={"layout": self.label},
            )
        return {f.name: f.decode(buffer, self._offsets[f.name]) for f in self.fields}

    def encode(self, values: Mapping[str, Any]) -> bytes:
        """Encode a field map into exactly span bytes."""
        missing = [f.name for f in self.fields if f.name not in values]
        if missing:
            raise MalformedLayout(
                f"{self.label}: missing fields {', '.join(missing)}",
                context={"layout": self.label, "missing": missing},
            )
        out = bytearray(self.discriminator or b"")
        for f in self.fields:
            out += f.encode(values[f.name])
        if len(out) != self.span:
            raise MalformedLayout(f"{self.label}: encoded {len(out)} bytes, span is {self.span}")
        return bytes(out)

    def encode_account(self, values: Mapping[str, Any]) -> bytes:
        """Encode and pad with zeros up to account_size."""
        return self.encode(values).ljust(self.account_size, b"\x00")
