"""
Layout registry package.

Binary schema descriptors for each historical stream / treasury account
format, stream terms, the SPL mint and token account, and the deposit /
withdraw instruction data.
"""

from stream_mirror.layouts.accounts import (
    ANCHOR_STREAM_LAYOUT,
    ANCHOR_TREASURY_LAYOUT,
    MINT_LAYOUT,
    STREAM_SIZE,
    STREAM_TERMS_LAYOUT,
    STREAM_V0_LAYOUT,
    STREAM_V1_LAYOUT,
    TOKEN_ACCOUNT_LAYOUT,
    TREASURY_SIZE,
    TREASURY_V0_LAYOUT,
    TREASURY_V1_LAYOUT,
)
from stream_mirror.layouts.fields import AccountLayout, Field
from stream_mirror.layouts.registry import DEFAULT_REGISTRY, LayoutRegistry, build_default_registry

__all__ = [
    "ANCHOR_STREAM_LAYOUT",
    "ANCHOR_TREASURY_LAYOUT",
    "AccountLayout",
    "DEFAULT_REGISTRY",
    "Field",
    "LayoutRegistry",
    "MINT_LAYOUT",
    "STREAM_SIZE",
    "STREAM_TERMS_LAYOUT",
    "STREAM_V0_LAYOUT",
    "STREAM_V1_LAYOUT",
    "TOKEN_ACCOUNT_LAYOUT",
    "TREASURY_SIZE",
    "TREASURY_V0_LAYOUT",
    "TREASURY_V1_LAYOUT",
    "build_default_registry",
]
