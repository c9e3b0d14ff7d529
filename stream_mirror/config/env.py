"""
Environment variable loading for Stream Mirror.

- SOLANA_NETWORK: devnet | mainnet (default: mainnet)
- MSP_LEGACY_PROGRAM_ID: program owning v0/v1 stream and treasury accounts
- MSP_PROGRAM_ID: anchor program owning v2 stream and treasury accounts
- MSP_FRIENDLY: default presentation mode (1/true/yes/on = friendly)
- MSP_NAME_ENCODING: text encoding of name/label fields (default: utf-8)
- Loads .env from project root when available.
"""

from __future__ import annotations

import codecs
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEFAULT_LEGACY_PROGRAM_ID = "H6wJxgkcc93yeUFnsZHgor3Q3pSWgGpEysfqKrwLtMko"
DEFAULT_MAINNET_PROGRAM_ID = "MSPCUMbLfy2MeT6geLMMzrUkv1Tx88XRApaVRdyxTuu"
DEFAULT_DEVNET_PROGRAM_ID = "MSPdQo5ZdrPh6rU1LsvUv5nRhAnj1mj6YQEqBUq8YwZ"
DEFAULT_NAME_ENCODING = "utf-8"

_TRUTHY = ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """Resolved configuration; build with get_settings()."""

    network: str
    legacy_program_id: str
    program_id: str
    friendly: bool
    name_encoding: str


def load_mirror_env() -> None:
    """Load .env from project root. Safe to call multiple times; existing env wins."""
    load_dotenv(_ENV_PATH, override=False)


def get_solana_network() -> str:
    """Return SOLANA_NETWORK from env: devnet | mainnet. Default: mainnet."""
    load_mirror_env()
    raw = (os.getenv("SOLANA_NETWORK") or os.getenv("SOLANA_CLUSTER") or "mainnet").strip().lower()
    if raw == "devnet":
        return "devnet"
    return "mainnet"


def get_legacy_program_id() -> str:
    load_mirror_env()
    pid = (os.getenv("MSP_LEGACY_PROGRAM_ID") or "").strip()
    return pid or DEFAULT_LEGACY_PROGRAM_ID


def get_program_id() -> str:
    """Return MSP_PROGRAM_ID from env, or the default for the current network."""
    load_mirror_env()
    pid = (os.getenv("MSP_PROGRAM_ID") or "").strip()
    if pid:
        return pid
    return DEFAULT_DEVNET_PROGRAM_ID if get_solana_network() == "devnet" else DEFAULT_MAINNET_PROGRAM_ID


def get_default_friendly() -> bool:
    """
    Return the default presentation mode from MSP_FRIENDLY.
    Unset or unrecognized values fall back to raw mode.
    """
    load_mirror_env()
    raw = (os.getenv("MSP_FRIENDLY") or "").strip().lower()
    return raw in _TRUTHY


def get_name_encoding() -> str:
    """Return MSP_NAME_ENCODING if it names a known codec, else utf-8."""
    load_mirror_env()
    raw = (os.getenv("MSP_NAME_ENCODING") or "").strip()
    if not raw:
        return DEFAULT_NAME_ENCODING
    try:
        return codecs.lookup(raw).name
    except LookupError:
        return DEFAULT_NAME_ENCODING


def get_settings() -> Settings:
    """Return the current settings, re-read from the environment on every call."""
    return Settings(
        network=get_solana_network(),
        legacy_program_id=get_legacy_program_id(),
        program_id=get_program_id(),
        friendly=get_default_friendly(),
        name_encoding=get_name_encoding(),
    )
