"""
Pytest tests for environment configuration (monkeypatched environment, no .env needed).
"""

from __future__ import annotations

from stream_mirror.config import get_settings
from stream_mirror.config.env import (
    DEFAULT_DEVNET_PROGRAM_ID,
    DEFAULT_LEGACY_PROGRAM_ID,
    DEFAULT_MAINNET_PROGRAM_ID,
    get_default_friendly,
    get_name_encoding,
    get_program_id,
)


def test_defaults(clean_env):
    settings = get_settings()
    assert settings.network == "mainnet"
    assert settings.program_id == DEFAULT_MAINNET_PROGRAM_ID
    assert settings.legacy_program_id == DEFAULT_LEGACY_PROGRAM_ID
    assert settings.friendly is False
    assert settings.name_encoding == "utf-8"


def test_devnet_program_id(clean_env):
    clean_env.setenv("SOLANA_NETWORK", "DevNet")
    assert get_program_id() == DEFAULT_DEVNET_PROGRAM_ID
    clean_env.setenv("MSP_PROGRAM_ID", "Other1111111111111111111111111111111111111")
    assert get_program_id() == "Other1111111111111111111111111111111111111"


def test_friendly_flag(clean_env):
    for value, expected in (("1", True), ("YES", True), ("on", True), ("0", False), ("maybe", False)):
        clean_env.setenv("MSP_FRIENDLY", value)
        assert get_default_friendly() is expected


def test_name_encoding(clean_env):
    clean_env.setenv("MSP_NAME_ENCODING", "latin-1")
    assert get_name_encoding() == "iso8859-1"
    clean_env.setenv("MSP_NAME_ENCODING", "no-such-codec")
    assert get_name_encoding() == "utf-8"
