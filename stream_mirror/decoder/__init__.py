"""
Versioned account decoder.

Recognises which historical layout a snapshot uses and decodes it into a
canonical raw record.
"""

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
from stream_mirror.decoder.versioned import (
    account_data_to_bytes,
    decode,
    decode_mint,
    decode_name,
    decode_stream,
    decode_stream_terms,
    decode_token_account,
    decode_treasury,
    detect_layout,
)

__all__ = [
    "MintRecord",
    "RawAccountRecord",
    "RawAnchorStream",
    "RawAnchorTreasury",
    "RawStream",
    "RawStreamTerms",
    "RawStreamV0",
    "RawStreamV1",
    "RawTreasury",
    "RawTreasuryV0",
    "RawTreasuryV1",
    "TokenAccountRecord",
    "account_data_to_bytes",
    "decode",
    "decode_mint",
    "decode_name",
    "decode_stream",
    "decode_stream_terms",
    "decode_token_account",
    "decode_treasury",
    "detect_layout",
]
