"""
Application-level exceptions.

Domain exceptions with stable error codes so batch callers can log and
skip a failing account without parsing messages.
"""

from __future__ import annotations

from typing import Any


class StreamMirrorError(Exception):
    """Base class for every error raised by stream_mirror."""

    code = "stream_mirror_error"

    def __init__(self, message: str, *, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.context = dict(context or {})

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, **self.context}


class UnrecognizedAccountLayout(StreamMirrorError):
    """Buffer length (and discriminator) matches no registered layout."""

    code = "unrecognized_account_layout"


class MalformedLayout(StreamMirrorError):
    """Buffer or field is structurally invalid for the layout being used."""

    code = "malformed_layout"


class ValueOutOfRange(StreamMirrorError):
    """Integer does not fit the fixed-width field it is being encoded into."""

    code = "value_out_of_range"


class InvalidStreamData(StreamMirrorError):
    """Stream claims to be accruing but has a zero rate amount or interval."""

    code = "invalid_stream_data"


class MissingExternalDependency(StreamMirrorError):
    """A value that must be supplied by the caller (e.g. mint decimals) is missing."""

    code = "missing_external_dependency"
