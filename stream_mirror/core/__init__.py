"""
Core utilities: exceptions and cross-cutting concerns.

Shared by the layout registry, decoder, projection engine, presentation
mapper and batch listing.
"""

from stream_mirror.core.exceptions import (
    InvalidStreamData,
    MalformedLayout,
    MissingExternalDependency,
    StreamMirrorError,
    UnrecognizedAccountLayout,
    ValueOutOfRange,
)

__all__ = [
    "InvalidStreamData",
    "MalformedLayout",
    "MissingExternalDependency",
    "StreamMirrorError",
    "UnrecognizedAccountLayout",
    "ValueOutOfRange",
]
