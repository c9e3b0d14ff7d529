"""
Vesting projection engine.

refresh / refresh_many live in stream_mirror.projection.refresh (they
depend on the presentation mapper, which depends on these models).
"""

from stream_mirror.projection.engine import project, project_many
from stream_mirror.projection.models import (
    ProjectedStreamState,
    ProjectedTreasuryState,
    StreamState,
    TreasuryType,
)
from stream_mirror.projection.treasury import backfill_treasury, project_treasury

__all__ = [
    "ProjectedStreamState",
    "ProjectedTreasuryState",
    "StreamState",
    "TreasuryType",
    "backfill_treasury",
    "project",
    "project_many",
    "project_treasury",
]
