"""
Layout registry: which layouts exist for each account kind.

Layouts are kept per kind and looked up newest version first. Two layouts
of one kind may share an allocated account size only if at least one of
them carries a discriminator; otherwise a buffer's length could not select
exactly one layout.
"""

from __future__ import annotations

from stream_mirror.core.exceptions import MalformedLayout, UnrecognizedAccountLayout
from stream_mirror.layouts.accounts import (
    ANCHOR_STREAM_LAYOUT,
    ANCHOR_TREASURY_LAYOUT,
    MINT_LAYOUT,
    STREAM_TERMS_LAYOUT,
    STREAM_V0_LAYOUT,
    STREAM_V1_LAYOUT,
    TOKEN_ACCOUNT_LAYOUT,
    TREASURY_V0_LAYOUT,
    TREASURY_V1_LAYOUT,
)
from stream_mirror.layouts.fields import AccountLayout


class LayoutRegistry:
    """Per-kind collection of account layouts."""

    def __init__(self) -> None:
        self._layouts: dict[str, list[AccountLayout]] = {}

    def register(self, layout: AccountLayout) -> None:
        existing = self._layouts.setdefault(layout.kind, [])
        for other in existing:
            if other.version == layout.version:
                raise MalformedLayout(
                    f"{layout.kind} v{layout.version} is already registered",
                    context={"kind": layout.kind, "version": layout.version},
                )
            if (
                other.account_size == layout.account_size
                and not other.discriminator
                and not layout.discriminator
            ):
                raise MalformedLayout(
                    f"{layout.label} and {other.label} share size {layout.account_size} "
                    "and neither has a discriminator",
                    context={"kind": layout.kind, "size": layout.account_size},
                )
        existing.append(layout)
        existing.sort(key=lambda item: item.version, reverse=True)

    def kinds(self) -> list[str]:
        return sorted(self._layouts)

    def layouts_for(self, kind: str) -> list[AccountLayout]:
        """Layouts of kind, newest version first."""
        return list(self._layouts.get(kind, ()))

    def get(self, kind: str, version: int) -> AccountLayout:
        for layout in self._layouts.get(kind, ()):
            if layout.version == version:
                return layout
        raise UnrecognizedAccountLayout(
            f"no {kind} layout with version {version}",
            context={"kind": kind, "version": version},
        )

    def account_sizes(self, kind: str) -> list[int]:
        """Distinct allocated sizes for kind (for dataSize filters)."""
        return sorted({layout.account_size for layout in self._layouts.get(kind, ())})

    def select(self, kind: str, buffer: bytes) -> AccountLayout:
        """First layout (newest to oldest) whose size and discriminator match buffer."""
        if kind not in self._layouts:
            raise UnrecognizedAccountLayout(
                f"unknown account kind {kind!r}",
                context={"kind": kind},
            )
        for layout in self._layouts[kind]:
            if layout.matches(buffer):
                return layout
        raise UnrecognizedAccountLayout(
            f"no {kind} layout matches a {len(buffer)}-byte buffer",
            context={"kind": kind, "size": len(buffer)},
        )


def build_default_registry() -> LayoutRegistry:
    registry = LayoutRegistry()
    for layout in (
        STREAM_V0_LAYOUT,
        STREAM_V1_LAYOUT,
        ANCHOR_STREAM_LAYOUT,
        TREASURY_V0_LAYOUT,
        TREASURY_V1_LAYOUT,
        ANCHOR_TREASURY_LAYOUT,
        MINT_LAYOUT,
        STREAM_TERMS_LAYOUT,
        TOKEN_ACCOUNT_LAYOUT,
    ):
        registry.register(layout)
    return registry


DEFAULT_REGISTRY = build_default_registry()
