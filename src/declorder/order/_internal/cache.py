"""Per-class artifact cache.

Entries are a pure function of the class identity and its class file, which
does not change while the class is loaded, so the cache only grows. Values are
computed outside any lock and published with ``dict.setdefault``: concurrent
builders of the same entry produce equal values and the first one stored wins.
A stored ``None`` records that the class could not be inspected.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from declorder.order.models import JavaClass

LineTable = Mapping[str, "int | None"]
"""Signature key -> first source line (None when the method has no line info)."""

_T = TypeVar("_T")
_MISSING = object()


def _compute_if_absent(
    store: dict[JavaClass, _T | None],
    cls: JavaClass,
    build: Callable[[JavaClass], _T | None],
) -> _T | None:
    value = store.get(cls, _MISSING)
    if value is _MISSING:
        value = store.setdefault(cls, build(cls))
    return value  # type: ignore[return-value]


class ArtifactCache:
    """Line tables and scan regions keyed by class identity."""

    def __init__(self) -> None:
        self._line_tables: dict[JavaClass, LineTable | None] = {}
        self._scan_regions: dict[JavaClass, bytes | None] = {}

    def line_table(
        self, cls: JavaClass, build: Callable[[JavaClass], LineTable | None]
    ) -> LineTable | None:
        return _compute_if_absent(self._line_tables, cls, build)

    def scan_region(
        self, cls: JavaClass, build: Callable[[JavaClass], bytes | None]
    ) -> bytes | None:
        return _compute_if_absent(self._scan_regions, cls, build)

    def clear(self) -> None:
        """Drop all entries. Useful for testing."""
        self._line_tables.clear()
        self._scan_regions.clear()

    def __len__(self) -> int:
        return len(self._line_tables) + len(self._scan_regions)
