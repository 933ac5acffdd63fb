"""Method declaration order recovery.

This module implements the OrderRecoveryCoordinator - the entry point for
ordering a set of methods the way they were declared in source. Per declaring
class it asks the line-number-table strategy first and falls back to the
byte-scan strategy when the line table cannot describe the class:

    group by class -> rank classes -> line table | byte scan -> sort

Members that neither strategy can place are kept, sorted after the resolved
members of their class in input order, and reported through
``OrderResult.resolved``. Only unreadable class files raise.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import structlog

from declorder.config.loader import load_config
from declorder.config.models import DeclOrderConfig
from declorder.order._internal import (
    ArtifactCache,
    ArtifactSource,
    ByteScanStrategy,
    Classpath,
    InspectionFacility,
    LineTableStrategy,
    LoaderArtifactSource,
    detect_facility,
    rank_classes,
    signature_key,
)
from declorder.order.models import (
    JavaClass,
    MemberDescriptor,
    OrderResult,
    PositionRecord,
    StrategyName,
)

log = structlog.get_logger(__name__)


class OrderRecoveryCoordinator:
    """Recovers source declaration order for methods.

    The coordinator owns the artifact cache, the resolved inspection facility
    and the set of signatures it has already warned about. Share one instance
    to share those; construct separate instances for isolated caches.

    Args:
        config: Settings; defaults to built-in defaults.
        artifacts: Class file byte source. Defaults to reading through each
            class's class path, falling back to ``config.classpath.boot``.
        facility: Inspection facility for the line table. When omitted it is
            resolved once from ``config.line_table``.
        cache: Artifact cache, e.g. to share between coordinators.
    """

    def __init__(
        self,
        config: DeclOrderConfig | None = None,
        *,
        artifacts: ArtifactSource | None = None,
        facility: InspectionFacility | None = None,
        cache: ArtifactCache | None = None,
    ) -> None:
        self._config = config or DeclOrderConfig()
        boot = Classpath.parse(self._config.classpath.boot)
        self._artifacts = artifacts or LoaderArtifactSource(boot)
        self._cache = cache or ArtifactCache()
        if facility is None:
            facility = detect_facility(self._config.line_table, self._artifacts, boot)
        self._facility = facility
        self._line_table = LineTableStrategy(facility, self._cache) if facility else None
        self._byte_scan = ByteScanStrategy(self._artifacts, self._cache)
        self._warned: set[str] = set()

    @property
    def config(self) -> DeclOrderConfig:
        return self._config

    @property
    def cache(self) -> ArtifactCache:
        return self._cache

    @property
    def facility(self) -> InspectionFacility | None:
        return self._facility

    def recover_order(
        self,
        members: Iterable[MemberDescriptor],
        *,
        super_first: bool | None = None,
    ) -> OrderResult:
        """Return ``members`` in declaration order.

        Primary key is the declaring class rank (ancestors first unless
        ``super_first`` is False), secondary the intra-class position.
        Unresolved members sort last within their class; ties keep input
        order.

        Raises:
            ArtifactError: If a class file exists but cannot be read.
        """
        items = list(members)
        if super_first is None:
            super_first = self._config.order.super_first

        groups: dict[JavaClass, list[int]] = {}
        for index, member in enumerate(items):
            groups.setdefault(member.declaring_class, []).append(index)
        ranks = rank_classes(groups, super_first=super_first)

        records: dict[int, PositionRecord] = {}
        for cls, indexes in groups.items():
            group = [items[i] for i in indexes]
            positions, strategy = self._resolve_class(cls, group)
            for index, member, position in zip(indexes, group, positions, strict=True):
                records[index] = PositionRecord(
                    key=signature_key(member),
                    position=position,
                    strategy=strategy if position is not None else None,
                )

        def sort_key(index: int) -> tuple[int, bool, int, int]:
            record = records[index]
            return (
                ranks[items[index].declaring_class],
                not record.resolved,
                record.position or 0,
                index,
            )

        ordered = sorted(range(len(items)), key=sort_key)
        unresolved = tuple(items[i] for i in ordered if not records[i].resolved)
        for index in ordered:
            if not records[index].resolved:
                self._warn_unresolved(records[index].key)

        return OrderResult(
            order=tuple(items[i] for i in ordered),
            resolved=not unresolved,
            unresolved=unresolved,
            positions={items[i]: records[i] for i in ordered},
        )

    def _resolve_class(
        self, cls: JavaClass, group: Sequence[MemberDescriptor]
    ) -> tuple[list[int | None], StrategyName | None]:
        if self._line_table is not None:
            positions = self._line_table.resolve(cls, group)
            if positions is not None:
                return positions, "line_table"
            log.debug("byte_scan_fallback", class_name=cls.name)

        positions = self._byte_scan.resolve(cls, group)
        if positions is not None:
            return positions, "byte_scan"

        log.debug("class_unavailable", class_name=cls.name, members=len(group))
        return [None] * len(group), None

    def _warn_unresolved(self, key: str) -> None:
        if not self._config.order.warn_unresolved or key in self._warned:
            return
        self._warned.add(key)
        log.warning("declaration_order_unresolved", signature=key)


_default_coordinator: OrderRecoveryCoordinator | None = None


def get_default_coordinator() -> OrderRecoveryCoordinator:
    """Process-wide coordinator built from ``load_config()`` on first use."""
    global _default_coordinator
    if _default_coordinator is None:
        _default_coordinator = OrderRecoveryCoordinator(load_config())
    return _default_coordinator


def reset_default_coordinator() -> None:
    """Forget the process-wide coordinator and its cache. Useful for testing."""
    global _default_coordinator
    _default_coordinator = None


def sort_declarative_order(
    members: Iterable[MemberDescriptor],
    *,
    super_first: bool | None = None,
) -> OrderResult:
    """Recover declaration order using the process-wide coordinator."""
    return get_default_coordinator().recover_order(members, super_first=super_first)
