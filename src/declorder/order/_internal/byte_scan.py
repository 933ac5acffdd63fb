"""Byte-scan fallback strategy.

This is a heuristic, not a class file parser. ``javac`` writes the constant
pool roughly in order of first use while generating methods, so the method
name and descriptor strings that follow the first ``LineNumberTable`` label
appear in declaration order. The scan region is the bytes after that label,
cut at the last ``SourceFile`` label.

A plain name hit is accepted when the byte after it is a control byte (the
tag or length of the next constant pool entry). For overloaded names the hit
must also be followed by ``(<params>)<return>`` encodings, which places the
position at that overload's descriptor string. When no such encoding
follows, the descriptor was interned earlier in the pool (another method
shares it) and the hit stays at the name.

Known false negatives:
- synthetic and bridge methods whose strings are not in declaration order
- a method name that is a suffix of an earlier constant pool string
- names repeated inside unrelated debug sections
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from typing import TYPE_CHECKING

import structlog

from declorder.order._internal.artifacts import ArtifactSource
from declorder.order._internal.cache import ArtifactCache
from declorder.order._internal.signature import internal_name, internal_names

if TYPE_CHECKING:
    from declorder.order.models import JavaClass, MemberDescriptor

log = structlog.get_logger(__name__)

LINE_NUMBER_TABLE_LABEL = b"LineNumberTable"
# Label plus the next entry's tag (u1) and length (u2)
LINE_NUMBER_TABLE_SKIP = len(LINE_NUMBER_TABLE_LABEL) + 3
SOURCE_FILE_LABEL = b"SourceFile"
MAX_CONTROL_BYTE = 7


def scan_region(data: bytes) -> bytes:
    """Trim class file bytes to the region between the debug-attribute labels."""
    start = data.find(LINE_NUMBER_TABLE_LABEL)
    region = data[start + LINE_NUMBER_TABLE_SKIP :] if start != -1 else data
    end = region.rfind(SOURCE_FILE_LABEL)
    return region[:end] if end != -1 else region


def find_member(region: bytes, member: MemberDescriptor, overloaded: bool) -> int | None:
    """Offset of ``member`` in ``region``, or None when the region is exhausted."""
    name = member.name.encode("utf-8")
    params = b"(" + internal_names(member.parameter_types).encode("utf-8") + b")"
    ret = internal_name(member.return_type).encode("utf-8")

    pos = 0
    while True:
        hit = region.find(name, pos)
        if hit == -1:
            return None
        pos = hit + len(name)
        if pos >= len(region) or region[pos] > MAX_CONTROL_BYTE:
            continue
        if not overloaded:
            return pos
        sig = region.find(params, pos)
        if sig == -1:
            return pos
        pos = sig + len(params)
        if region.startswith(ret, pos):
            return pos + len(ret)


class ByteScanStrategy:
    """Orders members of one class by where their strings occur in the class file."""

    name = "byte_scan"

    def __init__(self, artifacts: ArtifactSource, cache: ArtifactCache) -> None:
        self._artifacts = artifacts
        self._cache = cache

    def resolve(
        self, cls: JavaClass, members: Sequence[MemberDescriptor]
    ) -> list[int | None] | None:
        """Offset per member, or None when the class file is unavailable.

        Raises:
            ArtifactError: If the class file exists but cannot be read.
        """
        region = self._cache.scan_region(cls, self._build)
        if region is None:
            return None
        counts = Counter(m.name for m in members)
        return [find_member(region, m, counts[m.name] > 1) for m in members]

    def _build(self, cls: JavaClass) -> bytes | None:
        data = self._artifacts.read(cls)
        if data is None:
            return None
        region = scan_region(data)
        log.debug("scan_region_built", class_name=cls.name, size=len(data), region=len(region))
        return region
