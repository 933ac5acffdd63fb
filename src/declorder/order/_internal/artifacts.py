"""Class file byte sources.

A ``Classpath`` plays the role of a defining class loader: an ordered list of
directories and jar/zip archives searched for ``a/b/C.class``. Missing entries
are skipped; entries that exist but cannot be read raise
``ArtifactError.unreadable``.
"""

from __future__ import annotations

import os
import zipfile
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import structlog

from declorder.core.errors import ArtifactError

if TYPE_CHECKING:
    from declorder.order.models import JavaClass

log = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Classpath:
    """Ordered class path entries (directories, jars, zips)."""

    entries: tuple[Path, ...] = ()

    @classmethod
    def of(cls, *entries: str | os.PathLike[str]) -> Classpath:
        return cls(tuple(Path(e) for e in entries))

    @classmethod
    def parse(cls, value: str | Iterable[str]) -> Classpath:
        """Build from an ``os.pathsep``-separated string or an iterable of entries."""
        if isinstance(value, str):
            value = [v for v in value.split(os.pathsep) if v]
        return cls(tuple(Path(v).expanduser() for v in value))

    def as_argument(self) -> str:
        """Render for a ``-classpath`` command line argument."""
        return os.pathsep.join(str(e) for e in self.entries)

    def find_resource(self, resource_name: str) -> bytes | None:
        """Return the bytes of ``resource_name`` from the first entry holding it."""
        for entry in self.entries:
            data = _read_entry(entry, resource_name)
            if data is not None:
                return data
        return None

    def __bool__(self) -> bool:
        return bool(self.entries)


def _read_entry(entry: Path, resource_name: str) -> bytes | None:
    try:
        if entry.is_dir():
            path = entry / resource_name
            if not path.is_file():
                return None
            return path.read_bytes()
        if not entry.is_file():
            return None
        with zipfile.ZipFile(entry) as archive:
            try:
                return archive.read(resource_name)
            except KeyError:
                return None
    except (OSError, zipfile.BadZipFile) as e:
        raise ArtifactError.unreadable(f"{entry}!/{resource_name}", str(e)) from e


@runtime_checkable
class ArtifactSource(Protocol):
    """Returns the compiled bytes of a class, or None when unavailable."""

    def read(self, cls: JavaClass) -> bytes | None: ...


class LoaderArtifactSource:
    """Reads class files through each class's defining class path.

    Classes without a class path fall back to the boot class path.
    """

    def __init__(self, boot: Classpath | None = None) -> None:
        self._boot = boot or Classpath()

    @property
    def boot(self) -> Classpath:
        return self._boot

    def classpath_for(self, cls: JavaClass) -> Classpath:
        return cls.loader if cls.loader is not None else self._boot

    def read(self, cls: JavaClass) -> bytes | None:
        data = self.classpath_for(cls).find_resource(cls.resource_name)
        if data is None:
            log.debug("class_file_not_found", class_name=cls.name, resource=cls.resource_name)
        return data
