"""Line-number-table strategy.

An inspection facility reports, for one compiled class, every method's name,
parameter and return descriptors and first source line. The strategy keys
those reports by signature and looks up the members being ordered. A facility
that cannot describe a class is a total failure for that class: no partial
per-method results, the caller moves on to the byte scan.

Facilities:
- ``JavapFacility`` runs the JDK's ``javap -p -l -s``.
- ``ClassFileFacility`` reads ``LineNumberTable`` attributes from the class
  file directly.
"""

from __future__ import annotations

import re
import shutil
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import structlog

from declorder.core.errors import ArtifactError, ErrorCode, FacilityError
from declorder.order._internal.artifacts import ArtifactSource, Classpath
from declorder.order._internal.cache import ArtifactCache, LineTable
from declorder.order._internal.classfile import parse_class_file
from declorder.order._internal.signature import (
    signature_key,
    signature_key_for,
    split_method_descriptor,
)

if TYPE_CHECKING:
    from declorder.config.models import LineTableConfig
    from declorder.order.models import JavaClass, MemberDescriptor

log = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ReportedMethod:
    """A method as reported by an inspection facility."""

    name: str
    parameter_descriptors: tuple[str, ...]
    return_descriptor: str
    line: int | None = None


@runtime_checkable
class InspectionFacility(Protocol):
    """Describes the methods of a compiled class.

    Raises ``FacilityError`` when the class cannot be located or described.
    """

    name: str

    def describe(self, cls: JavaClass) -> Sequence[ReportedMethod]: ...


# =============================================================================
# javap
# =============================================================================

_LINE_RE = re.compile(r"^line\s+(\d+)\s*:\s*\d+$")


def _javap_method_name(header: str, class_name: str) -> str:
    head = header[: header.index("(")].split()
    name = head[-1] if head else ""
    if name.replace("$", ".") == class_name.replace("$", "."):
        return "<init>"
    return name


def parse_javap_output(text: str, class_name: str) -> list[ReportedMethod]:
    """Parse ``javap -p -l -s`` output for one class.

    Member headers are indented by two spaces; their ``descriptor:`` and
    ``LineNumberTable:`` blocks by four. Methods without a descriptor line are
    dropped. Static initializers and fields carry no parameter list and are
    skipped.
    """
    methods: list[ReportedMethod] = []
    name: str | None = None
    descriptor: str | None = None
    lines: list[int] = []
    in_lines = False

    def flush() -> None:
        if name is None or descriptor is None:
            return
        try:
            params, ret = split_method_descriptor(descriptor)
        except ValueError:
            log.debug("javap_bad_descriptor", class_name=class_name, descriptor=descriptor)
            return
        methods.append(ReportedMethod(name, params, ret, min(lines) if lines else None))

    for raw in text.splitlines():
        stripped = raw.strip()
        if not stripped:
            continue
        if raw.startswith("  ") and not raw.startswith("   "):
            flush()
            name = _javap_method_name(stripped, class_name) if "(" in stripped else None
            descriptor = None
            lines = []
            in_lines = False
        elif name is None:
            continue
        elif stripped.startswith("descriptor:"):
            descriptor = stripped.split(":", 1)[1].strip()
        elif stripped == "LineNumberTable:":
            in_lines = True
        elif in_lines and (match := _LINE_RE.match(stripped)):
            lines.append(int(match.group(1)))
        elif stripped.endswith(":"):
            in_lines = False
    flush()
    return methods


class JavapFacility:
    """Runs ``javap`` against the class's defining class path."""

    name = "javap"

    def __init__(
        self,
        executable: str,
        *,
        boot: Classpath | None = None,
        timeout_sec: float = 30.0,
    ) -> None:
        self._executable = executable
        self._boot = boot or Classpath()
        self._timeout_sec = timeout_sec

    def describe(self, cls: JavaClass) -> Sequence[ReportedMethod]:
        classpath = cls.loader if cls.loader is not None else self._boot
        args = [self._executable, "-p", "-l", "-s"]
        if classpath:
            args += ["-classpath", classpath.as_argument()]
        args.append(cls.name)

        try:
            result = subprocess.run(
                args,
                capture_output=True,
                text=True,
                timeout=self._timeout_sec,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise FacilityError.failed(self.name, cls.name, "timed out") from e
        except UnicodeDecodeError as e:
            raise FacilityError.failed(self.name, cls.name, f"undecodable output: {e.reason}") from e
        except OSError as e:
            raise FacilityError.unavailable(self.name) from e

        if result.returncode != 0:
            output = f"{result.stdout}\n{result.stderr}"
            if "not found" in output:
                raise FacilityError.class_not_found(self.name, cls.name)
            raise FacilityError.failed(self.name, cls.name, output.strip()[:200])
        return parse_javap_output(result.stdout, cls.name)


# =============================================================================
# Class file reader
# =============================================================================


class ClassFileFacility:
    """Reads line numbers straight from the class file."""

    name = "classfile"

    def __init__(self, artifacts: ArtifactSource) -> None:
        self._artifacts = artifacts

    def describe(self, cls: JavaClass) -> Sequence[ReportedMethod]:
        data = self._artifacts.read(cls)
        if data is None:
            raise FacilityError.class_not_found(self.name, cls.name)
        try:
            class_file = parse_class_file(data)
        except ArtifactError as e:
            if e.code != ErrorCode.ARTIFACT_MALFORMED:
                raise
            raise FacilityError.failed(self.name, cls.name, e.message) from e
        if class_file.name != cls.name:
            raise FacilityError.failed(
                self.name, cls.name, f"class file declares {class_file.name}"
            )

        reported: list[ReportedMethod] = []
        for method in class_file.methods:
            try:
                params, ret = split_method_descriptor(method.descriptor)
            except ValueError as e:
                raise FacilityError.failed(self.name, cls.name, str(e)) from e
            reported.append(ReportedMethod(method.name, params, ret, method.first_line))
        return reported


def detect_facility(
    config: LineTableConfig,
    artifacts: ArtifactSource,
    boot: Classpath | None = None,
) -> InspectionFacility | None:
    """Resolve the configured inspection facility (probes PATH at most once per call)."""
    if config.mode == "off":
        return None
    if config.mode in ("auto", "javap"):
        executable = shutil.which(config.javap_path)
        if executable:
            log.debug("facility_selected", facility="javap", executable=executable)
            return JavapFacility(executable, boot=boot, timeout_sec=config.timeout_sec)
        if config.mode == "javap":
            log.warning("javap_not_found", javap_path=config.javap_path)
            return None
    log.debug("facility_selected", facility="classfile")
    return ClassFileFacility(artifacts)


# =============================================================================
# Strategy
# =============================================================================


class LineTableStrategy:
    """Orders members of one class by their first reported source line."""

    name = "line_table"

    def __init__(self, facility: InspectionFacility, cache: ArtifactCache) -> None:
        self._facility = facility
        self._cache = cache

    def resolve(
        self, cls: JavaClass, members: Sequence[MemberDescriptor]
    ) -> list[int | None] | None:
        """Line per member, or None when the facility cannot describe ``cls``."""
        table = self._cache.line_table(cls, self._build)
        if table is None:
            return None
        return [table.get(signature_key(m)) for m in members]

    def _build(self, cls: JavaClass) -> LineTable | None:
        try:
            reported = self._facility.describe(cls)
        except FacilityError as e:
            log.debug(
                "line_table_failed",
                class_name=cls.name,
                facility=self._facility.name,
                error=e.error_name,
                reason=e.message,
            )
            return None

        table: dict[str, int | None] = {}
        for method in reported:
            key = signature_key_for(
                cls.name, method.name, method.parameter_descriptors, method.return_descriptor
            )
            table.setdefault(key, method.line)
        return MappingProxyType(table)
