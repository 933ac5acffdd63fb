"""Internal building blocks of order recovery."""

from declorder.order._internal.artifacts import ArtifactSource, Classpath, LoaderArtifactSource
from declorder.order._internal.byte_scan import ByteScanStrategy
from declorder.order._internal.cache import ArtifactCache
from declorder.order._internal.hierarchy import iter_ancestors, rank_classes
from declorder.order._internal.line_table import (
    ClassFileFacility,
    InspectionFacility,
    JavapFacility,
    LineTableStrategy,
    ReportedMethod,
    detect_facility,
)
from declorder.order._internal.signature import internal_name, signature_key

__all__ = [
    "ArtifactCache",
    "ArtifactSource",
    "ByteScanStrategy",
    "ClassFileFacility",
    "Classpath",
    "InspectionFacility",
    "JavapFacility",
    "LineTableStrategy",
    "LoaderArtifactSource",
    "ReportedMethod",
    "detect_facility",
    "internal_name",
    "iter_ancestors",
    "rank_classes",
    "signature_key",
]
