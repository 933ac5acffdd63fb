"""Method declaration order recovery for compiled JVM classes.

Public API:
- OrderRecoveryCoordinator / sort_declarative_order: recover order
- JavaClass, JavaType, MemberDescriptor: inputs
- OrderResult, PositionRecord: outputs
- Classpath, ArtifactSource: where class files come from
"""

from declorder.order.models import (
    VOID,
    JavaClass,
    JavaType,
    MemberDescriptor,
    OrderResult,
    PositionRecord,
)
from declorder.order.ops import (
    OrderRecoveryCoordinator,
    get_default_coordinator,
    reset_default_coordinator,
    sort_declarative_order,
)
from declorder.order._internal import (
    ArtifactCache,
    ArtifactSource,
    ClassFileFacility,
    Classpath,
    InspectionFacility,
    JavapFacility,
    LoaderArtifactSource,
    ReportedMethod,
    internal_name,
    signature_key,
)

__all__ = [
    "VOID",
    "ArtifactCache",
    "ArtifactSource",
    "ClassFileFacility",
    "Classpath",
    "InspectionFacility",
    "JavaClass",
    "JavaType",
    "JavapFacility",
    "LoaderArtifactSource",
    "MemberDescriptor",
    "OrderRecoveryCoordinator",
    "OrderResult",
    "PositionRecord",
    "ReportedMethod",
    "get_default_coordinator",
    "internal_name",
    "reset_default_coordinator",
    "signature_key",
    "sort_declarative_order",
]
