"""declorder - recover source declaration order of methods in compiled JVM classes."""

from declorder.order import (
    Classpath,
    JavaClass,
    JavaType,
    MemberDescriptor,
    OrderRecoveryCoordinator,
    OrderResult,
    sort_declarative_order,
)

__version__ = "0.1.0"

__all__ = [
    "Classpath",
    "JavaClass",
    "JavaType",
    "MemberDescriptor",
    "OrderRecoveryCoordinator",
    "OrderResult",
    "sort_declarative_order",
]
