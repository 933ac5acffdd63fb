"""Value types for method declaration order recovery.

A ``JavaClass`` is the identity of a compiled class: its binary name, its
direct supertypes and the class path that defines it. Member descriptors are
supplied by callers from whatever enumerated the methods (a reflection dump,
a ``javap`` listing, ...). Nothing here is mutated by the recovery code.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from declorder.order._internal.artifacts import Classpath

PRIMITIVE_CODES: dict[str, str] = {
    "boolean": "Z",
    "byte": "B",
    "char": "C",
    "double": "D",
    "float": "F",
    "int": "I",
    "long": "J",
    "short": "S",
    "void": "V",
}
PRIMITIVE_NAMES: dict[str, str] = {code: name for name, code in PRIMITIVE_CODES.items()}

StrategyName = Literal["line_table", "byte_scan"]


@dataclass(frozen=True, slots=True)
class JavaType:
    """A JVM type: element type binary name plus array dimensions."""

    name: str
    dimensions: int = 0

    @property
    def is_array(self) -> bool:
        return self.dimensions > 0

    @property
    def component_type(self) -> JavaType:
        if not self.dimensions:
            raise ValueError(f"{self} is not an array type")
        return JavaType(self.name, self.dimensions - 1)

    def __str__(self) -> str:
        return self.name + "[]" * self.dimensions


VOID = JavaType("void")


@dataclass(frozen=True, slots=True)
class JavaClass:
    """Identity of a compiled class.

    ``loader`` is the class path that defines the class. ``None`` means the
    class resolves through the boot class path.
    """

    name: str
    superclass: JavaClass | None = None
    interfaces: tuple[JavaClass, ...] = ()
    loader: Classpath | None = field(default=None, repr=False)

    @property
    def internal_name(self) -> str:
        return self.name.replace(".", "/")

    @property
    def resource_name(self) -> str:
        """Class-path-relative path of the class file."""
        return self.internal_name + ".class"

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class MemberDescriptor:
    """A method declared by ``declaring_class``."""

    declaring_class: JavaClass
    name: str
    parameter_types: tuple[JavaType, ...] = ()
    return_type: JavaType = VOID

    @classmethod
    def from_descriptor(
        cls, declaring_class: JavaClass, name: str, descriptor: str
    ) -> MemberDescriptor:
        """Build a member from a JVM method descriptor such as ``(I[Ljava/lang/String;)V``."""
        from declorder.order._internal.signature import (
            split_method_descriptor,
            type_from_descriptor,
        )

        params, ret = split_method_descriptor(descriptor)
        return cls(
            declaring_class,
            name,
            tuple(type_from_descriptor(p) for p in params),
            type_from_descriptor(ret),
        )

    @property
    def descriptor(self) -> str:
        from declorder.order._internal.signature import method_descriptor

        return method_descriptor(self.parameter_types, self.return_type)

    def __str__(self) -> str:
        params = ", ".join(str(t) for t in self.parameter_types)
        return f"{self.declaring_class.name}.{self.name}({params})"


@dataclass(frozen=True, slots=True)
class PositionRecord:
    """Intra-class position of one member.

    ``position`` is a source line (line table) or a scan-region byte offset
    (byte scan); values are only comparable within one declaring class.
    ``None`` means unresolved.
    """

    key: str
    position: int | None = None
    strategy: StrategyName | None = None

    @property
    def resolved(self) -> bool:
        return self.position is not None


@dataclass(frozen=True, slots=True)
class OrderResult:
    """Outcome of one order recovery call."""

    order: tuple[MemberDescriptor, ...]
    resolved: bool
    unresolved: tuple[MemberDescriptor, ...] = ()
    positions: dict[MemberDescriptor, PositionRecord] = field(
        default_factory=dict, compare=False, repr=False
    )

    def __iter__(self) -> Iterator[MemberDescriptor]:
        return iter(self.order)

    def __len__(self) -> int:
        return len(self.order)
