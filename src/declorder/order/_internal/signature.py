"""Internal-name encoding and signature keys.

The internal name of a type is its class-file encoding: one ``[`` per array
dimension, a single letter for primitives, otherwise ``L`` + the binary name
with ``/`` separators + ``;``. Keys built here are compared against both
caller-supplied members and methods reported by an inspection facility, so
both paths go through ``signature_key_for``.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from declorder.order.models import (
    PRIMITIVE_CODES,
    PRIMITIVE_NAMES,
    JavaType,
    MemberDescriptor,
)


def internal_name(java_type: JavaType) -> str:
    """Return the class-file encoding of a type, e.g. ``[Ljava/lang/String;``."""
    if java_type.is_array:
        return "[" + internal_name(java_type.component_type)
    code = PRIMITIVE_CODES.get(java_type.name)
    if code is not None:
        return code
    return "L" + java_type.name.replace(".", "/") + ";"


def internal_names(types: Iterable[JavaType]) -> str:
    """Concatenate the internal names of ``types`` sans delimiter."""
    return "".join(internal_name(t) for t in types)


def method_descriptor(parameter_types: Iterable[JavaType], return_type: JavaType) -> str:
    return f"({internal_names(parameter_types)}){internal_name(return_type)}"


def _field_end(descriptor: str, start: int) -> int:
    """Index just past the field descriptor starting at ``start``."""
    i = start
    while i < len(descriptor) and descriptor[i] == "[":
        i += 1
    if i >= len(descriptor):
        raise ValueError(f"Truncated descriptor: {descriptor!r}")
    ch = descriptor[i]
    if ch == "L":
        end = descriptor.find(";", i)
        if end == -1 or end == i + 1:
            raise ValueError(f"Unterminated class type in descriptor: {descriptor!r}")
        return end + 1
    if ch in PRIMITIVE_NAMES and ch != "V":
        return i + 1
    raise ValueError(f"Invalid type code {ch!r} in descriptor: {descriptor!r}")


def split_method_descriptor(descriptor: str) -> tuple[tuple[str, ...], str]:
    """Split ``(IJ[Ljava/lang/String;)V`` into parameter and return encodings.

    Raises:
        ValueError: If the descriptor is malformed.
    """
    if not descriptor.startswith("("):
        raise ValueError(f"Method descriptor must start with '(': {descriptor!r}")
    params: list[str] = []
    i = 1
    while i < len(descriptor) and descriptor[i] != ")":
        end = _field_end(descriptor, i)
        params.append(descriptor[i:end])
        i = end
    if i >= len(descriptor):
        raise ValueError(f"Missing ')' in method descriptor: {descriptor!r}")
    ret = descriptor[i + 1 :]
    if ret != "V" and _field_end(ret, 0) != len(ret):
        raise ValueError(f"Invalid return type in descriptor: {descriptor!r}")
    return tuple(params), ret


def type_from_descriptor(encoding: str) -> JavaType:
    """Inverse of ``internal_name`` for a single field or return encoding."""
    dims = len(encoding) - len(encoding.lstrip("["))
    element = encoding[dims:]
    if element.startswith("L") and element.endswith(";") and len(element) > 2:
        return JavaType(element[1:-1].replace("/", "."), dims)
    if element in PRIMITIVE_NAMES and not (dims and element == "V"):
        return JavaType(PRIMITIVE_NAMES[element], dims)
    raise ValueError(f"Invalid type encoding: {encoding!r}")


def signature_key_for(
    class_name: str,
    name: str,
    parameter_encodings: Sequence[str],
    return_encoding: str,
) -> str:
    return f"{class_name}.{name}({''.join(parameter_encodings)}){return_encoding}"


def signature_key(member: MemberDescriptor) -> str:
    """Canonical key: declaring class, name, parameter and return encodings."""
    return signature_key_for(
        member.declaring_class.name,
        member.name,
        [internal_name(t) for t in member.parameter_types],
        internal_name(member.return_type),
    )
