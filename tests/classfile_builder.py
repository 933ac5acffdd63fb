"""Builds small, well-formed class files for tests.

The constant pool is laid out the way javac does for simple classes: class
names first, then the constructor strings, ``Code`` and ``LineNumberTable``,
then each method's name and descriptor in declaration order, then
``SourceFile``. Equal strings are interned once.
"""

from __future__ import annotations

import struct
from collections.abc import Sequence
from typing import Any

ACC_PUBLIC = 0x0001
ACC_ABSTRACT = 0x0400
ACC_SYNTHETIC = 0x1000


class _Pool:
    def __init__(self) -> None:
        self._entries: list[bytes] = []
        self._index: dict[tuple[str, str], int] = {}

    def _add(self, key: tuple[str, str], entry: bytes) -> int:
        if key not in self._index:
            self._entries.append(entry)
            self._index[key] = len(self._entries)
        return self._index[key]

    def utf8(self, value: str) -> int:
        encoded = value.encode("utf-8")
        return self._add(("utf8", value), b"\x01" + struct.pack(">H", len(encoded)) + encoded)

    def class_ref(self, internal_name: str) -> int:
        name_index = self.utf8(internal_name)
        return self._add(("class", internal_name), b"\x07" + struct.pack(">H", name_index))

    def to_bytes(self) -> bytes:
        return struct.pack(">H", len(self._entries) + 1) + b"".join(self._entries)


def _method_bytes(
    pool: _Pool, access: int, name: str, descriptor: str, lines: Sequence[int] | None
) -> bytes:
    head = struct.pack(">HHH", access, pool.utf8(name), pool.utf8(descriptor))
    if lines is None:
        return head + struct.pack(">H", 0)

    code = b"\xb1"  # return
    attributes = b""
    attribute_count = 0
    if lines:
        table = struct.pack(">H", len(lines)) + b"".join(
            struct.pack(">HH", pc, line) for pc, line in enumerate(lines)
        )
        attributes = struct.pack(">HI", pool.utf8("LineNumberTable"), len(table)) + table
        attribute_count = 1
    body = (
        struct.pack(">HHI", 1, 1, len(code))
        + code
        + struct.pack(">H", 0)  # exception table
        + struct.pack(">H", attribute_count)
        + attributes
    )
    return head + struct.pack(">H", 1) + struct.pack(">HI", pool.utf8("Code"), len(body)) + body


def build_class_file(
    class_name: str,
    methods: Sequence[tuple[Any, ...]],
    *,
    superclass: str | None = "java.lang.Object",
    interfaces: Sequence[str] = (),
    constructor_line: int | None = 1,
    source_file: str | None = "",
) -> bytes:
    """Return class file bytes for ``class_name`` declaring ``methods`` in order.

    Each method is ``(name, descriptor, lines)`` or ``(name, descriptor, lines,
    access_flags)``. ``lines=None`` omits the Code attribute (abstract or
    native); ``lines=()`` keeps Code without a LineNumberTable.

    ``source_file=""`` derives ``Simple.java`` from the class name; ``None``
    omits the SourceFile attribute.
    """
    pool = _Pool()
    this_index = pool.class_ref(class_name.replace(".", "/"))
    super_index = pool.class_ref(superclass.replace(".", "/")) if superclass else 0
    interface_indexes = [pool.class_ref(i.replace(".", "/")) for i in interfaces]

    entries: list[tuple[int, str, str, Sequence[int] | None]] = []
    if constructor_line is not None:
        entries.append((ACC_PUBLIC, "<init>", "()V", (constructor_line,)))
    for entry in methods:
        name, descriptor, lines = entry[0], entry[1], entry[2]
        access = entry[3] if len(entry) > 3 else ACC_PUBLIC
        entries.append((access, name, descriptor, lines))

    if any(lines is not None for _, _, _, lines in entries):
        pool.utf8("Code")
    if any(lines for _, _, _, lines in entries):
        pool.utf8("LineNumberTable")

    method_table = b"".join(_method_bytes(pool, *entry) for entry in entries)

    class_attributes = struct.pack(">H", 0)
    if source_file is not None:
        file_name = source_file or class_name.rsplit(".", 1)[-1].split("$")[0] + ".java"
        label = pool.utf8("SourceFile")
        class_attributes = struct.pack(">H", 1) + struct.pack(">HIH", label, 2, pool.utf8(file_name))

    return (
        struct.pack(">IHH", 0xCAFEBABE, 0, 52)
        + pool.to_bytes()
        + struct.pack(">HHH", 0x0021, this_index, super_index)
        + struct.pack(">H", len(interface_indexes))
        + b"".join(struct.pack(">H", i) for i in interface_indexes)
        + struct.pack(">H", 0)  # fields
        + struct.pack(">H", len(entries))
        + method_table
        + class_attributes
    )
