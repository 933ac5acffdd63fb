"""Minimal class file reader.

Reads just enough of the JVM class file format to report, per method, its
name, descriptor, access flags and ``LineNumberTable`` lines, plus the class
header (this/super/interfaces) and ``SourceFile``. It does not verify
bytecode. Truncated or inconsistent input raises ``ArtifactError.malformed``.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass

from declorder.core.errors import ArtifactError

MAGIC = 0xCAFEBABE

ACC_BRIDGE = 0x0040
ACC_SYNTHETIC = 0x1000

# Constant pool tags
CONSTANT_UTF8 = 1
CONSTANT_CLASS = 7
CONSTANT_LONG = 5
CONSTANT_DOUBLE = 6

# Payload size of fixed-width constant pool entries, keyed by tag
_FIXED_SIZES = {
    3: 4,  # Integer
    4: 4,  # Float
    5: 8,  # Long
    6: 8,  # Double
    7: 2,  # Class
    8: 2,  # String
    9: 4,  # Fieldref
    10: 4,  # Methodref
    11: 4,  # InterfaceMethodref
    12: 4,  # NameAndType
    15: 3,  # MethodHandle
    16: 2,  # MethodType
    17: 4,  # Dynamic
    18: 4,  # InvokeDynamic
    19: 2,  # Module
    20: 2,  # Package
}


@dataclass(frozen=True, slots=True)
class MethodInfo:
    """One entry of the class file's method table."""

    access_flags: int
    name: str
    descriptor: str
    lines: tuple[int, ...] = ()

    @property
    def first_line(self) -> int | None:
        return min(self.lines) if self.lines else None

    @property
    def is_synthetic(self) -> bool:
        return bool(self.access_flags & (ACC_SYNTHETIC | ACC_BRIDGE))

    @property
    def is_initializer(self) -> bool:
        return self.name in ("<init>", "<clinit>")


@dataclass(frozen=True, slots=True)
class ClassFile:
    this_class: str
    super_class: str | None
    interfaces: tuple[str, ...]
    methods: tuple[MethodInfo, ...]
    source_file: str | None = None

    @property
    def name(self) -> str:
        """Binary name (``a.b.C$D``)."""
        return self.this_class.replace("/", ".")

    @property
    def super_name(self) -> str | None:
        return self.super_class.replace("/", ".") if self.super_class else None

    @property
    def interface_names(self) -> tuple[str, ...]:
        return tuple(i.replace("/", ".") for i in self.interfaces)


class _Reader:
    __slots__ = ("data", "pos", "end")

    def __init__(self, data: bytes, pos: int = 0, end: int | None = None) -> None:
        self.data = data
        self.pos = pos
        self.end = len(data) if end is None else min(end, len(data))

    def _unpack(self, fmt: str, size: int) -> int:
        if self.pos + size > self.end:
            raise ArtifactError.malformed(self.pos, "unexpected end of data")
        (value,) = struct.unpack_from(fmt, self.data, self.pos)
        self.pos += size
        return value  # type: ignore[no-any-return]

    def u1(self) -> int:
        return self._unpack(">B", 1)

    def u2(self) -> int:
        return self._unpack(">H", 2)

    def u4(self) -> int:
        return self._unpack(">I", 4)

    def take(self, n: int) -> bytes:
        end = self.pos + n
        if end > self.end:
            raise ArtifactError.malformed(self.pos, f"need {n} bytes, {self.end - self.pos} left")
        chunk = self.data[self.pos : end]
        self.pos = end
        return chunk

    def skip(self, n: int) -> None:
        if self.pos + n > self.end:
            raise ArtifactError.malformed(self.pos, f"cannot skip {n} bytes")
        self.pos += n


def _decode_modified_utf8(raw: bytes) -> str:
    # Modified UTF-8 encodes NUL as C0 80 and supplementary characters as
    # surrogate pairs; the UTF-16 round trip joins the pairs.
    text = raw.replace(b"\xc0\x80", b"\x00").decode("utf-8", "surrogatepass")
    return text.encode("utf-16", "surrogatepass").decode("utf-16")


class _ConstantPool:
    def __init__(self, reader: _Reader) -> None:
        count = reader.u2()
        self._utf8: dict[int, str] = {}
        self._classes: dict[int, int] = {}
        index = 1
        while index < count:
            offset = reader.pos
            tag = reader.u1()
            if tag == CONSTANT_UTF8:
                raw = reader.take(reader.u2())
                try:
                    self._utf8[index] = _decode_modified_utf8(raw)
                except UnicodeError as e:
                    raise ArtifactError.malformed(offset, f"bad Utf8 constant #{index}") from e
            elif tag == CONSTANT_CLASS:
                self._classes[index] = reader.u2()
            elif tag in _FIXED_SIZES:
                reader.skip(_FIXED_SIZES[tag])
            else:
                raise ArtifactError.malformed(offset, f"unknown constant pool tag {tag}")
            # Long and Double occupy two slots
            index += 2 if tag in (CONSTANT_LONG, CONSTANT_DOUBLE) else 1

    def utf8(self, index: int) -> str:
        try:
            return self._utf8[index]
        except KeyError:
            raise ArtifactError.malformed(0, f"constant #{index} is not Utf8") from None

    def class_name(self, index: int) -> str:
        try:
            return self.utf8(self._classes[index])
        except KeyError:
            raise ArtifactError.malformed(0, f"constant #{index} is not a Class") from None


def _read_attributes(reader: _Reader, pool: _ConstantPool) -> dict[str, tuple[int, int]]:
    """Map attribute name -> (start, length) within ``reader.data``; skips bodies."""
    attributes: dict[str, tuple[int, int]] = {}
    for _ in range(reader.u2()):
        name = pool.utf8(reader.u2())
        length = reader.u4()
        attributes.setdefault(name, (reader.pos, length))
        reader.skip(length)
    return attributes


def _read_lines(data: bytes, code: tuple[int, int], pool: _ConstantPool) -> tuple[int, ...]:
    start, length = code
    reader = _Reader(data, start, start + length)
    reader.skip(4)  # max_stack, max_locals
    reader.skip(reader.u4())  # bytecode
    reader.skip(reader.u2() * 8)  # exception table
    lines: list[int] = []
    for _ in range(reader.u2()):
        name = pool.utf8(reader.u2())
        attr_length = reader.u4()
        if name != "LineNumberTable":
            reader.skip(attr_length)
            continue
        for _ in range(reader.u2()):
            reader.skip(2)  # start_pc
            lines.append(reader.u2())
    return tuple(lines)


def parse_class_file(data: bytes) -> ClassFile:
    """Parse a class file.

    Raises:
        ArtifactError: ``ARTIFACT_MALFORMED`` when the bytes are not a
            well-formed class file.
    """
    reader = _Reader(data)
    if reader.u4() != MAGIC:
        raise ArtifactError.malformed(0, "bad magic number")
    reader.skip(4)  # minor_version, major_version
    pool = _ConstantPool(reader)

    reader.skip(2)  # access_flags
    this_class = pool.class_name(reader.u2())
    super_index = reader.u2()
    super_class = pool.class_name(super_index) if super_index else None
    interfaces = tuple(pool.class_name(reader.u2()) for _ in range(reader.u2()))

    for _ in range(reader.u2()):  # fields
        reader.skip(6)
        _read_attributes(reader, pool)

    methods: list[MethodInfo] = []
    for _ in range(reader.u2()):
        flags = reader.u2()
        name = pool.utf8(reader.u2())
        descriptor = pool.utf8(reader.u2())
        attributes = _read_attributes(reader, pool)
        code = attributes.get("Code")
        lines = _read_lines(data, code, pool) if code else ()
        methods.append(MethodInfo(flags, name, descriptor, lines))

    source_file = None
    source_attr = _read_attributes(reader, pool).get("SourceFile")
    if source_attr:
        start, length = source_attr
        source_file = pool.utf8(_Reader(data, start, start + length).u2())

    return ClassFile(
        this_class=this_class,
        super_class=super_class,
        interfaces=interfaces,
        methods=tuple(methods),
        source_file=source_file,
    )
