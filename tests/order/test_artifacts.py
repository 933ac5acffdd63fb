"""Tests for class path lookup and the artifact cache."""

import os
import zipfile
from pathlib import Path

import pytest

from declorder.core.errors import ArtifactError, ErrorCode
from declorder.order.models import JavaClass
from declorder.order._internal.artifacts import (
    ArtifactSource,
    Classpath,
    LoaderArtifactSource,
)
from declorder.order._internal.cache import ArtifactCache


def _write_class(root: Path, resource: str, data: bytes) -> None:
    path = root / resource
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)


class TestClasspath:
    """Classpath construction and resource lookup."""

    def test_parse_path_string(self, tmp_path: Path) -> None:
        value = os.pathsep.join([str(tmp_path / "a"), "", str(tmp_path / "b.jar")])
        classpath = Classpath.parse(value)
        assert classpath.entries == (tmp_path / "a", tmp_path / "b.jar")
        assert classpath.as_argument() == os.pathsep.join(
            [str(tmp_path / "a"), str(tmp_path / "b.jar")]
        )

    def test_empty_is_falsy(self) -> None:
        assert not Classpath()
        assert Classpath.of("lib")

    def test_directory_lookup(self, tmp_path: Path) -> None:
        _write_class(tmp_path, "a/b/C.class", b"bytes")
        assert Classpath.of(tmp_path).find_resource("a/b/C.class") == b"bytes"
        assert Classpath.of(tmp_path).find_resource("a/b/D.class") is None

    def test_jar_lookup(self, tmp_path: Path) -> None:
        jar = tmp_path / "lib.jar"
        with zipfile.ZipFile(jar, "w") as archive:
            archive.writestr("a/b/C.class", b"from-jar")
        classpath = Classpath.of(jar)
        assert classpath.find_resource("a/b/C.class") == b"from-jar"
        assert classpath.find_resource("a/b/D.class") is None

    def test_first_entry_wins(self, tmp_path: Path) -> None:
        first, second = tmp_path / "first", tmp_path / "second"
        _write_class(first, "C.class", b"one")
        _write_class(second, "C.class", b"two")
        assert Classpath.of(first, second).find_resource("C.class") == b"one"
        assert Classpath.of(second, first).find_resource("C.class") == b"two"

    def test_missing_entries_are_skipped(self, tmp_path: Path) -> None:
        _write_class(tmp_path / "real", "C.class", b"found")
        classpath = Classpath.of(tmp_path / "missing", tmp_path / "missing.jar", tmp_path / "real")
        assert classpath.find_resource("C.class") == b"found"

    def test_corrupt_jar_raises_unreadable(self, tmp_path: Path) -> None:
        jar = tmp_path / "broken.jar"
        jar.write_bytes(b"this is not a zip file")
        with pytest.raises(ArtifactError) as exc_info:
            Classpath.of(jar).find_resource("C.class")
        assert exc_info.value.code == ErrorCode.ARTIFACT_UNREADABLE
        assert exc_info.value.retryable
        assert "broken.jar" in exc_info.value.details["location"]


class TestLoaderArtifactSource:
    """LoaderArtifactSource picks the defining class path."""

    def test_is_artifact_source(self) -> None:
        assert isinstance(LoaderArtifactSource(), ArtifactSource)

    def test_reads_through_class_loader(self, tmp_path: Path) -> None:
        _write_class(tmp_path / "app", "a/C.class", b"app")
        _write_class(tmp_path / "boot", "a/C.class", b"boot")
        source = LoaderArtifactSource(Classpath.of(tmp_path / "boot"))
        assert source.read(JavaClass("a.C", loader=Classpath.of(tmp_path / "app"))) == b"app"

    def test_loaderless_class_uses_boot(self, tmp_path: Path) -> None:
        _write_class(tmp_path / "boot", "a/C.class", b"boot")
        source = LoaderArtifactSource(Classpath.of(tmp_path / "boot"))
        assert source.read(JavaClass("a.C")) == b"boot"
        assert source.classpath_for(JavaClass("a.C")) is source.boot

    def test_missing_class(self) -> None:
        assert LoaderArtifactSource().read(JavaClass("a.Missing")) is None


class TestArtifactCache:
    """ArtifactCache compute-if-absent semantics."""

    def test_builds_once(self) -> None:
        cache = ArtifactCache()
        calls: list[JavaClass] = []

        def build(cls: JavaClass) -> bytes:
            calls.append(cls)
            return b"region"

        cls = JavaClass("a.C")
        assert cache.scan_region(cls, build) == b"region"
        assert cache.scan_region(cls, build) == b"region"
        assert calls == [cls]

    def test_none_is_cached(self, artifacts) -> None:
        """A failed build is remembered, not retried."""
        cache = ArtifactCache()
        source = artifacts
        cls = JavaClass("a.C")
        assert cache.scan_region(cls, source.read) is None
        assert cache.scan_region(cls, source.read) is None
        assert source.reads["a.C"] == 1

    def test_line_tables_and_regions_are_separate(self) -> None:
        cache = ArtifactCache()
        cls = JavaClass("a.C")
        cache.line_table(cls, lambda _: {"k": 1})
        assert cache.scan_region(cls, lambda _: b"x") == b"x"
        assert len(cache) == 2

    def test_clear(self) -> None:
        cache = ArtifactCache()
        cache.scan_region(JavaClass("a.C"), lambda _: b"x")
        cache.clear()
        assert len(cache) == 0

    def test_classes_with_different_loaders_are_distinct(self, tmp_path: Path) -> None:
        cache = ArtifactCache()
        first = JavaClass("a.C", loader=Classpath.of(tmp_path / "one"))
        second = JavaClass("a.C", loader=Classpath.of(tmp_path / "two"))
        cache.scan_region(first, lambda _: b"one")
        assert cache.scan_region(second, lambda _: b"two") == b"two"
