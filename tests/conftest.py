"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import sys
from collections import Counter
from collections.abc import Generator
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local declorder package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of declorder modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("declorder"):
        del sys.modules[module_name]

from declorder.config.models import DeclOrderConfig, LineTableConfig  # noqa: E402
from declorder.order import JavaClass, reset_default_coordinator  # noqa: E402


class MemoryArtifactSource:
    """In-memory class files keyed by binary class name; counts reads."""

    def __init__(self, classes: dict[str, bytes] | None = None) -> None:
        self.classes = dict(classes or {})
        self.reads: Counter[str] = Counter()

    def read(self, cls: JavaClass) -> bytes | None:
        self.reads[cls.name] += 1
        return self.classes.get(cls.name)


@pytest.fixture
def artifacts() -> MemoryArtifactSource:
    return MemoryArtifactSource()


@pytest.fixture
def classfile_config() -> DeclOrderConfig:
    """Config that reads line tables from class files (never spawns javap)."""
    return DeclOrderConfig(line_table=LineTableConfig(mode="classfile"))


@pytest.fixture
def byte_scan_config() -> DeclOrderConfig:
    """Config with the line table disabled: byte scan only."""
    return DeclOrderConfig(line_table=LineTableConfig(mode="off"))


@pytest.fixture(autouse=True)
def _isolate_default_coordinator() -> Generator[None, None, None]:
    reset_default_coordinator()
    yield
    reset_default_coordinator()
