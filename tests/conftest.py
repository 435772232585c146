"""Pytest configuration and fixtures for test suite."""

import sys
from collections.abc import Callable
from pathlib import Path

import pytest

# Add src directory to path for imports
SRC_PATH = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(SRC_PATH))

from doimeta.models import MetadataRecord  # noqa: E402
from doimeta.parse import CslJsonParser, UnixrefXmlParser  # noqa: E402

FIXTURES_DIR = Path(__file__).parent / "fixtures"
SCHEMAS_DIR = Path(__file__).parent.parent / "schemas"


@pytest.fixture(scope="session")
def fixtures_dir() -> Path:
    """Root directory of fixture documents."""
    return FIXTURES_DIR


@pytest.fixture(scope="session")
def schemas_dir() -> Path:
    """Directory holding the JSON schemas."""
    return SCHEMAS_DIR


@pytest.fixture
def csl_record() -> Callable[[str], MetadataRecord]:
    """Factory for records parsed from ``fixtures/csl/<name>.json``."""

    def _factory(name: str) -> MetadataRecord:
        source = (FIXTURES_DIR / "csl" / f"{name}.json").read_bytes()
        return MetadataRecord(CslJsonParser(source))

    return _factory


@pytest.fixture
def xml_record() -> Callable[[str], MetadataRecord]:
    """Factory for records parsed from ``fixtures/unixref/<name>.xml``."""

    def _factory(name: str) -> MetadataRecord:
        source = (FIXTURES_DIR / "unixref" / f"{name}.xml").read_bytes()
        return MetadataRecord(UnixrefXmlParser(source))

    return _factory
