"""Pytest configuration and fixtures."""

import os

import pytest


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch, tmp_path):
    """Isolate environment variables and config lookups for each test.

    Config and data paths point into a per-test directory so no test reads
    or writes the real user locations.
    """
    original_env = os.environ.copy()
    for name in ("BOOKLIB_DATA_DIR", "BOOKLIB_NATIVE_HOST", "BOOKLIB_FLAT_QUOTA"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg-data"))
    monkeypatch.chdir(tmp_path)

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def sample_metadata():
    """Metadata for a PDF record, without id and date."""
    return {
        "title": "T",
        "level": "N5",
        "category": "grammar",
        "file_type": "PDF",
        "language": "JA",
        "cover_emoji": "📘",
        "cover_color": "#fff",
        "description": "d",
    }


@pytest.fixture
def url_metadata(sample_metadata):
    """Metadata for a bare reference link."""
    return {**sample_metadata, "file_type": "URL", "source_url": "https://x"}


@pytest.fixture
def pdf_bytes():
    """The PDF magic number."""
    return bytes([0x25, 0x50, 0x44, 0x46])
