"""Shared fixtures for core tests."""

from datetime import date

import pytest

from booklib.core.models import FileType, Language, Level, Record


@pytest.fixture
def sample_record():
    """A valid PDF record."""
    return Record(
        id="book-1700000000000-abcde",
        title="Minna no Nihongo",
        level=Level.N5,
        category="textbook",
        file_type=FileType.PDF,
        language=Language.JA,
        added_date=date(2024, 3, 1),
        author="3A Corporation",
        file_name="minna.pdf",
        file_size=1024,
    )


@pytest.fixture
def url_record(sample_record):
    """A bare reference link record."""
    import msgspec

    return msgspec.structs.replace(
        sample_record,
        id="book-1700000000001-fghij",
        file_type=FileType.URL,
        source_url="https://example.com/n5",
    )
