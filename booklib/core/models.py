"""Core data models for catalog records and their payloads.

A catalog holds two related collections: records (descriptive metadata for a
user-owned document) and payloads (the document bytes, one per record at
most). Records are immutable msgspec structs; updates produce a new record
with the merged fields.

Key components:
- Record: Catalog entry with descriptive metadata and an immutable id/date
- StoredPayload: Binary content owned by a record
- generate_record_id: Time-prefixed identifier with a random suffix
- sort_records: Newest-first ordering shared by every backend
"""

import random
import string
import time
from collections.abc import Iterable, Mapping
from datetime import date
from enum import Enum
from typing import Any

import msgspec

DEFAULT_MIME_TYPE = "application/pdf"

# Fields callers may never change after creation.
IMMUTABLE_FIELDS = frozenset({"id", "added_date"})

_ID_ALPHABET = string.digits + string.ascii_lowercase


class Level(Enum):
    """Study level a document targets."""

    N5 = "N5"
    N4 = "N4"
    N3 = "N3"
    N2 = "N2"
    N1 = "N1"
    JFT = "JFT"
    ALL = "SEMUA"


class FileType(Enum):
    """Content type of a record.

    ``URL`` marks a bare reference link: such records never own a payload.
    """

    PDF = "PDF"
    URL = "URL"
    IMAGE = "IMAGE"
    OTHER = "LAINNYA"


class Language(Enum):
    """Language of the document."""

    ID = "ID"
    JA = "JA"
    EN = "EN"
    BILINGUAL = "BILINGUAL"


class Record(msgspec.Struct, frozen=True, kw_only=True):
    """A catalog entry.

    ``id`` and ``added_date`` are assigned at creation and never change;
    every other field is descriptive metadata supplied by the caller.
    """

    id: str
    title: str
    level: Level
    category: str
    file_type: FileType
    language: Language
    added_date: date
    author: str = ""
    description: str = ""
    cover_emoji: str = ""
    cover_color: str = ""
    source_url: str | None = None
    file_name: str | None = None
    file_size: int | None = None
    file_mime_type: str | None = None
    total_pages: int | None = None
    notes: str | None = None

    @property
    def has_payload(self) -> bool:
        """True unless the record is a bare reference link."""
        return self.file_type is not FileType.URL

    @property
    def payload_mime_type(self) -> str:
        """MIME type used for this record's payload."""
        return self.file_mime_type or DEFAULT_MIME_TYPE

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-compatible dictionary."""
        return msgspec.to_builtins(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Record":
        """Build a validated record from a mapping of field names to values."""
        return msgspec.convert(msgspec.to_builtins(dict(data)), cls)

    def merged(self, updates: Mapping[str, Any]) -> "Record":
        """Return a copy with ``updates`` applied.

        ``id`` and ``added_date`` are kept even when present in ``updates``.
        """
        data = self.to_dict()
        changes = {k: v for k, v in updates.items() if k not in IMMUTABLE_FIELDS}
        data.update(changes)
        return Record.from_dict(data)


class StoredPayload(msgspec.Struct, frozen=True):
    """Binary content associated with a record."""

    id: str
    data: bytes
    mime_type: str = DEFAULT_MIME_TYPE


def generate_record_id() -> str:
    """Generate a record id: ``book-<epoch millis>-<5 base36 chars>``."""
    millis = int(time.time() * 1000)
    suffix = "".join(random.choices(_ID_ALPHABET, k=5))
    return f"book-{millis}-{suffix}"


def sort_records(records: Iterable[Record]) -> list[Record]:
    """Sort records newest first by ``added_date``.

    The sort is stable, so records added on the same day keep their
    relative order.
    """
    return sorted(records, key=lambda r: r.added_date, reverse=True)


_records_decoder = msgspec.json.Decoder(list[Record])
_encoder = msgspec.json.Encoder()


def encode_records(records: Iterable[Record]) -> str:
    """Serialize a record collection as a JSON array."""
    return _encoder.encode(list(records)).decode("utf-8")


def decode_records(text: str | bytes) -> list[Record]:
    """Parse a JSON array of records."""
    return _records_decoder.decode(text)
