"""Core domain models and the binary codec."""

from booklib.core.codec import (
    decode_from_text,
    encode_for_text,
    to_embeddable_uri,
)
from booklib.core.models import (
    DEFAULT_MIME_TYPE,
    FileType,
    Language,
    Level,
    Record,
    StoredPayload,
    generate_record_id,
    sort_records,
)

__all__ = [
    "DEFAULT_MIME_TYPE",
    "FileType",
    "Language",
    "Level",
    "Record",
    "StoredPayload",
    "decode_from_text",
    "encode_for_text",
    "generate_record_id",
    "sort_records",
    "to_embeddable_uri",
]
