"""Binary codec for moving payload bytes through text-only storage.

Payloads travel through backends that cannot hold raw binary (the native
file area takes text content, the embeddable URI is a string). The codec
converts between bytes and standard base64 text, and builds ``data:`` URIs
that carry both the MIME type and the encoded bytes.
"""

import base64
import binascii

# Multiple of 3 so partial encodings concatenate without inner padding.
ENCODE_CHUNK_SIZE = 3 * 2730


def encode_for_text(data: bytes) -> str:
    """Encode bytes as base64 text, processing the input in fixed-size chunks."""
    view = memoryview(data)
    parts = []
    for start in range(0, len(view), ENCODE_CHUNK_SIZE):
        chunk = view[start : start + ENCODE_CHUNK_SIZE]
        parts.append(base64.b64encode(chunk).decode("ascii"))
    return "".join(parts)


def decode_from_text(text: str) -> bytes:
    """Decode base64 text back into bytes.

    Accepts either a bare encoded string or a URI-prefixed form such as
    ``data:application/pdf;base64,JVBERg==``; everything up to and including
    the first comma is discarded.

    Raises:
        ValueError: If the text is not valid base64.
    """
    if "," in text:
        text = text.partition(",")[2]
    try:
        return base64.b64decode(text.strip(), validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e


def to_embeddable_uri(data: bytes, mime_type: str) -> str:
    """Build a self-contained ``data:`` URI embedding the MIME type and bytes."""
    return f"data:{mime_type};base64,{encode_for_text(data)}"
