"""
docscan/encoding.py
-------------------
Byte → text helpers: base64 payloads and ``data:`` references.
"""
from __future__ import annotations

import base64

from .config import BASE64_CHUNK_SIZE
from .models import ImageFile


def bytes_to_base64(data: bytes, chunk_size: int = BASE64_CHUNK_SIZE) -> str:
    """
    Base64-encode *data* chunk by chunk.

    ``chunk_size`` is rounded down to a multiple of 3 so that only the final
    chunk can carry ``=`` padding; the joined result is identical to encoding
    the whole buffer at once.
    """
    step = max(3, chunk_size - chunk_size % 3)
    view = memoryview(data)
    return "".join(
        base64.b64encode(view[i:i + step]).decode("ascii")
        for i in range(0, len(view), step)
    )


def to_data_reference(file: ImageFile) -> str:
    # the space after the comma is part of the established format
    return f"data:{file.content_type};base64, {bytes_to_base64(file.data)}"
