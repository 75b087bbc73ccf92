"""
docscan/heic.py
---------------
HEIC/HEIF → JPEG so the rest of the pipeline only sees formats OpenCV reads.
Decoding goes through Pillow with the ``pillow-heif`` opener registered.
"""
from __future__ import annotations

import io
import logging
import re

from PIL import Image, UnidentifiedImageError
from pillow_heif import register_heif_opener

from .config import HEIC_JPEG_QUALITY
from .errors import NormalizationError
from .models import ImageFile

log = logging.getLogger(__name__)

register_heif_opener()

HEIC_MIME_TYPES = frozenset({
    "image/heic",
    "image/heif",
    "image/heic-sequence",
    "image/heif-sequence",
})

HEIC_EXTENSION_RE = re.compile(r"\.hei[cf]$", re.IGNORECASE)


def is_heic_file(file: ImageFile) -> bool:
    if file.content_type.lower() in HEIC_MIME_TYPES:
        return True
    return bool(HEIC_EXTENSION_RE.search(file.name))


def rename_to_jpeg(name: str) -> str:
    return HEIC_EXTENSION_RE.sub(".jpg", name)


def convert_heic_to_jpeg(file: ImageFile) -> ImageFile:
    """
    Decode the first frame of a HEIC/HEIF file and re-encode it as JPEG.

    Raises:
        NormalizationError: no usable frame could be decoded.
    """
    try:
        with Image.open(io.BytesIO(file.data)) as img:
            img.seek(0)
            frame = img.convert("RGB")
    except (UnidentifiedImageError, OSError, ValueError, EOFError, Image.DecompressionBombError) as exc:
        raise NormalizationError(f"Failed to convert HEIC file {file.name}") from exc

    if frame.width == 0 or frame.height == 0:
        raise NormalizationError(f"Failed to convert HEIC file {file.name}: empty frame")

    out = io.BytesIO()
    frame.save(out, format="JPEG", quality=HEIC_JPEG_QUALITY)
    log.info("Converted %s (%dx%d) to JPEG", file.name, frame.width, frame.height)
    return ImageFile(
        data=out.getvalue(),
        content_type="image/jpeg",
        name=rename_to_jpeg(file.name),
        origin=file.origin,
    )


# generic names used by the coordinator
is_niche_format = is_heic_file
normalize = convert_heic_to_jpeg
