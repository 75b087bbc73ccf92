"""
docscan/errors.py
-----------------
Exceptions raised by the scanning pipeline. Codec failures are re-raised as
one of these with the original exception chained as ``__cause__``.
"""
from __future__ import annotations


class DocScanError(Exception):
    """Base class for every failure surfaced by docscan."""


class DecodeError(DocScanError):
    """The input bytes are not a raster format we can decode."""


class TaintedSourceError(DecodeError):
    """Pixel access refused because the image comes from an untrusted origin.

    Fixing this is a configuration change (trust the origin), not a data fix.
    """

    def __init__(self, origin: str):
        self.origin = origin
        super().__init__(
            f"Pixel access blocked for image from untrusted origin {origin!r}. "
            "Add it to DOCSCAN_TRUSTED_ORIGINS if the source is allowed."
        )


class EncodeError(DocScanError):
    """Re-encoding the pixel buffer produced no output."""


class NormalizationError(DocScanError):
    """Converting a niche format (HEIC/HEIF) yielded no usable frame."""
