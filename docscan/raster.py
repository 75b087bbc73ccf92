"""
docscan/raster.py
-----------------
Encoded bytes ⇄ RGBA pixel grid, via OpenCV.

``decode`` wraps the input bytes in a ``SourceHandle`` owned by that single
call. The handle is released when its ``with`` block exits, so it is gone
before any decode error reaches the caller. Nothing is registered globally.

EXIF orientation is applied after decoding (tag read with Pillow), so the
grid has the upright size a viewer would show.
"""
from __future__ import annotations

import io
import logging
from typing import Iterable, Optional

import cv2
import numpy as np
from PIL import Image

from . import config
from .errors import DecodeError, EncodeError, TaintedSourceError
from .models import ImageFile, OutputType, PixelBuffer

log = logging.getLogger(__name__)

EXIF_ORIENTATION_TAG = 0x0112


# --------------------------------------------------------------------------- #
# per-call source handle
# --------------------------------------------------------------------------- #
class SourceHandle:
    """Owned view over the bytes being decoded. Release once; reuse is an error.

    ``release`` drops the handle's reference to the view; the underlying
    bytes stay owned by the ``ImageFile`` and are freed with it.
    """

    def __init__(self, data: bytes):
        self._view: Optional[memoryview] = memoryview(data)
        self.size = len(data)

    @property
    def released(self) -> bool:
        return self._view is None

    def array(self) -> np.ndarray:
        if self._view is None:
            raise RuntimeError("source handle already released")
        return np.frombuffer(self._view, dtype=np.uint8)

    def release(self) -> None:
        self._view = None

    def __enter__(self) -> "SourceHandle":
        return self

    def __exit__(self, *exc) -> None:
        self.release()


# --------------------------------------------------------------------------- #
# decode
# --------------------------------------------------------------------------- #
def _check_origin(file: ImageFile, trusted_origins: Optional[Iterable[str]]) -> None:
    if file.origin is None:
        return
    trusted = config.TRUSTED_ORIGINS if trusted_origins is None else trusted_origins
    if file.origin.rstrip("/") not in {o.rstrip("/") for o in trusted}:
        raise TaintedSourceError(file.origin)


def _exif_orientation(data: bytes) -> int:
    """EXIF orientation (1-8) of encoded *data*; 1 when absent or unreadable."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            orientation = img.getexif().get(EXIF_ORIENTATION_TAG, 1)
    except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as exc:
        log.debug("No EXIF orientation available: %s", exc)
        return 1
    return orientation if orientation in range(1, 9) else 1


def _apply_orientation(rgba: np.ndarray, orientation: int) -> np.ndarray:
    """Turn a stored-orientation grid upright, as ``ImageOps.exif_transpose`` does."""
    if orientation == 2:
        rgba = rgba[:, ::-1]
    elif orientation == 3:
        rgba = rgba[::-1, ::-1]
    elif orientation == 4:
        rgba = rgba[::-1]
    elif orientation == 5:
        rgba = rgba.transpose(1, 0, 2)
    elif orientation == 6:
        rgba = np.rot90(rgba, k=-1)
    elif orientation == 7:
        rgba = np.rot90(rgba, k=2).transpose(1, 0, 2)
    elif orientation == 8:
        rgba = np.rot90(rgba, k=1)
    return np.ascontiguousarray(rgba)


def _to_rgba8(img: np.ndarray) -> np.ndarray:
    """Normalise whatever imdecode returned to contiguous uint8 RGBA."""
    if img.dtype == np.uint16:
        img = (img >> 8).astype(np.uint8)
    elif img.dtype != np.uint8:
        img = np.clip(img.astype(np.float64) * 255.0, 0, 255).astype(np.uint8)

    if img.ndim == 3 and img.shape[2] == 1:
        img = img[:, :, 0]

    if img.ndim == 2:
        rgba = cv2.cvtColor(img, cv2.COLOR_GRAY2RGBA)
    elif img.shape[2] == 2:
        gray, alpha = img[:, :, 0], img[:, :, 1]
        rgba = np.dstack([gray, gray, gray, alpha])
    elif img.shape[2] == 3:
        rgba = cv2.cvtColor(img, cv2.COLOR_BGR2RGBA)
    else:
        rgba = cv2.cvtColor(img, cv2.COLOR_BGRA2RGBA)
    return np.ascontiguousarray(rgba)


def decode(file: ImageFile, trusted_origins: Optional[Iterable[str]] = None) -> PixelBuffer:
    """
    Decode *file* into an RGBA ``PixelBuffer`` at its natural (upright) size.

    Raises:
        TaintedSourceError: the file comes from an origin we may not read pixels from.
        DecodeError: the bytes are empty or not a format OpenCV can decode.
    """
    _check_origin(file, trusted_origins)

    with SourceHandle(file.data) as handle:
        if handle.size == 0:
            raise DecodeError(f"{file.name}: file is empty")
        try:
            img = cv2.imdecode(handle.array(), cv2.IMREAD_UNCHANGED)
        except cv2.error as exc:
            raise DecodeError(f"{file.name}: OpenCV could not decode image") from exc
        if img is None:
            raise DecodeError(
                f"{file.name}: unsupported or corrupt image data ({file.content_type})"
            )

    # IMREAD_UNCHANGED keeps alpha and depth but ignores EXIF orientation
    orientation = _exif_orientation(file.data)
    buffer = PixelBuffer.from_array(_apply_orientation(_to_rgba8(img), orientation))
    log.debug("Decoded %s → %dx%d (orientation %d)",
              file.name, buffer.width, buffer.height, orientation)
    return buffer


# --------------------------------------------------------------------------- #
# encode
# --------------------------------------------------------------------------- #
def _jpeg_quality(quality: Optional[float]) -> int:
    # canvas semantics: anything outside [0, 1] falls back to the default
    if quality is None or not 0.0 <= quality <= 1.0:
        quality = config.DEFAULT_JPEG_QUALITY
    return int(round(quality * 100))


def encode(
    buffer: PixelBuffer,
    content_type: str | OutputType = config.DEFAULT_OUTPUT_TYPE,
    quality: Optional[float] = None,
) -> ImageFile:
    """
    Serialise *buffer* as PNG or JPEG. ``quality`` (0-1) only affects JPEG.

    Raises:
        ValueError: content type is neither PNG nor JPEG.
        EncodeError: OpenCV produced no output.
    """
    kind = OutputType.parse(content_type)
    try:
        if kind.lossy:
            bgr = cv2.cvtColor(buffer.data, cv2.COLOR_RGBA2BGR)
            ok, out = cv2.imencode(
                kind.extension, bgr, [cv2.IMWRITE_JPEG_QUALITY, _jpeg_quality(quality)]
            )
        else:
            bgra = cv2.cvtColor(buffer.data, cv2.COLOR_RGBA2BGRA)
            ok, out = cv2.imencode(kind.extension, bgra)
    except cv2.error as exc:
        raise EncodeError(f"Failed to encode {buffer.width}x{buffer.height} image as {kind.value}") from exc

    if not ok or out is None or out.size == 0:
        raise EncodeError(f"Encoding as {kind.value} produced no output")

    log.debug("Encoded %dx%d as %s (%d bytes)", buffer.width, buffer.height, kind.value, out.size)
    return ImageFile(data=out.tobytes(), content_type=kind.value, name=f"image{kind.extension}")
