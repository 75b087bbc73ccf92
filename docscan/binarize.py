"""
docscan/binarize.py
===================

"Scanned document" effect for a single image:

    decode  →  luminosity  →  fixed threshold  →  re-encode  →  data reference

Every pixel ends up pure black or pure white; alpha is passed through.
The weights and the threshold are fixed constants from ``config``.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

import numpy as np

from . import raster
from .config import FALLBACK_BASENAME, LUMA_WEIGHTS, OUTPUT_EXTENSION, OUTPUT_PREFIX, THRESHOLD
from .encoding import to_data_reference
from .models import ImageFile, OutputType, PixelBuffer, ProcessingResult

log = logging.getLogger(__name__)


# --------------------------------------------------------------------------- #
# pixel maths
# --------------------------------------------------------------------------- #
def luminosity(rgb: np.ndarray) -> np.ndarray:
    """
    Perceptual brightness of ``rgb[..., 0:3]`` as float64.

    Evaluated left to right, ``(wr*R + wg*G) + wb*B``; values that land
    exactly on the threshold depend on this order.
    """
    wr, wg, wb = LUMA_WEIGHTS
    rgb = rgb.astype(np.float64, copy=False)
    return wr * rgb[..., 0] + wg * rgb[..., 1] + wb * rgb[..., 2]


def classify(luma: np.ndarray, threshold: float = THRESHOLD) -> np.ndarray:
    """255 where luma is strictly above *threshold*, 0 elsewhere."""
    return np.where(luma > threshold, 255, 0).astype(np.uint8)


def binarize_pixels(buffer: PixelBuffer) -> PixelBuffer:
    """Return a new buffer with R = G = B ∈ {0, 255}; alpha copied unchanged."""
    out = buffer.data.copy()
    levels = classify(luminosity(buffer.data[..., :3]))
    out[..., 0] = levels
    out[..., 1] = levels
    out[..., 2] = levels
    return PixelBuffer(width=buffer.width, height=buffer.height, data=out)


# --------------------------------------------------------------------------- #
# naming
# --------------------------------------------------------------------------- #
def output_name(input_name: str) -> str:
    """
    ``photo.final.jpg`` → ``scanned_photo.png``; ``.hidden`` → ``scanned_document.png``.

    The extension is always ``.png``, whatever the output type.
    """
    base = input_name.split(".")[0] or FALLBACK_BASENAME
    return f"{OUTPUT_PREFIX}{base}{OUTPUT_EXTENSION}"


# --------------------------------------------------------------------------- #
# pipeline
# --------------------------------------------------------------------------- #
def binarize(
    image_file: ImageFile,
    output_type: str | OutputType = OutputType.PNG,
    quality: Optional[float] = None,
) -> ProcessingResult:
    """
    Full binarisation pipeline for one image.

    Args:
        image_file: encoded source image (PNG, JPEG, WebP, BMP, TIFF ...).
        output_type: ``"image/png"`` (default) or ``"image/jpeg"``.
        quality: JPEG quality in [0, 1]; ignored for PNG.

    Returns:
        ProcessingResult with the encoded output file and its data reference.

    Raises:
        ValueError: unsupported ``output_type``.
        DecodeError / TaintedSourceError: the source could not be read.
        EncodeError: the result could not be re-encoded.
    """
    kind = OutputType.parse(output_type)
    log.info("Binarising %s (%s, %d bytes) → %s",
             image_file.name, image_file.content_type, image_file.size, kind.value)

    pixels = raster.decode(image_file)
    binary = binarize_pixels(pixels)
    encoded = raster.encode(binary, kind, quality if kind.lossy else None)

    out_file = replace(encoded, name=output_name(image_file.name))
    url = to_data_reference(out_file)

    log.debug("Binarised %s → %s (%dx%d, %d bytes)",
              image_file.name, out_file.name, binary.width, binary.height, out_file.size)
    return ProcessingResult(file=out_file, url=url)
