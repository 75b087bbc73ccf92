"""
docscan/config.py  –  central configuration & logging

Everything tunable lives here:

1.  Luminosity weights and the fixed black/white threshold
2.  Codec defaults (JPEG quality, HEIC → JPEG quality)
3.  Environment driven settings (trusted origins, output directory, log level)
"""

from __future__ import annotations

import logging
import os
import pathlib as _pl
from typing import FrozenSet, Tuple

# --------------------------------------------------------------------------- #
# I/O paths – CLI artefacts go to ./outputs unless DOCSCAN_OUT_DIR is set
# --------------------------------------------------------------------------- #
OUT_DIR = _pl.Path(os.getenv("DOCSCAN_OUT_DIR", "outputs"))
SUMMARY_FILENAME_PREFIX: str = "summary_"
IMAGE_GLOB_PATTERNS: Tuple[str, ...] = (
    "*.png", "*.jpg", "*.jpeg", "*.bmp", "*.webp", "*.tif", "*.tiff", "*.heic", "*.heif",
)

# --------------------------------------------------------------------------- #
# Binarisation
# --------------------------------------------------------------------------- #
# ITU-R BT.601 luma weights, applied in R, G, B order
LUMA_WEIGHTS: Tuple[float, float, float] = (0.299, 0.587, 0.114)
THRESHOLD: int = 150                # strictly greater → white, otherwise black

OUTPUT_PREFIX: str = "scanned_"
OUTPUT_EXTENSION: str = ".png"      # kept for every output type, see DESIGN.md
FALLBACK_BASENAME: str = "document"

# ---- Encoding -------------------------------------------------------------- #
DEFAULT_OUTPUT_TYPE: str = "image/png"
DEFAULT_JPEG_QUALITY: float = 0.92  # same default as a browser canvas export
HEIC_JPEG_QUALITY: int = 92         # Pillow scale (1-95)

# multiple of 3 so every chunk encodes without padding
BASE64_CHUNK_SIZE: int = 3 * 1024 * 1024

# --------------------------------------------------------------------------- #
# Pixel access policy
# --------------------------------------------------------------------------- #
def _parse_origins(raw: str) -> FrozenSet[str]:
    return frozenset(o.strip().rstrip("/") for o in raw.split(",") if o.strip())


TRUSTED_ORIGINS: FrozenSet[str] = _parse_origins(os.getenv("DOCSCAN_TRUSTED_ORIGINS", ""))

# --------------------------------------------------------------------------- #
# Logging
# --------------------------------------------------------------------------- #
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def setup_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
    )


setup_logging()
