"""
docscan/scanner.py
==================

Coordinator for a *single* document: loads the input, converts HEIC/HEIF to
JPEG when needed, runs the binariser and optionally writes the result to disk.
"""

from __future__ import annotations

import logging
import pathlib
from typing import Optional, Union

from . import heic
from .binarize import binarize
from .models import ImageFile, OutputType, ProcessingResult

log = logging.getLogger(__name__)

Source = Union[ImageFile, str, pathlib.Path]


def _load(source: Source) -> ImageFile:
    if isinstance(source, ImageFile):
        return source
    return ImageFile.from_path(source)


def scan_document(
    source: Source,
    output_type: Union[str, OutputType] = OutputType.PNG,
    quality: Optional[float] = None,
    out_dir: Optional[Union[str, pathlib.Path]] = None,
) -> ProcessingResult:
    """
    Produce the "scanned" black/white version of *source*.

    Returns:
        ProcessingResult – output file and its ``data:`` reference.

    Errors from normalisation, decoding and encoding propagate unchanged.
    """
    image_file = _load(source)

    if heic.is_niche_format(image_file):
        log.info("%s is HEIC/HEIF – converting to JPEG first", image_file.name)
        image_file = heic.normalize(image_file)

    result = binarize(image_file, output_type, quality)

    if out_dir is not None:
        target_dir = pathlib.Path(out_dir)
        target_dir.mkdir(parents=True, exist_ok=True)
        target = target_dir / result.file.name
        target.write_bytes(result.file.data)
        log.debug("Wrote %s", target)

    return result
