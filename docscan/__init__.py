# docscan/__init__.py
"""
Document "scan" effect: grayscale + fixed-threshold black/white, via OpenCV.
"""

from . import config
from .binarize import binarize
from .encoding import to_data_reference
from .errors import DecodeError, DocScanError, EncodeError, NormalizationError, TaintedSourceError
from .models import ImageFile, OutputType, PixelBuffer, ProcessingResult
from .scanner import scan_document
from .cli import main as run_cli

__all__ = [
    "config",
    "binarize",
    "scan_document",
    "to_data_reference",
    "run_cli",
    "ImageFile",
    "OutputType",
    "PixelBuffer",
    "ProcessingResult",
    "DocScanError",
    "DecodeError",
    "TaintedSourceError",
    "EncodeError",
    "NormalizationError",
]

import logging
log = logging.getLogger(__name__)
log.debug("docscan package loaded")
