"""
docscan/models.py
-----------------
Plain data carried through the pipeline.

    ImageFile        – immutable bytes + content type + name (+ origin)
    PixelBuffer      – H×W×4 uint8 RGBA grid, lives only inside one call
    OutputType       – the two export formats we support
    ProcessingResult – output file plus its data reference
"""
from __future__ import annotations

import enum
import mimetypes
import pathlib
from dataclasses import dataclass
from typing import Optional, Union

import numpy as np

# mimetypes does not know these on most platforms
_EXTRA_TYPES = {
    ".heic": "image/heic",
    ".heif": "image/heif",
    ".webp": "image/webp",
}


@dataclass(frozen=True)
class ImageFile:
    """An encoded image as handed to (or returned by) the pipeline.

    Fields:
        data: raw encoded bytes.
        content_type: declared MIME type, e.g. "image/png".
        name: file name including extension.
        origin: where the bytes came from; None for local content.
    """
    data: bytes
    content_type: str
    name: str
    origin: Optional[str] = None

    @classmethod
    def from_path(cls, path: Union[str, pathlib.Path], origin: Optional[str] = None) -> "ImageFile":
        path = pathlib.Path(path)
        content_type = _EXTRA_TYPES.get(path.suffix.lower())
        if content_type is None:
            content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        return cls(data=path.read_bytes(), content_type=content_type, name=path.name, origin=origin)

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class PixelBuffer:
    """RGBA pixel grid, ``data.shape == (height, width, 4)`` and dtype uint8."""
    width: int
    height: int
    data: np.ndarray

    def __post_init__(self) -> None:
        if self.data.dtype != np.uint8:
            raise ValueError(f"pixel data must be uint8, got {self.data.dtype}")
        if self.data.shape != (self.height, self.width, 4):
            raise ValueError(
                f"pixel data shape {self.data.shape} does not match "
                f"{self.width}x{self.height} RGBA"
            )

    @classmethod
    def from_array(cls, rgba: np.ndarray) -> "PixelBuffer":
        height, width = rgba.shape[:2]
        return cls(width=width, height=height, data=rgba)


class OutputType(enum.Enum):
    PNG = "image/png"
    JPEG = "image/jpeg"

    @classmethod
    def parse(cls, value: Union[str, "OutputType"]) -> "OutputType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(
                f"unsupported output type {value!r}; expected 'image/png' or 'image/jpeg'"
            ) from None

    @property
    def extension(self) -> str:
        return ".png" if self is OutputType.PNG else ".jpg"

    @property
    def lossy(self) -> bool:
        """Only lossy formats take a quality setting."""
        return self is OutputType.JPEG


@dataclass(frozen=True)
class ProcessingResult:
    file: ImageFile
    url: str
