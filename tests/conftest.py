from __future__ import annotations

import cv2
import numpy as np
import pytest

from docscan.models import ImageFile


def encode_rgba(rgba: np.ndarray, ext: str = ".png") -> bytes:
    """Encode an RGBA uint8 array the way a caller's file on disk would look."""
    if ext == ".png":
        img = cv2.cvtColor(rgba, cv2.COLOR_RGBA2BGRA)
    else:
        img = cv2.cvtColor(rgba, cv2.COLOR_RGBA2BGR)
    ok, buf = cv2.imencode(ext, img)
    assert ok
    return buf.tobytes()


@pytest.fixture
def make_png():
    def _make(rgba, name="page.png", origin=None) -> ImageFile:
        rgba = np.asarray(rgba, dtype=np.uint8)
        return ImageFile(data=encode_rgba(rgba), content_type="image/png", name=name, origin=origin)
    return _make


@pytest.fixture
def photo_rgba() -> np.ndarray:
    rng = np.random.default_rng(1234)
    rgba = rng.integers(0, 256, size=(37, 53, 4), dtype=np.uint8)
    rgba[..., 3] = rng.integers(1, 256, size=(37, 53), dtype=np.uint8)
    return rgba
