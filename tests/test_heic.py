from __future__ import annotations

import io

import pytest
from PIL import Image

from docscan import heic
from docscan.errors import NormalizationError
from docscan.models import ImageFile


def _file(content_type="image/jpeg", name="photo.jpg", data=b"") -> ImageFile:
    return ImageFile(data=data, content_type=content_type, name=name)


@pytest.mark.parametrize(
    "content_type, name, expected",
    [
        ("image/heic", "photo.jpg", True),
        ("IMAGE/HEIF", "photo", True),
        ("image/heic-sequence", "burst", True),
        ("application/octet-stream", "IMG_0001.HEIC", True),
        ("", "IMG_0001.heif", True),
        ("image/jpeg", "photo.jpg", False),
        ("image/png", "heic.png", False),
    ],
)
def test_is_heic_file(content_type, name, expected):
    assert heic.is_heic_file(_file(content_type, name)) is expected


def test_rename_to_jpeg():
    assert heic.rename_to_jpeg("IMG_0001.HEIC") == "IMG_0001.jpg"
    assert heic.rename_to_jpeg("a.heic.heif") == "a.heic.jpg"
    assert heic.rename_to_jpeg("photo") == "photo"


def test_garbage_raises_normalization_error():
    with pytest.raises(NormalizationError) as info:
        heic.convert_heic_to_jpeg(_file("image/heic", "x.heic", b"not a heic"))
    assert info.value.__cause__ is not None


@pytest.fixture
def heic_bytes() -> bytes:
    buf = io.BytesIO()
    try:
        Image.new("RGB", (16, 10), (200, 30, 30)).save(buf, format="HEIF", quality=90)
    except (KeyError, OSError, ValueError, RuntimeError) as exc:
        pytest.skip(f"HEIF encoder unavailable: {exc}")
    return buf.getvalue()


def test_convert_heic_to_jpeg(heic_bytes):
    src = ImageFile(data=heic_bytes, content_type="image/heic", name="IMG_7.heic", origin="https://a.example")
    out = heic.convert_heic_to_jpeg(src)

    assert out.content_type == "image/jpeg"
    assert out.name == "IMG_7.jpg"
    assert out.origin == "https://a.example"
    with Image.open(io.BytesIO(out.data)) as img:
        assert img.format == "JPEG"
        assert img.size == (16, 10)


def test_oversized_image_raises_normalization_error(monkeypatch):
    def too_big(*args, **kwargs):
        raise Image.DecompressionBombError("image size exceeds limit")

    monkeypatch.setattr(heic.Image, "open", too_big)
    with pytest.raises(NormalizationError) as info:
        heic.convert_heic_to_jpeg(_file("image/heic", "huge.heic", b"...."))
    assert isinstance(info.value.__cause__, Image.DecompressionBombError)
