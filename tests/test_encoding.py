from __future__ import annotations

import base64
import re

import pytest

from docscan.encoding import bytes_to_base64, to_data_reference
from docscan.models import ImageFile


@pytest.mark.parametrize("length", [0, 1, 2, 3, 10, 100])
@pytest.mark.parametrize("chunk_size", [1, 4, 7, 64])
def test_chunked_encoding_matches_single_pass(length, chunk_size):
    data = bytes(range(256))[:length]
    assert bytes_to_base64(data, chunk_size) == base64.b64encode(data).decode("ascii")


def test_large_payload():
    data = bytes(range(256)) * (24 * 1024 * 1024 // 256)
    assert bytes_to_base64(data) == base64.b64encode(data).decode("ascii")


def test_data_reference_format():
    file = ImageFile(data=b"\x89PNG\x00\xff", content_type="image/png", name="a.png")
    url = to_data_reference(file)
    assert url == "data:image/png;base64, iVBORwD/"
    assert re.match(r"^data:[^;]*;base64, [A-Za-z0-9+/=]*$", url)


def test_data_reference_empty_file():
    file = ImageFile(data=b"", content_type="image/jpeg", name="a.jpg")
    assert to_data_reference(file) == "data:image/jpeg;base64, "
