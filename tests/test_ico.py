from __future__ import annotations

import io
import struct

import pytest
from PIL import Image

from favicon_kit.errors import FormatError
from favicon_kit.imaging.ico import pack
from favicon_kit.imaging.variants import encode_png


def _png(size: int) -> bytes:
    return encode_png(Image.new("RGBA", (size, size), (10, 20, 30, 255)))


def test_pack_empty_raises() -> None:
    with pytest.raises(FormatError):
        pack([])


def test_pack_rejects_unreadable_image() -> None:
    with pytest.raises(FormatError):
        pack([b"not an image at all"])


def test_pack_three_sizes() -> None:
    parts = [_png(16), _png(32), _png(48)]
    data = pack(parts)

    reserved, kind, count = struct.unpack_from("<HHH", data, 0)
    assert (reserved, kind, count) == (0, 1, 3)
    widths = [data[6 + 16 * i] for i in range(3)]
    assert widths == [16, 32, 48]

    icon = Image.open(io.BytesIO(data))
    assert icon.format == "ICO"
    assert set(icon.info["sizes"]) == {(16, 16), (32, 32), (48, 48)}


def test_pack_single_image_is_valid() -> None:
    data = pack([_png(16)])
    assert struct.unpack_from("<HHH", data, 0) == (0, 1, 1)
    assert Image.open(io.BytesIO(data)).size == (16, 16)


def test_pack_accepts_parts_in_any_order() -> None:
    data = pack([_png(48), _png(16)])
    icon = Image.open(io.BytesIO(data))
    assert set(icon.info["sizes"]) == {(16, 16), (48, 48)}
