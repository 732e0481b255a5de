from __future__ import annotations

import io

import pytest
from PIL import Image

from favicon_kit.errors import ConfigError
from favicon_kit.imaging.variants import (
    FailureRecord,
    VariantGenerator,
    VariantRequest,
    open_source,
    validate_source,
)


def test_open_source_requires_path() -> None:
    with pytest.raises(ConfigError, match="Missing"):
        open_source(None)


def test_open_source_missing_file(tmp_path) -> None:
    with pytest.raises(ConfigError, match="does not exist"):
        open_source(tmp_path / "nope.png")


def test_open_source_undecodable(tmp_path) -> None:
    path = tmp_path / "broken.png"
    path.write_bytes(b"not an image")
    with pytest.raises(ConfigError, match="could not be decoded"):
        open_source(path)


def test_validate_rejects_non_square(make_source) -> None:
    source = open_source(make_source(100, 200))
    with pytest.raises(ConfigError, match="square"):
        validate_source(source)


def test_validate_rejects_small_source(make_source) -> None:
    source = open_source(make_source(16))
    with pytest.raises(ConfigError, match="at least 32x32"):
        validate_source(source)


def test_produce_resizes_to_png(make_source) -> None:
    source = open_source(make_source(64))
    validate_source(source)
    png = VariantGenerator(source).produce(VariantRequest(32, "ico-part", "favicon.ico (size 32)"))

    assert isinstance(png, bytes)
    image = Image.open(io.BytesIO(png))
    assert image.format == "PNG"
    assert image.size == (32, 32)


def test_produce_never_upscales(make_source) -> None:
    source = open_source(make_source(40))
    result = VariantGenerator(source).produce(VariantRequest(48, "ico-part", "favicon.ico (size 48)"))
    assert result == FailureRecord(size=48, name="favicon.ico (size 48)")


def test_produce_many_keeps_request_order(make_source) -> None:
    source = open_source(make_source(64))
    requests = [
        VariantRequest(16, "ico-part", "a"),
        VariantRequest(180, "apple-touch-icon", "b"),
        VariantRequest(48, "ico-part", "c"),
    ]
    results = VariantGenerator(source, max_workers=3).produce_many(requests)

    assert Image.open(io.BytesIO(results[0])).size == (16, 16)
    assert results[1] == FailureRecord(size=180, name="b")
    assert Image.open(io.BytesIO(results[2])).size == (48, 48)


def test_open_source_oversized_image_is_config_error(make_source, monkeypatch) -> None:
    path = make_source(64)
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
    with pytest.raises(ConfigError, match="could not be decoded"):
        open_source(path)
