from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
from PIL import Image


@pytest.fixture
def make_source(tmp_path: Path):
    def _make(width: int, height: int | None = None, name: str = "favicon.png") -> Path:
        height = width if height is None else height
        pixels = np.zeros((height, width, 4), dtype=np.uint8)
        pixels[..., 0] = 200
        pixels[..., 3] = 255
        pixels[: height // 2, : width // 2, 2] = 180
        path = tmp_path / name
        Image.fromarray(pixels).save(path)
        return path

    return _make
