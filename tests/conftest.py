from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest
from PIL import Image, ImageDraw

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

for path in (ROOT, SRC):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from tests.helpers import star_contour  # noqa: E402


@pytest.fixture()
def star() -> np.ndarray:
    return star_contour()


@pytest.fixture()
def stencil_image(tmp_path: Path) -> Path:
    """Dark five-point star on a light background."""

    size = 200
    points = star_contour(radius=80.0, center=(100.0, 100.0))
    image = Image.new("L", (size, size), color=250)
    ImageDraw.Draw(image).polygon([tuple(map(float, p)) for p in points], fill=10)
    path = tmp_path / "star.png"
    image.save(path)
    return path
