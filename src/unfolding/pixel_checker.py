"""Rasterized area-overlap ratio for flattened nets."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import cv2
import numpy as np

from .interfaces import FlatNet

DEFAULT_RESOLUTION = 256
_MARGIN = 2


def _resolution_from(config: Any, default: int) -> int:
    if isinstance(config, Mapping):
        value = config.get("pixel_resolution")
    else:
        value = getattr(config, "pixel_resolution", None)
    return int(value) if value else default


class PixelOverlapChecker:
    """Estimate how much of a net's area is covered by more than one face.

    Faces are filled on a canvas whose long side spans ``resolution`` pixels.
    Each face's own outline pixels are cleared before accumulation so that
    faces sharing an edge do not register as overlapping.
    """

    def __init__(self, resolution: int = DEFAULT_RESOLUTION) -> None:
        if resolution < 8:
            raise ValueError("resolution must be at least 8 pixels.")
        self.resolution = int(resolution)

    def rasterize(self, net: FlatNet, resolution: int | None = None) -> np.ndarray:
        """Per-pixel face coverage counts."""

        resolution = resolution or self.resolution
        points = net.points_2d()
        if len(points) == 0 or not net.faces:
            return np.zeros((1, 1), dtype=np.int32)

        lower = points.min(axis=0)
        extent = float((points.max(axis=0) - lower).max())
        scale = (resolution - 2 * _MARGIN) / extent if extent > 0 else 1.0
        pixels = np.round((points - lower) * scale).astype(np.int32) + _MARGIN
        width = int(pixels[:, 0].max()) + _MARGIN + 1
        height = int(pixels[:, 1].max()) + _MARGIN + 1

        coverage = np.zeros((height, width), dtype=np.int32)
        for face in net.faces:
            polygon = pixels[list(face)]
            x0, y0 = polygon.min(axis=0)
            x1, y1 = polygon.max(axis=0)
            local = polygon - (x0, y0)
            mask = np.zeros((y1 - y0 + 1, x1 - x0 + 1), dtype=np.uint8)
            cv2.fillPoly(mask, [local.reshape(-1, 1, 2)], 1)
            cv2.polylines(mask, [local.reshape(-1, 1, 2)], True, 0, thickness=1)
            coverage[y0 : y1 + 1, x0 : x1 + 1] += mask
        return coverage

    def overlap_ratio(self, net: FlatNet, config: Any = None) -> float:
        coverage = self.rasterize(net, _resolution_from(config, self.resolution))
        covered = int(np.count_nonzero(coverage))
        if covered == 0:
            return 0.0
        return float(np.count_nonzero(coverage > 1)) / float(covered)


__all__ = ["DEFAULT_RESOLUTION", "PixelOverlapChecker"]
