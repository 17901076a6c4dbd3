"""Render a stencil-to-net curve match as an image."""

from __future__ import annotations

import logging
from pathlib import Path

import cv2
import numpy as np

from curves.alignment import align_segments
from curves.segment_db import CurveSegment, CurveSegmentDatabase

logger = logging.getLogger(__name__)

# BGR
TARGET_COLOR = (160, 160, 160)
TARGET_SEGMENT_COLOR = (200, 90, 20)
SOURCE_COLOR = (40, 40, 220)
SOURCE_SEGMENT_COLOR = (30, 170, 30)


def _to_canvas(point_sets: list[np.ndarray], size: int, margin: int) -> list[np.ndarray]:
    stacked = np.vstack([points for points in point_sets if len(points)])
    lower = stacked.min(axis=0)
    extent = float((stacked.max(axis=0) - lower).max()) or 1.0
    scale = (size - 2 * margin) / extent
    converted = []
    for points in point_sets:
        pixels = (points - lower) * scale + margin
        # Contours are y-up; image rows grow downward.
        pixels[:, 1] = (size - 1) - pixels[:, 1]
        converted.append(np.round(pixels).astype(np.int32).reshape(-1, 1, 2))
    return converted


def draw_matching(
    target: CurveSegmentDatabase,
    target_segment: CurveSegment,
    source: CurveSegmentDatabase,
    source_segment: CurveSegment,
    *,
    error: float | None = None,
    size: int = 512,
    margin: int = 24,
) -> np.ndarray:
    """Return a BGR image of the source net aligned onto the target stencil."""

    transform = align_segments(source, source_segment, target, target_segment)
    source_outline = transform.apply(source.contour)
    source_arc = transform.apply(source.segment_points(source_segment))
    target_arc = target.segment_points(target_segment)

    target_px, target_arc_px, source_px, source_arc_px = _to_canvas(
        [target.contour, target_arc, source_outline, source_arc], size, margin
    )

    canvas = np.full((size, size, 3), 255, dtype=np.uint8)
    cv2.polylines(canvas, [target_px], True, TARGET_COLOR, 1, cv2.LINE_AA)
    cv2.polylines(canvas, [source_px], True, SOURCE_COLOR, 1, cv2.LINE_AA)
    cv2.polylines(canvas, [target_arc_px], False, TARGET_SEGMENT_COLOR, 3, cv2.LINE_AA)
    cv2.polylines(canvas, [source_arc_px], False, SOURCE_SEGMENT_COLOR, 2, cv2.LINE_AA)
    if error is not None:
        cv2.putText(
            canvas,
            f"err={error:g}",
            (8, 20),
            cv2.FONT_HERSHEY_SIMPLEX,
            0.5,
            (0, 0, 0),
            1,
            cv2.LINE_AA,
        )
    return canvas


def render_matching(
    path: str | Path,
    target: CurveSegmentDatabase,
    target_segment: CurveSegment,
    source: CurveSegmentDatabase,
    source_segment: CurveSegment,
    *,
    error: float | None = None,
    size: int = 512,
) -> Path | None:
    """Write :func:`draw_matching` output to ``path``; returns ``None`` on failure."""

    output = Path(path)
    try:
        image = draw_matching(target, target_segment, source, source_segment, error=error, size=size)
        output.parent.mkdir(parents=True, exist_ok=True)
        ok = cv2.imwrite(str(output), image)
    except (cv2.error, OSError, ValueError) as exc:
        logger.warning("Failed to render matching to %s: %s", output, exc)
        return None
    if not ok:
        logger.warning("Failed to write image: %s", output)
        return None
    return output


__all__ = ["draw_matching", "render_matching"]
