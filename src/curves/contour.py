"""Closed contour helpers operating on ``(N, 2)`` point arrays."""

from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np

_EPS = 1e-12


def as_points(points: Iterable[Sequence[float]] | np.ndarray) -> np.ndarray:
    """Return ``points`` as a float ``(N, 2)`` array without a repeated closing point."""

    array = np.asarray(points, dtype=float)
    if array.size == 0:
        return np.zeros((0, 2), dtype=float)
    array = array.reshape(-1, array.shape[-1])[:, :2]
    if len(array) >= 2 and np.allclose(array[0], array[-1]):
        array = array[:-1]
    return np.ascontiguousarray(array)


def signed_area(points: np.ndarray) -> float:
    """Shoelace area; positive for counter-clockwise loops."""

    if len(points) < 3:
        return 0.0
    x = points[:, 0]
    y = points[:, 1]
    return 0.5 * float(np.dot(x, np.roll(y, -1)) - np.dot(np.roll(x, -1), y))


def ensure_counter_clockwise(points: np.ndarray) -> np.ndarray:
    if signed_area(points) < 0.0:
        return points[::-1].copy()
    return points


def closed_length(points: np.ndarray) -> float:
    if len(points) < 2:
        return 0.0
    edges = np.roll(points, -1, axis=0) - points
    return float(np.hypot(edges[:, 0], edges[:, 1]).sum())


def resample_closed(points: np.ndarray, count: int) -> np.ndarray:
    """Resample a closed polyline to ``count`` points evenly spaced by arclength.

    The first sample coincides with ``points[0]``.
    """

    if len(points) < 2 or count < 1:
        return np.zeros((0, 2), dtype=float)

    closed = np.vstack([points, points[:1]])
    steps = np.hypot(*np.diff(closed, axis=0).T)
    cumulative = np.concatenate([[0.0], np.cumsum(steps)])
    total = float(cumulative[-1])
    if total <= _EPS:
        return np.zeros((0, 2), dtype=float)

    targets = np.arange(count, dtype=float) * (total / count)
    x = np.interp(targets, cumulative, closed[:, 0])
    y = np.interp(targets, cumulative, closed[:, 1])
    return np.column_stack([x, y])


def turning_angles(points: np.ndarray) -> np.ndarray:
    """Signed turning angle at every vertex of a closed polyline.

    Left turns are positive, so a counter-clockwise convex loop sums to ``2*pi``.
    """

    if len(points) < 3:
        return np.zeros(len(points), dtype=float)
    incoming = points - np.roll(points, 1, axis=0)
    outgoing = np.roll(points, -1, axis=0) - points
    cross = incoming[:, 0] * outgoing[:, 1] - incoming[:, 1] * outgoing[:, 0]
    dot = incoming[:, 0] * outgoing[:, 0] + incoming[:, 1] * outgoing[:, 1]
    return np.arctan2(cross, dot)


def circular_smooth(values: np.ndarray, window: int = 3) -> np.ndarray:
    """Moving average that wraps around the end of a closed sequence."""

    if window <= 1 or len(values) < window:
        return values.copy()
    half = window // 2
    padded = np.concatenate([values[-half:], values, values[:half]])
    kernel = np.full(window, 1.0 / window)
    return np.convolve(padded, kernel, mode="valid")


def distinct_point_count(points: np.ndarray) -> int:
    if len(points) == 0:
        return 0
    return int(len(np.unique(np.round(points, 9), axis=0)))


__all__ = [
    "as_points",
    "circular_smooth",
    "closed_length",
    "distinct_point_count",
    "ensure_counter_clockwise",
    "resample_closed",
    "signed_area",
    "turning_angles",
]
