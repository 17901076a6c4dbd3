"""Similarity alignment between two matched curve segments."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .segment_db import CurveSegment, CurveSegmentDatabase


@dataclass(frozen=True, slots=True)
class SimilarityTransform:
    scale: float
    rotation: np.ndarray
    translation: np.ndarray

    def apply(self, points: np.ndarray) -> np.ndarray:
        return self.scale * (np.asarray(points, dtype=float) @ self.rotation.T) + self.translation

    @classmethod
    def identity(cls) -> "SimilarityTransform":
        return cls(scale=1.0, rotation=np.eye(2), translation=np.zeros(2))


def _resample_open(points: np.ndarray, count: int) -> np.ndarray:
    if len(points) < 2:
        return np.repeat(points[:1], count, axis=0) if len(points) else np.zeros((count, 2))
    steps = np.hypot(*np.diff(points, axis=0).T)
    cumulative = np.concatenate([[0.0], np.cumsum(steps)])
    if cumulative[-1] <= 1e-12:
        return np.repeat(points[:1], count, axis=0)
    targets = np.linspace(0.0, cumulative[-1], count)
    return np.column_stack(
        [np.interp(targets, cumulative, points[:, 0]), np.interp(targets, cumulative, points[:, 1])]
    )


def fit_similarity(source: np.ndarray, target: np.ndarray) -> SimilarityTransform:
    """Least-squares similarity transform mapping ``source`` onto ``target`` (Umeyama)."""

    src = np.asarray(source, dtype=float).reshape(-1, 2)
    dst = np.asarray(target, dtype=float).reshape(-1, 2)
    if len(src) != len(dst) or len(src) < 2:
        raise ValueError("fit_similarity needs two point sets of equal size (at least 2 points).")

    src_mean = src.mean(axis=0)
    dst_mean = dst.mean(axis=0)
    src_centered = src - src_mean
    dst_centered = dst - dst_mean

    variance = float(np.mean(np.sum(src_centered * src_centered, axis=1)))
    if variance <= 1e-18:
        return SimilarityTransform(scale=1.0, rotation=np.eye(2), translation=dst_mean - src_mean)

    covariance = dst_centered.T @ src_centered / len(src)
    u, singular, vt = np.linalg.svd(covariance)
    correction = np.eye(2)
    if np.linalg.det(u) * np.linalg.det(vt) < 0:
        correction[1, 1] = -1.0
    rotation = u @ correction @ vt
    scale = float(np.trace(np.diag(singular) @ correction)) / variance
    translation = dst_mean - scale * (rotation @ src_mean)
    return SimilarityTransform(scale=scale, rotation=rotation, translation=translation)


def align_segments(
    source: CurveSegmentDatabase,
    source_segment: CurveSegment,
    target: CurveSegmentDatabase,
    target_segment: CurveSegment,
) -> SimilarityTransform:
    """Transform taking the source net into the frame of the target stencil."""

    count = source.params.resample_size
    src = _resample_open(source.segment_points(source_segment), count)
    dst = _resample_open(target.segment_points(target_segment), count)
    return fit_similarity(src, dst)


__all__ = ["SimilarityTransform", "align_segments", "fit_similarity"]
