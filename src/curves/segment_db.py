"""Curvature signature database over the sub-arcs of one closed contour."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

import numpy as np

from .contour import (
    as_points,
    circular_smooth,
    closed_length,
    distinct_point_count,
    ensure_counter_clockwise,
    resample_closed,
    signed_area,
    turning_angles,
)
from .params import DEFAULT_CURVE_DB_PARAMS, CurveDatabaseParams

SMOOTHING_WINDOW = 3


@dataclass(frozen=True, slots=True)
class CurveSegment:
    """Contiguous arc of a resampled contour, ``length`` samples starting at ``offset``."""

    offset: int
    length: int

    def indices(self, sample_count: int) -> np.ndarray:
        return (self.offset + np.arange(self.length)) % sample_count


@dataclass(slots=True)
class CurveSegmentDatabase:
    """Segments of a single contour together with their curvature signatures."""

    raw_contour: np.ndarray
    contour: np.ndarray
    segments: list[CurveSegment]
    curvatures: np.ndarray
    params: CurveDatabaseParams = field(default=DEFAULT_CURVE_DB_PARAMS)

    def __len__(self) -> int:
        return len(self.segments)

    @property
    def is_empty(self) -> bool:
        return not self.segments

    def segment_points(self, segment: CurveSegment) -> np.ndarray:
        return self.contour[segment.indices(len(self.contour))]

    def copy(self) -> "CurveSegmentDatabase":
        return CurveSegmentDatabase(
            raw_contour=self.raw_contour.copy(),
            contour=self.contour.copy(),
            segments=list(self.segments),
            curvatures=self.curvatures.copy(),
            params=self.params,
        )


def _segment_signature(turning: np.ndarray, segment: CurveSegment, size: int) -> np.ndarray:
    values = turning[segment.indices(len(turning))]
    positions = np.linspace(0.0, segment.length - 1, size)
    resampled = np.interp(positions, np.arange(segment.length, dtype=float), values)
    # Turning per sample times samples per segment: curvature over unit arclength.
    return resampled * float(segment.length - 1)


def _empty_database(raw: np.ndarray, params: CurveDatabaseParams) -> CurveSegmentDatabase:
    return CurveSegmentDatabase(
        raw_contour=raw,
        contour=np.zeros((0, 2), dtype=float),
        segments=[],
        curvatures=np.zeros((0, params.resample_size), dtype=float),
        params=params,
    )


def build_segment_database(
    contour: Iterable[Sequence[float]] | np.ndarray,
    params: CurveDatabaseParams = DEFAULT_CURVE_DB_PARAMS,
) -> CurveSegmentDatabase:
    """Build the curve segment database for ``contour``.

    The contour is oriented counter-clockwise and resampled to
    ``params.resample_size`` points. Segments are enumerated length-major, so
    index order is deterministic for a given contour and parameter set.
    Degenerate contours produce an empty database rather than an error.
    """

    raw = ensure_counter_clockwise(as_points(contour))
    if distinct_point_count(raw) < 3 or closed_length(raw) <= 0.0 or abs(signed_area(raw)) <= 1e-12:
        return _empty_database(raw, params)

    samples = resample_closed(raw, params.resample_size)
    if len(samples) < 3:
        return _empty_database(raw, params)

    turning = circular_smooth(turning_angles(samples), SMOOTHING_WINDOW)

    segments: list[CurveSegment] = []
    signatures: list[np.ndarray] = []
    for length in params.segment_lengths():
        for offset in params.segment_offsets():
            segment = CurveSegment(offset=offset, length=length)
            segments.append(segment)
            signatures.append(_segment_signature(turning, segment, params.resample_size))

    curvatures = np.vstack(signatures) if signatures else np.zeros((0, params.resample_size))
    return CurveSegmentDatabase(
        raw_contour=raw,
        contour=samples,
        segments=segments,
        curvatures=curvatures,
        params=params,
    )


__all__ = ["CurveSegment", "CurveSegmentDatabase", "build_segment_database"]
