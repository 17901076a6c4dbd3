"""Curvature-only comparison of a target segment against a source database."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from .params import DEFAULT_CURVE_DB_PARAMS, CurveDatabaseParams
from .segment_db import CurveSegmentDatabase


@dataclass(frozen=True, slots=True)
class CurveMatch:
    """Best source segment for one target segment."""

    source_index: int
    distance: float


class CurveMatcher:
    """Compare curvature signatures, ignoring position, orientation and scale.

    The matcher holds configuration only. ``compare_curvature_only`` returns
    ``None`` when the source database is empty or when even the closest
    signature is farther than ``max_distance``. Source databases must be built
    with the matcher's ``params``; signatures from different sampling are not
    comparable.
    """

    def __init__(
        self,
        params: CurveDatabaseParams = DEFAULT_CURVE_DB_PARAMS,
        *,
        max_distance: float = math.inf,
    ) -> None:
        if max_distance < 0:
            raise ValueError("max_distance must be non-negative.")
        self.params = params
        self.max_distance = float(max_distance)

    def distances(self, source: CurveSegmentDatabase, target_signature: np.ndarray) -> np.ndarray:
        """RMS curvature difference between ``target_signature`` and every source segment."""

        signature = np.asarray(target_signature, dtype=float).reshape(-1)
        if source.curvatures.shape[1] != signature.shape[0]:
            raise ValueError(
                f"Signature size {signature.shape[0]} does not match source database "
                f"resample size {source.curvatures.shape[1]}."
            )
        diff = source.curvatures - signature
        return np.sqrt(np.mean(diff * diff, axis=1))

    def compare_curvature_only(
        self,
        source: CurveSegmentDatabase,
        target_signature: np.ndarray,
    ) -> CurveMatch | None:
        if source.params != self.params:
            raise ValueError(
                f"Source database was built with {source.params}, matcher expects {self.params}."
            )
        if source.is_empty:
            return None
        distances = self.distances(source, target_signature)
        # argmin keeps the first index on ties.
        index = int(np.argmin(distances))
        distance = float(distances[index])
        if not math.isfinite(distance) or distance > self.max_distance:
            return None
        return CurveMatch(source_index=index, distance=distance)


__all__ = ["CurveMatch", "CurveMatcher"]
