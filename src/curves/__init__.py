"""Curve segment databases and curvature signature matching."""

from .alignment import SimilarityTransform, align_segments, fit_similarity
from .matcher import CurveMatch, CurveMatcher
from .params import DEFAULT_CURVE_DB_PARAMS, CurveDatabaseParams
from .segment_db import CurveSegment, CurveSegmentDatabase, build_segment_database

__all__ = [
    "CurveDatabaseParams",
    "CurveMatch",
    "CurveMatcher",
    "CurveSegment",
    "CurveSegmentDatabase",
    "DEFAULT_CURVE_DB_PARAMS",
    "SimilarityTransform",
    "align_segments",
    "build_segment_database",
    "fit_similarity",
]
