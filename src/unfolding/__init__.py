"""Fitness evaluation for unfolded mesh nets."""

from .boundary import boundary_loops, net_boundary
from .evaluators import (
    AreaEvaluator,
    CutLengthEvaluator,
    GenomeEvaluator,
    HullAreaEvaluator,
    NetEvaluator,
    OverlappingEvaluator,
)
from .interfaces import FlatNet, Individual, NetSource, OverlapChecker, Unfolder
from .net_io import NetFileError, NetView, load_net
from .pixel_checker import PixelOverlapChecker
from .polygon_fit import (
    NO_MATCH_ERROR,
    PERFECT_MATCH_FITNESS,
    BestMatchState,
    NetMatch,
    PolygonFitEvaluator,
    TargetShapeIndex,
    create_polygon_fit_evaluator,
)

__all__ = [
    "AreaEvaluator",
    "BestMatchState",
    "CutLengthEvaluator",
    "FlatNet",
    "GenomeEvaluator",
    "HullAreaEvaluator",
    "Individual",
    "NO_MATCH_ERROR",
    "NetEvaluator",
    "NetFileError",
    "NetMatch",
    "NetSource",
    "NetView",
    "OverlapChecker",
    "OverlappingEvaluator",
    "PERFECT_MATCH_FITNESS",
    "PixelOverlapChecker",
    "PolygonFitEvaluator",
    "TargetShapeIndex",
    "Unfolder",
    "boundary_loops",
    "create_polygon_fit_evaluator",
    "load_net",
    "net_boundary",
]
