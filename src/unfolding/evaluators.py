"""Fitness evaluators for unfolding nets.

Two call shapes exist. Genome-based evaluators own a reference to the shared
:class:`~unfolding.interfaces.Unfolder` and rebuild it in place from each
individual. Net-based evaluators are handed a
:class:`~unfolding.interfaces.NetSource` whose current net is the candidate.
Higher fitness is better for every evaluator.
"""

from __future__ import annotations

import logging
import math
import threading
from abc import ABC, abstractmethod

from .interfaces import Individual, NetSource, OverlapChecker, Unfolder
from .pixel_checker import PixelOverlapChecker

logger = logging.getLogger(__name__)

LOCAL_OVERLAP_WEIGHT = 100
NEAR_BEST_TOLERANCE = 1.01
INITIAL_BEST_RATIO = 1e3


class GenomeEvaluator(ABC):
    """Evaluator that rebuilds a reused unfolder from an individual's genome."""

    def __init__(self, unfolder: Unfolder) -> None:
        self.unfolder = unfolder

    @abstractmethod
    def evaluate(self, individual: Individual) -> float:
        raise NotImplementedError


class NetEvaluator(ABC):
    """Evaluator that scores the net currently held by a net source."""

    @abstractmethod
    def evaluate(self, source: NetSource) -> float:
        raise NotImplementedError


class OverlappingEvaluator(GenomeEvaluator):
    """Penalize global overlaps, and local (adjacent-face) overlaps a hundredfold."""

    def evaluate(self, individual: Individual) -> float:
        global_overlaps = int(self.unfolder.build_from_genome(individual.genome, check_overlap=True))
        # Local checks are unreliable on large nets; weight them heavily instead.
        local_overlaps = int(self.unfolder.count_local_overlaps())
        return -float(global_overlaps + local_overlaps * LOCAL_OVERLAP_WEIGHT)


class AreaEvaluator(GenomeEvaluator):
    """Count overlaps exhaustively only for near-best area-overlap ratios.

    Candidates whose rasterized overlap ratio is not within 1% of the best
    ratio seen so far are assumed to have the worst case of ``faces ** 2``
    overlaps, which skips the expensive exact count.
    """

    def __init__(
        self,
        unfolder: Unfolder,
        checker: OverlapChecker | None = None,
        *,
        initial_best_ratio: float = INITIAL_BEST_RATIO,
    ) -> None:
        super().__init__(unfolder)
        self.checker = checker if checker is not None else PixelOverlapChecker()
        self._best_ratio = float(initial_best_ratio)
        self._lock = threading.Lock()

    @property
    def best_ratio(self) -> float:
        return self._best_ratio

    def _offer_ratio(self, ratio: float) -> tuple[float, bool]:
        """Record ``ratio``; returns the best ratio before the call and whether it improved."""

        with self._lock:
            previous = self._best_ratio
            improved = ratio < previous
            if improved:
                self._best_ratio = ratio
        return previous, improved

    def evaluate(self, individual: Individual) -> float:
        self.unfolder.build_from_genome(individual.genome, check_overlap=False)

        ratio = float(
            self.checker.overlap_ratio(self.unfolder.current_net(), self.unfolder.current_config())
        )
        previous, improved = self._offer_ratio(ratio)

        face_count = int(self.unfolder.face_count)
        overlaps = face_count * face_count
        if ratio < previous * NEAR_BEST_TOLERANCE:
            overlaps = int(self.unfolder.count_overlaps())
        if improved:
            logger.debug("Area overlap ratio improved to %.6f (%d overlaps)", ratio, overlaps)
        return -float(overlaps)


class CutLengthEvaluator(NetEvaluator):
    """Reward long total cut length."""

    def evaluate(self, source: NetSource) -> float:
        return float(source.total_cut_length())


class HullAreaEvaluator(NetEvaluator):
    """Reward compact nets: fitness is the inverse convex hull area."""

    def evaluate(self, source: NetSource) -> float:
        area = float(source.hull_area())
        if area <= 0.0:
            return math.inf
        return 1.0 / area


__all__ = [
    "AreaEvaluator",
    "CutLengthEvaluator",
    "GenomeEvaluator",
    "HullAreaEvaluator",
    "INITIAL_BEST_RATIO",
    "LOCAL_OVERLAP_WEIGHT",
    "NEAR_BEST_TOLERANCE",
    "NetEvaluator",
    "OverlappingEvaluator",
]
