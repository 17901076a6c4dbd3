"""Score nets by how well their outline matches a target silhouette.

The target stencil is indexed once. Every call re-derives the candidate net's
outline, builds its curve segment database and scans all target segments for
the single lowest curvature distance. Fitness is the inverse of that
distance. Independently of the returned fitness, the evaluator remembers the
best match of its whole lifetime so it can be rendered on :meth:`close`, or
when the evaluator is garbage collected without being closed.
"""

from __future__ import annotations

import logging
import math
import threading
import weakref
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import numpy as np

from curves.matcher import CurveMatcher
from curves.params import DEFAULT_CURVE_DB_PARAMS, CurveDatabaseParams
from curves.segment_db import CurveSegment, CurveSegmentDatabase, build_segment_database
from exporters.match_render import render_matching
from stencil.loader import DEFAULT_MIN_AREA, StencilError, load_polygon_from_image

from .boundary import net_boundary
from .evaluators import NetEvaluator
from .interfaces import NetSource

logger = logging.getLogger(__name__)

NO_MATCH_ERROR = float(np.finfo(np.float32).max)
PERFECT_MATCH_FITNESS = math.inf
RENDER_FILENAME = "polygonfitevaluator_best_net_gen_err_{error:g}.jpg"


def fitness_from_error(error: float) -> float:
    """``1 / error`` with a zero error mapped to :data:`PERFECT_MATCH_FITNESS`."""

    if error <= 0.0:
        return PERFECT_MATCH_FITNESS
    return 1.0 / error


@dataclass(frozen=True, eq=False)
class TargetShapeIndex:
    """Immutable curve segment index of the reference silhouette."""

    contour: np.ndarray
    database: CurveSegmentDatabase
    image_path: Path | None = None

    @property
    def params(self) -> CurveDatabaseParams:
        return self.database.params

    @property
    def segments(self) -> list[CurveSegment]:
        return self.database.segments

    @classmethod
    def from_contour(
        cls,
        contour: np.ndarray,
        params: CurveDatabaseParams = DEFAULT_CURVE_DB_PARAMS,
        *,
        image_path: Path | None = None,
    ) -> "TargetShapeIndex":
        database = build_segment_database(contour, params)
        if database.is_empty:
            source = image_path or "contour"
            raise StencilError(f"Stencil {source} does not yield any curve segments")
        return cls(contour=database.raw_contour, database=database, image_path=image_path)

    @classmethod
    def from_image(
        cls,
        path: str | Path,
        params: CurveDatabaseParams = DEFAULT_CURVE_DB_PARAMS,
        *,
        min_area: float = DEFAULT_MIN_AREA,
    ) -> "TargetShapeIndex":
        polygon = load_polygon_from_image(path, min_area=min_area)
        index = cls.from_contour(polygon, params, image_path=Path(path))
        logger.info(
            "Indexed stencil %s: %d contour samples, %d curve segments",
            path,
            len(index.database.contour),
            len(index.database),
        )
        return index


@dataclass(slots=True)
class NetMatch:
    """Outcome of matching one net against every target segment."""

    min_error: float
    target_segment: CurveSegment | None
    source_segment: CurveSegment | None
    net: CurveSegmentDatabase
    target_index: int | None = None
    source_index: int | None = None

    @property
    def matched(self) -> bool:
        return self.target_index is not None

    @property
    def fitness(self) -> float:
        return fitness_from_error(self.min_error)


@dataclass
class BestMatchState:
    """Best match observed over an evaluator's lifetime; ``min_error`` never increases."""

    min_error: float = NO_MATCH_ERROR
    target_segment: CurveSegment | None = None
    source_segment: CurveSegment | None = None
    net: CurveSegmentDatabase | None = None
    updates: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def offer(self, match: NetMatch) -> bool:
        """Replace the state with ``match`` when its error is strictly lower."""

        with self._lock:
            if not match.min_error < self.min_error:
                return False
            self.min_error = match.min_error
            self.target_segment = match.target_segment
            self.source_segment = match.source_segment
            self.net = match.net.copy()
            self.updates += 1
            return True

    @property
    def has_net(self) -> bool:
        return self.net is not None


def _best_render_path(output_dir: Path, best: BestMatchState) -> Path:
    return output_dir / RENDER_FILENAME.format(error=best.min_error)


def _render_best_match(
    target: TargetShapeIndex,
    best: BestMatchState,
    output_dir: Path,
    enabled: bool,
) -> Path | None:
    """Render the best match held by ``best``; runs at most once per evaluator."""

    if not enabled or best.net is None:
        return None
    if best.target_segment is None or best.source_segment is None:
        return None

    written = render_matching(
        _best_render_path(output_dir, best),
        target.database,
        best.target_segment,
        best.net,
        best.source_segment,
        error=best.min_error,
    )
    if written is not None:
        logger.info("PolygonFitEvaluator saved best matching to %s", written)
    return written


class PolygonFitEvaluator(NetEvaluator):
    """Net-based evaluator rewarding outlines that resemble the target stencil."""

    def __init__(
        self,
        target: TargetShapeIndex,
        *,
        matcher: CurveMatcher | Any | None = None,
        output_dir: str | Path = ".",
        render_on_close: bool = True,
    ) -> None:
        self.target = target
        self.matcher = matcher if matcher is not None else CurveMatcher(target.params)
        self.output_dir = Path(output_dir)
        self.render_on_close = render_on_close
        self.best = BestMatchState()
        # Must not reference self, or the evaluator is never collected.
        self._finalizer = weakref.finalize(
            self, _render_best_match, target, self.best, self.output_dir, render_on_close
        )

    @property
    def params(self) -> CurveDatabaseParams:
        return self.target.params

    @property
    def min_error(self) -> float:
        return self.best.min_error

    def evaluate(self, source: NetSource) -> float:
        source.rebuild()
        contour = net_boundary(source.current_net())
        return self.evaluate_contour(contour)

    def evaluate_contour(self, contour: np.ndarray) -> float:
        """Score a net outline given directly as an ``(N, 2)`` contour."""

        result = self.match(build_segment_database(contour, self.params))
        if self.best.offer(result):
            logger.debug("New best polygon fit error %g", result.min_error)
        return result.fitness

    def match(self, net: CurveSegmentDatabase) -> NetMatch:
        """Scan every target segment and keep the lowest-distance match.

        The scan is greedy and order dependent: a later segment replaces the
        current best only when its distance is strictly lower.
        """

        target_db = self.target.database
        result = NetMatch(
            min_error=NO_MATCH_ERROR,
            target_segment=target_db.segments[0] if target_db.segments else None,
            source_segment=net.segments[0] if net.segments else None,
            net=net,
        )

        for j, target_segment in enumerate(target_db.segments):
            found = self.matcher.compare_curvature_only(net, target_db.curvatures[j])
            if found is None:
                continue
            if found.distance >= result.min_error:
                continue
            result.min_error = float(found.distance)
            result.target_segment = target_segment
            result.source_segment = net.segments[found.source_index]
            result.target_index = j
            result.source_index = found.source_index

        return result

    def render_path(self) -> Path:
        return _best_render_path(self.output_dir, self.best)

    @property
    def closed(self) -> bool:
        return not self._finalizer.alive

    def close(self) -> Path | None:
        """Render the best match ever observed, once. Returns the written path, if any.

        The same render runs when the evaluator is garbage collected without
        being closed.
        """

        return self._finalizer()

    def __enter__(self) -> "PolygonFitEvaluator":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def create_polygon_fit_evaluator(
    stencil_path: str | Path,
    params: CurveDatabaseParams = DEFAULT_CURVE_DB_PARAMS,
    *,
    min_area: float = DEFAULT_MIN_AREA,
    **options: Any,
) -> PolygonFitEvaluator:
    """Build the target index from ``stencil_path`` and wrap it in an evaluator.

    Raises :class:`~stencil.loader.StencilError` for a missing path, an
    undecodable image or an image without a usable silhouette.
    """

    target = TargetShapeIndex.from_image(stencil_path, params, min_area=min_area)
    return PolygonFitEvaluator(target, **options)


__all__ = [
    "BestMatchState",
    "NO_MATCH_ERROR",
    "NetMatch",
    "PERFECT_MATCH_FITNESS",
    "PolygonFitEvaluator",
    "TargetShapeIndex",
    "create_polygon_fit_evaluator",
    "fitness_from_error",
]
