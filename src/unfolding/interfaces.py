"""Collaborator contracts for the mesh unfolding engine and the GA population."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, Sequence, runtime_checkable

import numpy as np

Genome = Sequence[float]


@runtime_checkable
class Individual(Protocol):
    """Population member handed to genome-based evaluators."""

    @property
    def genome(self) -> Genome: ...


@dataclass(slots=True)
class FlatNet:
    """Flattened arrangement of mesh faces.

    ``positions`` is ``(N, 2)`` or ``(N, 3)``. Three-dimensional positions lie in
    the flattening plane and are projected through ``plane_axes``. ``faces``
    index into ``positions`` and share one winding direction.
    """

    positions: np.ndarray
    faces: list[tuple[int, ...]]
    plane_axes: tuple[int, int] = (0, 2)
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.positions = np.asarray(self.positions, dtype=float)
        self.faces = [tuple(int(index) for index in face) for face in self.faces]

    @property
    def face_count(self) -> int:
        return len(self.faces)

    def points_2d(self) -> np.ndarray:
        if self.positions.ndim != 2 or len(self.positions) == 0:
            return np.zeros((0, 2), dtype=float)
        if self.positions.shape[1] == 2:
            return self.positions
        u, v = self.plane_axes
        return self.positions[:, [u, v]]


@runtime_checkable
class NetSource(Protocol):
    """Anything that can hand a net-based evaluator its current flattened net."""

    def rebuild(self) -> None:
        """Fully re-flatten the current model."""

    def current_net(self) -> FlatNet: ...

    def current_config(self) -> Any: ...

    def total_cut_length(self) -> float: ...

    def hull_area(self) -> float: ...


@runtime_checkable
class Unfolder(NetSource, Protocol):
    """Mutable mesh unfolding handle rebuilt in place from a genome."""

    @property
    def face_count(self) -> int:
        """Face count of the underlying 3D model."""

    def build_from_genome(self, genome: Genome, check_overlap: bool = True) -> int:
        """Rebuild the net from ``genome``; returns the global overlap count when checked."""

    def count_local_overlaps(self) -> int: ...

    def count_overlaps(self) -> int: ...


@runtime_checkable
class OverlapChecker(Protocol):
    def overlap_ratio(self, net: FlatNet, config: Any) -> float: ...


__all__ = ["FlatNet", "Genome", "Individual", "NetSource", "OverlapChecker", "Unfolder"]
