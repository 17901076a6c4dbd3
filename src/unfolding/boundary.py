"""Boundary tracing for flattened nets."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from curves.contour import ensure_counter_clockwise, signed_area

from .interfaces import FlatNet


def boundary_half_edges(faces: Sequence[Sequence[int]]) -> list[tuple[int, int]]:
    """Directed face edges whose reverse edge belongs to no face."""

    half_edges: list[tuple[int, int]] = []
    for face in faces:
        count = len(face)
        for idx in range(count):
            half_edges.append((int(face[idx]), int(face[(idx + 1) % count])))
    present = set(half_edges)
    return [edge for edge in half_edges if (edge[1], edge[0]) not in present]


def boundary_loops(faces: Sequence[Sequence[int]]) -> list[list[int]]:
    """Chain boundary half-edges into closed vertex loops.

    At a pinch vertex (two boundary loops touching) the first unused outgoing
    edge is followed, which splits the outline at that vertex.
    """

    outgoing: dict[int, list[int]] = {}
    for start, end in boundary_half_edges(faces):
        outgoing.setdefault(start, []).append(end)

    used: set[tuple[int, int]] = set()
    loops: list[list[int]] = []
    for start in outgoing:
        for first in outgoing[start]:
            if (start, first) in used:
                continue
            loop = [start]
            used.add((start, first))
            current = first
            while current != start:
                loop.append(current)
                candidates = [nxt for nxt in outgoing.get(current, []) if (current, nxt) not in used]
                if not candidates:
                    # Open chain; faces are not consistently oriented.
                    loop = []
                    break
                used.add((current, candidates[0]))
                current = candidates[0]
            if len(loop) >= 3:
                loops.append(loop)
    return loops


def net_boundary(net: FlatNet) -> np.ndarray:
    """Outer boundary polygon of ``net`` in flattening coordinates, counter-clockwise.

    The loop enclosing the largest area is the outline; holes and slivers are
    ignored. An empty array is returned for nets without a closed boundary.
    """

    points = net.points_2d()
    loops = boundary_loops(net.faces)
    if not loops or len(points) == 0:
        return np.zeros((0, 2), dtype=float)

    best = max(loops, key=lambda loop: abs(signed_area(points[loop])))
    return ensure_counter_clockwise(points[best].copy())


def boundary_length(net: FlatNet) -> float:
    """Summed length of every boundary half-edge of ``net``."""

    points = net.points_2d()
    total = 0.0
    for start, end in boundary_half_edges(net.faces):
        total += float(np.linalg.norm(points[end] - points[start]))
    return total


__all__ = ["boundary_half_edges", "boundary_length", "boundary_loops", "net_boundary"]
