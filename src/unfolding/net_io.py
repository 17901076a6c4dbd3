"""Load flattened nets from disk and expose them as a read-only net source."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

import cv2
import numpy as np
import trimesh

from .boundary import boundary_length
from .interfaces import FlatNet


class NetFileError(RuntimeError):
    """Raised when a net file cannot be read or does not describe a net."""


def net_from_mapping(payload: Mapping[str, Any]) -> FlatNet:
    vertices = payload.get("vertices")
    faces = payload.get("faces")
    if not isinstance(vertices, list) or not isinstance(faces, list):
        raise NetFileError("Net payload must contain 'vertices' and 'faces' arrays.")
    try:
        positions = np.asarray(vertices, dtype=float)
        face_list = [tuple(int(index) for index in face) for face in faces]
    except (TypeError, ValueError) as exc:
        raise NetFileError("Net vertices must be numeric and faces integer indices.") from exc
    if positions.ndim != 2 or positions.shape[1] not in (2, 3):
        raise NetFileError("Net vertices must be 2D or 3D points.")
    for face in face_list:
        if len(face) < 3 or min(face) < 0 or max(face) >= len(positions):
            raise NetFileError(f"Face {face} does not index a valid polygon.")

    plane_axes = _plane_axes_from(payload.get("plane_axes", (0, 2)))
    return FlatNet(positions=positions, faces=face_list, plane_axes=plane_axes)


def _plane_axes_from(value: Any) -> tuple[int, int]:
    # Two distinct coordinate axes of a 3D position.
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise NetFileError(f"plane_axes must be a pair of axis indices, got {value!r}.")
    if any(isinstance(axis, bool) or not isinstance(axis, int) for axis in value):
        raise NetFileError(f"plane_axes must hold integer axis indices, got {value!r}.")
    first, second = value
    if first == second or not all(0 <= axis < 3 for axis in value):
        raise NetFileError(f"plane_axes must be two distinct axes in 0..2, got {value!r}.")
    return first, second


def _load_json(path: Path) -> Mapping[str, Any]:
    with path.open("r", encoding="utf-8") as stream:
        payload = json.load(stream)
    if not isinstance(payload, Mapping):
        msg = f"Expected JSON object at {path}"
        raise NetFileError(msg)
    return payload


def _flattening_axes(vertices: np.ndarray) -> tuple[int, int]:
    # Drop the axis the flattened mesh has no extent along.
    extent = np.ptp(vertices, axis=0)
    flat_axis = int(np.argmin(extent))
    kept = [axis for axis in range(3) if axis != flat_axis]
    return kept[0], kept[1]


def load_net(path: str | Path) -> FlatNet:
    """Read a net from a JSON payload or any mesh format trimesh understands."""

    net_path = Path(path)
    if not net_path.exists():
        raise NetFileError(f"Net file {net_path} does not exist")

    if net_path.suffix.lower() == ".json":
        try:
            return net_from_mapping(_load_json(net_path))
        except json.JSONDecodeError as exc:
            raise NetFileError(f"Net file {net_path} is not valid JSON") from exc

    try:
        mesh = trimesh.load(net_path, force="mesh", process=False)
    except (ValueError, OSError) as exc:
        raise NetFileError(f"Cannot load mesh from {net_path}") from exc
    vertices = np.asarray(mesh.vertices, dtype=float)
    faces = [tuple(int(index) for index in face) for face in np.asarray(mesh.faces)]
    if len(vertices) == 0 or not faces:
        raise NetFileError(f"Mesh {net_path} has no faces")
    return FlatNet(positions=vertices, faces=faces, plane_axes=_flattening_axes(vertices))


class NetView:
    """Net source over one fixed, already flattened net."""

    def __init__(self, net: FlatNet, config: Any = None) -> None:
        self.net = net
        self.config = config if config is not None else {}
        self.rebuilds = 0

    @classmethod
    def from_file(cls, path: str | Path, config: Any = None) -> "NetView":
        return cls(load_net(path), config)

    def rebuild(self) -> None:
        self.rebuilds += 1

    def current_net(self) -> FlatNet:
        return self.net

    def current_config(self) -> Any:
        return self.config

    def total_cut_length(self) -> float:
        # Each cut edge shows up twice on the outline of the net.
        return 0.5 * boundary_length(self.net)

    def hull_area(self) -> float:
        points = self.net.points_2d()
        if len(points) < 3:
            return 0.0
        hull = cv2.convexHull(points.astype(np.float32))
        return float(cv2.contourArea(hull))


__all__ = ["NetFileError", "NetView", "load_net", "net_from_mapping"]
