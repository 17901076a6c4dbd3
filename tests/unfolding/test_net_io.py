"""Tests for reading nets from disk."""

from __future__ import annotations

import json

import pytest

from curves.contour import signed_area
from unfolding.boundary import net_boundary
from unfolding.evaluators import CutLengthEvaluator, HullAreaEvaluator
from unfolding.net_io import NetFileError, NetView, load_net, net_from_mapping
from tests.helpers import grid_net


def _grid_payload(columns: int = 3, rows: int = 2) -> dict:
    net = grid_net(columns, rows)
    return {"vertices": net.positions.tolist(), "faces": [list(face) for face in net.faces]}


def test_load_json_net(tmp_path) -> None:
    path = tmp_path / "net.json"
    path.write_text(json.dumps(_grid_payload()), encoding="utf-8")

    net = load_net(path)

    assert net.face_count == 12
    assert net.plane_axes == (0, 2)
    assert signed_area(net_boundary(net)) == pytest.approx(6.0)


def test_json_plane_axes_override() -> None:
    payload = {
        "vertices": [[0, 0, 0], [2, 0, 0], [2, 1, 0], [0, 1, 0]],
        "faces": [[0, 1, 2], [0, 2, 3]],
        "plane_axes": [0, 1],
    }

    net = net_from_mapping(payload)

    assert net.plane_axes == (0, 1)
    assert signed_area(net_boundary(net)) == pytest.approx(2.0)


@pytest.mark.parametrize(
    "payload",
    [
        {"faces": [[0, 1, 2]]},
        {"vertices": [[0, 0], [1, 0], [0, 1]], "faces": [[0, 1, 5]]},
        {"vertices": [[0, 0], [1, 0], [0, 1]], "faces": [[0, 1]]},
        {"vertices": [[0, "x"], [1, 0], [0, 1]], "faces": [[0, 1, 2]]},
        {"vertices": [[0, 0, 0, 0]], "faces": []},
        {"vertices": [[0, 0, 0], [1, 0, 0], [0, 0, 1]], "faces": [[0, 1, 2]], "plane_axes": [0, 5]},
        {"vertices": [[0, 0, 0], [1, 0, 0], [0, 0, 1]], "faces": [[0, 1, 2]], "plane_axes": [1, 1]},
        {"vertices": [[0, 0, 0], [1, 0, 0], [0, 0, 1]], "faces": [[0, 1, 2]], "plane_axes": "02"},
        {"vertices": [[0, 0, 0], [1, 0, 0], [0, 0, 1]], "faces": [[0, 1, 2]], "plane_axes": [0, 1, 2]},
    ],
)
def test_invalid_payloads_raise(payload) -> None:
    with pytest.raises(NetFileError):
        net_from_mapping(payload)


def test_malformed_json_raises(tmp_path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(NetFileError, match="not valid JSON"):
        load_net(path)


def test_missing_net_file_raises(tmp_path) -> None:
    with pytest.raises(NetFileError, match="does not exist"):
        load_net(tmp_path / "missing.obj")


def test_load_obj_net_detects_flat_plane(tmp_path) -> None:
    net = grid_net(2, 2)
    lines = [f"v {x} {y} {z}" for x, y, z in net.positions]
    lines += ["f " + " ".join(str(index + 1) for index in face) for face in net.faces]
    path = tmp_path / "net.obj"
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")

    loaded = load_net(path)

    assert loaded.plane_axes == (0, 2)
    assert loaded.face_count == 8
    assert abs(signed_area(net_boundary(loaded))) == pytest.approx(4.0)


def test_net_view_measures_the_net() -> None:
    view = NetView(grid_net(3, 2))

    view.rebuild()

    assert view.rebuilds == 1
    assert view.current_config() == {}
    assert view.total_cut_length() == pytest.approx(5.0)
    assert view.hull_area() == pytest.approx(6.0)
    assert CutLengthEvaluator().evaluate(view) == pytest.approx(5.0)
    assert HullAreaEvaluator().evaluate(view) == pytest.approx(1.0 / 6.0)
