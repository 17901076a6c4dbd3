"""Tests for the ``netfit`` command line entry point."""

from __future__ import annotations

import json

from netfit.app import build_cli
from tests.helpers import grid_net


def _write_net(path) -> None:
    net = grid_net(3, 2)
    payload = {"vertices": net.positions.tolist(), "faces": [list(face) for face in net.faces]}
    path.write_text(json.dumps(payload), encoding="utf-8")


def test_index_command_reports_segments(stencil_image, capsys) -> None:
    exit_code = build_cli(["index", "--stencil", str(stencil_image)])

    assert exit_code == 0
    out = capsys.readouterr().out
    assert "outline points" in out
    assert "Resampled to 100 samples, 750 curve segments" in out


def test_index_command_reads_params_file(stencil_image, tmp_path, capsys) -> None:
    params = tmp_path / "params.json"
    params.write_text(
        json.dumps({"resample_size": 40, "smallest_segment": 20, "longest_segment": 30, "offset_step": 5}),
        encoding="utf-8",
    )

    exit_code = build_cli(["index", "--stencil", str(stencil_image), "--params", str(params)])

    assert exit_code == 0
    assert "Resampled to 40 samples, 24 curve segments" in capsys.readouterr().out


def test_score_command_renders_best_match(stencil_image, tmp_path, capsys) -> None:
    net_path = tmp_path / "net.json"
    _write_net(net_path)
    output = tmp_path / "out"

    exit_code = build_cli(
        ["score", "--stencil", str(stencil_image), "--net", str(net_path), "--output", str(output)]
    )

    assert exit_code == 0
    out = capsys.readouterr().out
    assert "Polygon fit fitness:" in out
    assert "Cut length fitness: 5" in out
    assert "Hull area fitness: 0.166667" in out
    rendered = list(output.glob("polygonfitevaluator_best_net_gen_err_*.jpg"))
    assert len(rendered) == 1


def test_score_command_can_skip_rendering(stencil_image, tmp_path) -> None:
    net_path = tmp_path / "net.json"
    _write_net(net_path)
    output = tmp_path / "out"

    exit_code = build_cli(
        [
            "score",
            "--stencil",
            str(stencil_image),
            "--net",
            str(net_path),
            "--output",
            str(output),
            "--no-render",
        ]
    )

    assert exit_code == 0
    assert not output.exists()


def test_missing_stencil_exits_with_error(tmp_path, capsys) -> None:
    exit_code = build_cli(["index", "--stencil", str(tmp_path / "missing.png")])

    assert exit_code == 2
    assert "! Error: Stencil file" in capsys.readouterr().err


def test_invalid_params_exit_with_error(stencil_image, tmp_path, capsys) -> None:
    params = tmp_path / "params.json"
    params.write_text(json.dumps({"resample_size": 10, "longest_segment": 50}), encoding="utf-8")

    exit_code = build_cli(["index", "--stencil", str(stencil_image), "--params", str(params)])

    assert exit_code == 2
    assert "! Error:" in capsys.readouterr().err


def test_score_rejects_net_with_bad_plane_axes(stencil_image, tmp_path, capsys) -> None:
    net = grid_net(3, 2)
    payload = {
        "vertices": net.positions.tolist(),
        "faces": [list(face) for face in net.faces],
        "plane_axes": [0, 5],
    }
    net_path = tmp_path / "net.json"
    net_path.write_text(json.dumps(payload), encoding="utf-8")

    exit_code = build_cli(
        ["score", "--stencil", str(stencil_image), "--net", str(net_path), "--no-render"]
    )

    assert exit_code == 2
    assert "! Error: plane_axes" in capsys.readouterr().err


def test_empty_stencil_argument_is_reported(capsys) -> None:
    exit_code = build_cli(["index", "--stencil", ""])

    assert exit_code == 2
    assert "! Error: No stencil file is given" in capsys.readouterr().err
