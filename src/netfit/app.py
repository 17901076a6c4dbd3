"""Command line helpers for indexing stencils and scoring unfolding nets."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, Mapping, Sequence

from curves.params import DEFAULT_CURVE_DB_PARAMS, CurveDatabaseParams
from stencil.loader import StencilError
from unfolding.evaluators import CutLengthEvaluator, HullAreaEvaluator
from unfolding.net_io import NetFileError, NetView
from unfolding.polygon_fit import TargetShapeIndex, create_polygon_fit_evaluator

__all__ = ["build_cli", "run_index", "run_score"]

EXIT_FAILURE = 2


def _load_params(path: Path | None) -> CurveDatabaseParams:
    if path is None:
        return DEFAULT_CURVE_DB_PARAMS
    with path.open("r", encoding="utf-8") as stream:
        payload = json.load(stream)
    if not isinstance(payload, Mapping):
        msg = f"Expected JSON object at {path}"
        raise TypeError(msg)
    return CurveDatabaseParams.from_mapping(payload)


def run_index(stencil: Path, params: CurveDatabaseParams) -> TargetShapeIndex:
    index = TargetShapeIndex.from_image(stencil, params)
    print(f"Stencil {stencil}: {len(index.contour)} outline points")
    print(f"Resampled to {len(index.database.contour)} samples, {len(index.database)} curve segments")
    return index


def run_score(
    stencil: Path,
    net_path: Path,
    params: CurveDatabaseParams,
    *,
    output_dir: Path,
    render: bool = True,
) -> dict[str, Any]:
    source = NetView.from_file(net_path)
    with create_polygon_fit_evaluator(
        stencil, params, output_dir=output_dir, render_on_close=render
    ) as evaluator:
        scores: dict[str, Any] = {
            "polygon_fit": evaluator.evaluate(source),
            "min_error": evaluator.min_error,
            "cut_length": CutLengthEvaluator().evaluate(source),
            "hull_area": HullAreaEvaluator().evaluate(source),
        }
    print(f"Polygon fit fitness: {scores['polygon_fit']:g} (error {scores['min_error']:g})")
    print(f"Cut length fitness: {scores['cut_length']:g}")
    print(f"Hull area fitness: {scores['hull_area']:g}")
    return scores


def build_cli(argv: Sequence[str] | None = None) -> int:
    import argparse

    parser = argparse.ArgumentParser(description="Unfolding net fitness tools")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    index = subparsers.add_parser("index", help="Build the curve segment index of a stencil image")
    index.add_argument("--stencil", type=Path, required=True, help="Reference silhouette image")
    index.add_argument("--params", type=Path, help="JSON file overriding curve database parameters")

    score = subparsers.add_parser("score", help="Score a flattened net against a stencil image")
    score.add_argument("--stencil", type=Path, required=True, help="Reference silhouette image")
    score.add_argument(
        "--net",
        type=Path,
        required=True,
        help="Flattened net as JSON (vertices/faces) or any mesh file trimesh can read",
    )
    score.add_argument("--params", type=Path, help="JSON file overriding curve database parameters")
    score.add_argument(
        "--output",
        type=Path,
        default=Path("."),
        help="Directory for the best-match rendering",
    )
    score.add_argument("--no-render", action="store_true", help="Skip the best-match rendering")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        params = _load_params(args.params)
        if args.command == "index":
            run_index(args.stencil, params)
            return 0
        if args.command == "score":
            run_score(
                args.stencil,
                args.net,
                params,
                output_dir=args.output,
                render=not args.no_render,
            )
            return 0
    except (StencilError, NetFileError, OSError, ValueError, TypeError) as exc:
        print(f"! Error: {exc}", file=sys.stderr)
        return EXIT_FAILURE

    parser.error(f"Unknown command: {args.command}")
    return 0
