"""Tests for curve segment database construction."""

from __future__ import annotations

import math

import numpy as np
import pytest

from curves.contour import closed_length, resample_closed, signed_area, turning_angles
from curves.params import DEFAULT_CURVE_DB_PARAMS, CurveDatabaseParams
from curves.segment_db import CurveSegment, build_segment_database
from tests.helpers import rectangle_contour


def _rotate(points: np.ndarray, angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return points @ np.array([[c, -s], [s, c]]).T


def test_default_database_layout(star: np.ndarray) -> None:
    db = build_segment_database(star)

    assert len(db.contour) == DEFAULT_CURVE_DB_PARAMS.resample_size
    # lengths 70, 72, ..., 98 by offsets 0, 2, ..., 98
    assert len(db) == 15 * 50
    assert db.curvatures.shape == (750, 100)
    assert db.segments[0] == CurveSegment(offset=0, length=70)
    assert db.segments[1] == CurveSegment(offset=2, length=70)
    assert db.segments[50] == CurveSegment(offset=0, length=72)


def test_segment_offsets_stay_within_contour(star: np.ndarray) -> None:
    params = CurveDatabaseParams(resample_size=40, smallest_segment=10, longest_segment=40, offset_step=3)
    db = build_segment_database(star, params)

    assert db.segments
    for segment in db.segments:
        assert 0 <= segment.offset < len(db.contour)
        assert segment.length <= len(db.contour)
        assert len(db.segment_points(segment)) == segment.length


def test_signatures_ignore_position_rotation_and_scale(star: np.ndarray) -> None:
    moved = _rotate(star, 0.7) * 3.5 + np.array([12.0, -4.0])

    original = build_segment_database(star)
    transformed = build_segment_database(moved)

    np.testing.assert_allclose(transformed.curvatures, original.curvatures, atol=1e-9)


def test_clockwise_input_is_reoriented(star: np.ndarray) -> None:
    ccw = build_segment_database(star)
    cw = build_segment_database(star[::-1])

    assert signed_area(cw.contour) > 0
    np.testing.assert_allclose(cw.curvatures, ccw.curvatures)


@pytest.mark.parametrize(
    "contour",
    [
        [],
        [(0.0, 0.0), (1.0, 1.0)],
        [(0.0, 0.0), (1.0, 0.0), (2.0, 0.0)],
        [(1.0, 1.0), (1.0, 1.0), (1.0, 1.0), (1.0, 1.0)],
    ],
)
def test_degenerate_contours_give_empty_database(contour) -> None:
    db = build_segment_database(contour)

    assert db.is_empty
    assert db.curvatures.shape == (0, DEFAULT_CURVE_DB_PARAMS.resample_size)


def test_copy_is_independent(star: np.ndarray) -> None:
    db = build_segment_database(star)
    clone = db.copy()
    clone.curvatures[0, 0] += 1.0
    clone.segments.pop()

    assert db.curvatures[0, 0] != clone.curvatures[0, 0]
    assert len(db) == len(clone) + 1


def test_resample_preserves_closed_length() -> None:
    square = rectangle_contour(2.0, 2.0)
    samples = resample_closed(square, 64)

    assert samples.shape == (64, 2)
    np.testing.assert_allclose(samples[0], square[0])
    assert closed_length(samples) == pytest.approx(8.0, rel=1e-9)


def test_turning_angles_of_convex_loop_sum_to_full_turn() -> None:
    angles = turning_angles(rectangle_contour())

    np.testing.assert_allclose(angles, [math.pi / 2] * 4)
    assert angles.sum() == pytest.approx(2.0 * math.pi)


def test_params_validation_and_mapping() -> None:
    with pytest.raises(ValueError):
        CurveDatabaseParams(resample_size=50, smallest_segment=10, longest_segment=60)
    with pytest.raises(ValueError):
        CurveDatabaseParams(smallest_segment=80, longest_segment=70)
    with pytest.raises(ValueError):
        CurveDatabaseParams(offset_step=0)

    params = CurveDatabaseParams.from_mapping(
        {"resample_size": 60, "smallest_segment": 20, "longest_segment": 50}
    )
    assert params == CurveDatabaseParams(resample_size=60, smallest_segment=20, longest_segment=50)
    assert params.to_dict()["offset_step"] == 2
