"""Curve segment database parameters."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True, slots=True)
class CurveDatabaseParams:
    """Sampling parameters shared by a target stencil and every net it is matched to.

    Segment lengths and offsets are measured in samples of the contour after it
    has been resampled to ``resample_size`` points.
    """

    resample_size: int = 100
    smallest_segment: int = 70
    longest_segment: int = 99
    offset_step: int = 2

    def __post_init__(self) -> None:
        if self.resample_size < 3:
            raise ValueError("resample_size must be at least 3.")
        if self.offset_step < 1:
            raise ValueError("offset_step must be positive.")
        if self.smallest_segment < 2:
            raise ValueError("smallest_segment must be at least 2.")
        if self.longest_segment < self.smallest_segment:
            raise ValueError("longest_segment must not be shorter than smallest_segment.")
        if self.longest_segment > self.resample_size:
            raise ValueError("longest_segment cannot exceed resample_size.")

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "CurveDatabaseParams":
        defaults = DEFAULT_CURVE_DB_PARAMS
        return cls(
            resample_size=int(payload.get("resample_size", defaults.resample_size)),
            smallest_segment=int(payload.get("smallest_segment", defaults.smallest_segment)),
            longest_segment=int(payload.get("longest_segment", defaults.longest_segment)),
            offset_step=int(payload.get("offset_step", defaults.offset_step)),
        )

    def segment_lengths(self) -> range:
        return range(self.smallest_segment, self.longest_segment + 1, self.offset_step)

    def segment_offsets(self) -> range:
        return range(0, self.resample_size, self.offset_step)

    def to_dict(self) -> dict[str, int]:
        return {
            "resample_size": self.resample_size,
            "smallest_segment": self.smallest_segment,
            "longest_segment": self.longest_segment,
            "offset_step": self.offset_step,
        }


DEFAULT_CURVE_DB_PARAMS = CurveDatabaseParams()


__all__ = ["CurveDatabaseParams", "DEFAULT_CURVE_DB_PARAMS"]
