"""Test helper utilities exposed for import convenience."""
from .shapes import grid_net, rectangle_contour, star_contour
from .unfolder import FakeIndividual, FakeUnfolder, ScriptedChecker, ScriptedMatcher

__all__ = [
    "FakeIndividual",
    "FakeUnfolder",
    "ScriptedChecker",
    "ScriptedMatcher",
    "grid_net",
    "rectangle_contour",
    "star_contour",
]
