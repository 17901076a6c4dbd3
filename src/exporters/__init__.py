"""Diagnostic artifacts written by the evaluators."""

from .match_render import draw_matching, render_matching

__all__ = ["draw_matching", "render_matching"]
