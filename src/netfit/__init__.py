"""Unfolding net fitness tools."""

from .app import build_cli

__all__ = ["build_cli"]
