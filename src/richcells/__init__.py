"""Styled cell to HTML conversion with a two-tier table cache."""

from __future__ import annotations

__version__ = "0.1.0"
