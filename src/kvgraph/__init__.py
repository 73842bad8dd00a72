"""kvgraph: a labeled property graph mapped onto a sorted key-value store."""

from __future__ import annotations

__version__ = "0.1.0"
