"""In-memory store backed by a grid spatial index."""

from .api import Store

__all__ = ["Store"]
