"""Store client for a remote REST listing service."""

from .api import Store

__all__ = ["Store"]
