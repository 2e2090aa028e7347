"""
Hetzner Robot Client - Shared Constants

This package contains values shared across the resource services.
"""

from .constants import STATUS_IN_PROCESS, STATUS_READY

__all__ = [
    "STATUS_IN_PROCESS",
    "STATUS_READY",
]
