"""
Base error hierarchy for the patch history system.

History-level errors inherit from ``PatchHistoryError`` so callers can
catch a single base type.  Patch engine failures are *not* wrapped:
they propagate from :mod:`patch_engine` unchanged.
"""
from __future__ import annotations


class PatchHistoryError(Exception):
    """Base class for all patch history errors."""


class HistoryShapeError(PatchHistoryError):
    """Raised when a value handed in as a history is missing stacks or breaks the stack invariant."""
