"""
Error hierarchy for the JSON Patch engine.

Every failure raised while applying or reverting a patch derives from
``PatchEngineError``.  The underlying ``jsonpatch`` / ``jsonpointer``
exception is always chained as ``__cause__``.
"""
from __future__ import annotations


class PatchEngineError(Exception):
    """Base class for all patch engine errors."""


class InvalidPatchError(PatchEngineError):
    """Raised when an operation is structurally malformed (unknown op, missing path)."""


class PatchConflictError(PatchEngineError):
    """Raised when an operation addresses a path that is absent or of the wrong shape."""


class PatchTestFailedError(PatchEngineError):
    """Raised when a ``test`` operation does not match the document."""
