from __future__ import annotations

from typing import Any, Sequence

from core.interfaces import PatchOperation, PatchSet
from patch_engine.json_patch import immutable_json_patch, revert_json_patch


class JsonPatchEngine:
    """Default patch engine: RFC 6902 JSON Patch over plain Python data."""

    __slots__ = ()

    def apply(self, document: Any, operations: Sequence[PatchOperation]) -> Any:
        """Return a new document with *operations* applied.  *document* is left untouched."""
        return immutable_json_patch(document, operations)

    def invert(self, document: Any, operations: Sequence[PatchOperation]) -> PatchSet:
        """Return the operations that undo *operations*, computed against the pre-patch *document*."""
        return revert_json_patch(document, operations)

    def __repr__(self) -> str:
        return "JsonPatchEngine()"
