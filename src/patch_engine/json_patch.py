"""
JSON Patch application and inversion.

Two primitives, both non-mutating:

- :func:`immutable_json_patch` applies an RFC 6902 patch and returns a
  new document.
- :func:`revert_json_patch` computes, against the document *before* the
  patch is applied, the patch that takes the patched document back to
  the starting state.

Application is delegated to ``jsonpatch``; inversion walks the patch one
operation at a time so every inverse is computed against the state that
operation actually sees.
"""
from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from typing import Any, Callable, Sequence

import jsonpatch
import jsonpointer

from core.interfaces import PatchOperation
from patch_engine.errors import (
    InvalidPatchError,
    PatchConflictError,
    PatchTestFailedError,
)

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Apply
# ------------------------------------------------------------------

def immutable_json_patch(document: Any, operations: Sequence[PatchOperation]) -> Any:
    """Apply *operations* to a deep copy of *document* and return the copy.

    Raises:
        InvalidPatchError:    an operation is malformed.
        PatchTestFailedError: a ``test`` operation did not match.
        PatchConflictError:   a path is absent or has the wrong shape.
    """
    try:
        return jsonpatch.apply_patch(document, copy.deepcopy(list(operations)), in_place=False)
    except jsonpatch.JsonPatchTestFailed as exc:
        raise PatchTestFailedError(str(exc)) from exc
    except jsonpatch.InvalidJsonPatch as exc:
        raise InvalidPatchError(str(exc)) from exc
    except (jsonpatch.JsonPatchConflict, jsonpointer.JsonPointerException) as exc:
        raise PatchConflictError(str(exc)) from exc


# ------------------------------------------------------------------
# Revert
# ------------------------------------------------------------------

def revert_json_patch(document: Any, operations: Sequence[PatchOperation]) -> list[PatchOperation]:
    """Return the patch that undoes *operations*.

    *document* must be the state the operations are about to be applied
    to.  Inverse groups come out in reverse order: the last operation is
    undone first.
    """
    current = document
    reverted: list[PatchOperation] = []
    for operation in operations:
        reverted = _revert_operation(current, operation) + reverted
        current = immutable_json_patch(current, [operation])
    logger.debug("Reverted %d operation(s) into %d", len(operations), len(reverted))
    return reverted


def _revert_operation(document: Any, operation: PatchOperation) -> list[PatchOperation]:
    if not isinstance(operation, Mapping):
        raise InvalidPatchError(f"Operation must be a mapping, got {operation!r}")
    op = operation.get("op")
    reverter = _REVERTERS.get(op) if isinstance(op, str) else None
    if reverter is None:
        raise InvalidPatchError(f"Unknown patch operation {op!r}")
    if not isinstance(operation.get("path"), str):
        raise InvalidPatchError(f"Operation {op!r} is missing a string 'path'")
    try:
        return reverter(document, operation)
    except jsonpointer.JsonPointerException as exc:
        raise PatchConflictError(str(exc)) from exc


def _revert_add(document: Any, operation: PatchOperation) -> list[PatchOperation]:
    """Inverse of ``add`` and ``copy``: both write *operation['path']*."""
    path = operation["path"]
    pointer = jsonpointer.JsonPointer(path)
    if not pointer.parts:
        return [{"op": "replace", "path": "", "value": copy.deepcopy(document)}]

    parent, part = pointer.to_last(document)
    if isinstance(parent, list):
        index = len(parent) if part == "-" else part
        return [{"op": "remove", "path": _sibling_path(pointer, index)}]
    if isinstance(parent, Mapping) and part in parent:
        return [{"op": "replace", "path": path, "value": copy.deepcopy(parent[part])}]
    return [{"op": "remove", "path": path}]


def _revert_remove(document: Any, operation: PatchOperation) -> list[PatchOperation]:
    path = operation["path"]
    old_value = copy.deepcopy(jsonpointer.JsonPointer(path).resolve(document))
    return [{"op": "add", "path": path, "value": old_value}]


def _revert_replace(document: Any, operation: PatchOperation) -> list[PatchOperation]:
    path = operation["path"]
    old_value = copy.deepcopy(jsonpointer.JsonPointer(path).resolve(document))
    return [{"op": "replace", "path": path, "value": old_value}]


def _revert_move(document: Any, operation: PatchOperation) -> list[PatchOperation]:
    path = operation["path"]
    from_path = operation.get("from")
    if not isinstance(from_path, str):
        raise InvalidPatchError("Operation 'move' is missing a string 'from'")
    if from_path == path:
        return []

    pointer = jsonpointer.JsonPointer(path)
    if not pointer.parts:
        return [{"op": "replace", "path": "", "value": copy.deepcopy(document)}]

    # the target is resolved after "from" is gone; list siblings may have shifted
    moved_value = jsonpointer.JsonPointer(from_path).resolve(document)
    removed = immutable_json_patch(document, [{"op": "remove", "path": from_path}])
    parent, part = pointer.to_last(removed)

    if isinstance(parent, Mapping) and part in parent:
        return [
            {"op": "replace", "path": path, "value": copy.deepcopy(parent[part])},
            {"op": "add", "path": from_path, "value": copy.deepcopy(moved_value)},
        ]
    target = path
    if isinstance(parent, list) and part == "-":
        target = _sibling_path(pointer, len(parent))
    return [{"op": "move", "from": target, "path": from_path}]


def _revert_test(document: Any, operation: PatchOperation) -> list[PatchOperation]:
    return []


def _sibling_path(pointer: jsonpointer.JsonPointer, index: int) -> str:
    """Path of element *index* in the container *pointer*'s last part lives in."""
    return jsonpointer.JsonPointer.from_parts(pointer.parts[:-1] + [str(index)]).path


_REVERTERS: dict[str, Callable[[Any, PatchOperation], list[PatchOperation]]] = {
    "add": _revert_add,
    "copy": _revert_add,
    "remove": _revert_remove,
    "replace": _revert_replace,
    "move": _revert_move,
    "test": _revert_test,
}
