from patch_engine.errors import (
    PatchEngineError,
    InvalidPatchError,
    PatchConflictError,
    PatchTestFailedError,
)
from patch_engine.json_patch import immutable_json_patch, revert_json_patch
from patch_engine.engine import JsonPatchEngine

__all__ = [
    "PatchEngineError",
    "InvalidPatchError",
    "PatchConflictError",
    "PatchTestFailedError",
    "immutable_json_patch",
    "revert_json_patch",
    "JsonPatchEngine",
]
