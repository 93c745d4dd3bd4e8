from core.errors import PatchHistoryError, HistoryShapeError
from core.interfaces import IPatchEngine, PatchOperation, PatchSet
from core.patch_history import (
    PatchHistory,
    PatchHistoryResult,
    initialize_history,
    record,
    undo,
    redo,
    can_undo,
    can_redo,
    validate_history,
)

__all__ = [
    "PatchHistoryError",
    "HistoryShapeError",
    "IPatchEngine",
    "PatchOperation",
    "PatchSet",
    "PatchHistory",
    "PatchHistoryResult",
    "initialize_history",
    "record",
    "undo",
    "redo",
    "can_undo",
    "can_redo",
    "validate_history",
]
