"""
Patch history: undo / redo for documents mutated through JSON Patch.

The history is itself a plain JSON document with three stacks::

    {"patchStack": [...], "undoStack": [...], "redoStack": [...]}

None of the functions here mutate anything.  Each one returns a
:class:`PatchHistoryResult` holding two independent patch sets: one for
the subject, one for the history.  The caller applies both through the
patch engine to obtain the next subject and history.

Stack positions in the emitted operations are computed from the stack
lengths of the history passed in, never from ``-`` or "last element"
shortcuts, so the history patches are valid against exactly that
snapshot.

* :func:`record`: apply a new patch set; clears the redo branch.
* :func:`undo`: reverse the most recent patch set.
* :func:`redo`: re-apply the most recently undone patch set.
"""
from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence, TypedDict

from core.errors import HistoryShapeError
from core.interfaces import IPatchEngine, PatchOperation, PatchSet

logger = logging.getLogger(__name__)


PATCH_STACK = "patchStack"
UNDO_STACK = "undoStack"
REDO_STACK = "redoStack"


class PatchHistory(TypedDict):
    """
    patchStack: every patch set recorded against the subject, oldest first.
    undoStack:  ``undoStack[i]`` reverses ``patchStack[i]``; computed when
                that entry was recorded, against the subject state before it.
    redoStack:  patch sets that were undone and can be re-applied.
    """
    patchStack: list[PatchSet]
    undoStack: list[PatchSet]
    redoStack: list[PatchSet]


@dataclass(frozen=True, slots=True)
class PatchHistoryResult:
    """Patches a history operation asks the caller to apply.

    Attributes:
        subject_patches: Patch set for the subject.
        history_patches: Patch set for the :class:`PatchHistory`.
    """
    subject_patches: PatchSet = field(default_factory=list)
    history_patches: PatchSet = field(default_factory=list)

    @property
    def is_noop(self) -> bool:
        """True when there was nothing to do (empty undo / redo stack)."""
        return not self.subject_patches and not self.history_patches


# ------------------------------------------------------------------
# Construction / queries
# ------------------------------------------------------------------

def initialize_history() -> PatchHistory:
    return {PATCH_STACK: [], UNDO_STACK: [], REDO_STACK: []}


def can_undo(history: PatchHistory) -> bool:
    return bool(history[UNDO_STACK])


def can_redo(history: PatchHistory) -> bool:
    return bool(history[REDO_STACK])


def validate_history(history: Any) -> None:
    """Raise :class:`HistoryShapeError` unless *history* is usable as a :class:`PatchHistory`."""
    if not isinstance(history, Mapping):
        raise HistoryShapeError(f"History must be a mapping, got {type(history).__name__}")
    for key in (PATCH_STACK, UNDO_STACK, REDO_STACK):
        if key not in history:
            raise HistoryShapeError(f"History is missing {key!r}")
        if not isinstance(history[key], list):
            raise HistoryShapeError(
                f"History {key!r} must be a list, got {type(history[key]).__name__}"
            )
    if len(history[PATCH_STACK]) != len(history[UNDO_STACK]):
        raise HistoryShapeError(
            f"patchStack and undoStack differ in length "
            f"({len(history[PATCH_STACK])} != {len(history[UNDO_STACK])})"
        )


# ------------------------------------------------------------------
# Record / Undo / Redo
# ------------------------------------------------------------------

def record(
    subject: Any,
    history: PatchHistory,
    patches: Sequence[PatchOperation],
    engine: Optional[IPatchEngine] = None,
) -> PatchHistoryResult:
    """Compute the patches that apply *patches* and record them in *history*.

    Call this **before** patching the subject: the inverse is computed
    against *subject* as passed in.  Any new record discards the redo
    branch.

    Engine errors raised while inverting propagate unchanged.
    """
    result = _record_without_clearing_redo(subject, history, patches, engine)
    clear_redo: PatchOperation = {"op": "replace", "path": f"/{REDO_STACK}", "value": []}
    return PatchHistoryResult(
        subject_patches=result.subject_patches,
        history_patches=result.history_patches + [clear_redo],
    )


def undo(history: PatchHistory) -> PatchHistoryResult:
    """Compute the patches that undo the most recent record.

    Returns an empty result when there is nothing to undo.
    """
    patch_stack_size = len(history[PATCH_STACK])
    undo_stack_size = len(history[UNDO_STACK])
    redo_stack_size = len(history[REDO_STACK])

    if undo_stack_size == 0:
        logger.debug("Nothing to undo")
        return PatchHistoryResult()

    undo_patches = copy.deepcopy(history[UNDO_STACK][undo_stack_size - 1])
    # read before the removal below is applied
    patch_to_redo = copy.deepcopy(history[PATCH_STACK][patch_stack_size - 1])

    history_patches: PatchSet = [
        {"op": "remove", "path": f"/{PATCH_STACK}/{patch_stack_size - 1}"},
        {"op": "remove", "path": f"/{UNDO_STACK}/{undo_stack_size - 1}"},
        {"op": "add", "path": f"/{REDO_STACK}/{redo_stack_size}", "value": patch_to_redo},
    ]
    logger.debug("Undo entry %d: %d subject operation(s)", undo_stack_size - 1, len(undo_patches))
    return PatchHistoryResult(subject_patches=undo_patches, history_patches=history_patches)


def redo(
    subject: Any,
    history: PatchHistory,
    engine: Optional[IPatchEngine] = None,
) -> PatchHistoryResult:
    """Compute the patches that re-apply the most recently undone patch set.

    Only the consumed top of the redo stack is removed; entries below it
    stay available.  Returns an empty result when there is nothing to redo.
    """
    redo_stack_size = len(history[REDO_STACK])
    if redo_stack_size == 0:
        logger.debug("Nothing to redo")
        return PatchHistoryResult()

    redo_patches = history[REDO_STACK][redo_stack_size - 1]
    result = _record_without_clearing_redo(subject, history, redo_patches, engine)
    consume: PatchOperation = {"op": "remove", "path": f"/{REDO_STACK}/{redo_stack_size - 1}"}
    return PatchHistoryResult(
        subject_patches=result.subject_patches,
        history_patches=result.history_patches + [consume],
    )


def _record_without_clearing_redo(
    subject: Any,
    history: PatchHistory,
    patches: Sequence[PatchOperation],
    engine: Optional[IPatchEngine],
) -> PatchHistoryResult:
    if engine is None:
        engine = _default_engine()

    patch_stack_size = len(history[PATCH_STACK])
    undo_stack_size = len(history[UNDO_STACK])

    undo_patches = engine.invert(subject, patches)

    history_patches: PatchSet = [
        {"op": "add", "path": f"/{PATCH_STACK}/{patch_stack_size}", "value": copy.deepcopy(list(patches))},
        {"op": "add", "path": f"/{UNDO_STACK}/{undo_stack_size}", "value": copy.deepcopy(list(undo_patches))},
    ]
    logger.debug(
        "Recording entry %d: %d operation(s), %d inverse operation(s)",
        patch_stack_size, len(patches), len(undo_patches),
    )
    return PatchHistoryResult(
        subject_patches=copy.deepcopy(list(patches)),
        history_patches=history_patches,
    )


def _default_engine() -> IPatchEngine:
    from patch_engine import JsonPatchEngine

    return JsonPatchEngine()
