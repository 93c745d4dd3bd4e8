"""
HistoryService: owner of tracked subjects and their patch histories.

Manages:
- Tracked subjects (keyed by a subject_id string), each paired with its
  :class:`~core.PatchHistory`
- Record / undo / redo: compute both patch sets through :mod:`core`,
  apply them through the patch engine, then commit the new pair

The core functions assume a single writer per (subject, history) pair.
The service is that writer: every read-compute-apply-commit cycle runs
under one lock, and the stored pair is only replaced once both patch
sets have applied cleanly.
"""
from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from threading import RLock
from typing import Any, Optional, Sequence

from core import (
    IPatchEngine,
    PatchHistory,
    PatchHistoryResult,
    PatchOperation,
    can_redo,
    can_undo,
    initialize_history,
    record,
    redo,
    undo,
    validate_history,
)
from patch_engine import JsonPatchEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TrackedSubject:
    """A subject and the history describing how it got there."""
    subject: Any
    history: PatchHistory


class HistoryService:
    """
    Facade that callers use to edit subjects with undo / redo.
    One instance per application.
    """

    def __init__(self, engine: Optional[IPatchEngine] = None):
        self._engine: IPatchEngine = engine if engine is not None else JsonPatchEngine()
        self._tracked: dict[str, TrackedSubject] = {}
        self._lock = RLock()

    # ------------------------------------------------------------------
    # Subject lifecycle
    # ------------------------------------------------------------------

    def track(
        self, subject_id: str, subject: Any, history: Optional[PatchHistory] = None,
    ) -> dict:
        """Start tracking *subject* and return a summary.

        A previously built *history* can be handed in; it is checked with
        :func:`core.validate_history` and must describe *subject*.
        Both are stored as deep copies.  Tracking an id that is already
        tracked replaces it.
        """
        if history is None:
            history = initialize_history()
        else:
            validate_history(history)
            history = copy.deepcopy(history)
        subject = copy.deepcopy(subject)
        with self._lock:
            replaced = subject_id in self._tracked
            tracked = self._tracked[subject_id] = TrackedSubject(subject, history)
        logger.info(
            "%s subject %s (undo=%d, redo=%d)",
            "Re-tracked" if replaced else "Tracking",
            subject_id, len(history["undoStack"]), len(history["redoStack"]),
        )
        return self._summary(subject_id, tracked)

    def untrack(self, subject_id: str) -> None:
        """Forget a subject and its history."""
        with self._lock:
            self._tracked.pop(subject_id, None)
        logger.info("Stopped tracking subject %s", subject_id)

    def get_subject(self, subject_id: str) -> Any:
        """Detached copy of the current subject."""
        return copy.deepcopy(self._tracked[subject_id].subject)

    def get_history(self, subject_id: str) -> PatchHistory:
        """Detached copy of the current history."""
        return copy.deepcopy(self._tracked[subject_id].history)

    def list_subjects(self) -> list[dict]:
        with self._lock:
            return [
                self._summary(sid, tracked)
                for sid, tracked in self._tracked.items()
            ]

    # ------------------------------------------------------------------
    # Record / Undo / Redo
    # ------------------------------------------------------------------

    def record(self, subject_id: str, patches: Sequence[PatchOperation]) -> PatchHistoryResult:
        """Apply *patches* to the subject and record them.

        Engine errors propagate and leave the tracked pair unchanged.
        """
        with self._lock:
            tracked = self._tracked[subject_id]
            result = record(tracked.subject, tracked.history, patches, self._engine)
            self._commit(subject_id, tracked, result)
        logger.info(
            "Recorded %d operation(s) on subject %s", len(result.subject_patches), subject_id,
        )
        return result

    def undo(self, subject_id: str) -> PatchHistoryResult:
        """Undo the most recent record.  Returns a no-op result when there is nothing to undo."""
        with self._lock:
            tracked = self._tracked[subject_id]
            result = undo(tracked.history)
            if result.is_noop:
                logger.debug("Nothing to undo on subject %s", subject_id)
                return result
            self._commit(subject_id, tracked, result)
        logger.info("Undo on subject %s", subject_id)
        return result

    def redo(self, subject_id: str) -> PatchHistoryResult:
        """Redo the most recent undo.  Returns a no-op result when there is nothing to redo."""
        with self._lock:
            tracked = self._tracked[subject_id]
            result = redo(tracked.subject, tracked.history, self._engine)
            if result.is_noop:
                logger.debug("Nothing to redo on subject %s", subject_id)
                return result
            self._commit(subject_id, tracked, result)
        logger.info("Redo on subject %s", subject_id)
        return result

    def can_undo(self, subject_id: str) -> bool:
        return can_undo(self._tracked[subject_id].history)

    def can_redo(self, subject_id: str) -> bool:
        return can_redo(self._tracked[subject_id].history)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _commit(
        self, subject_id: str, tracked: TrackedSubject, result: PatchHistoryResult,
    ) -> None:
        """Apply both patch sets; store the new pair only if both succeed."""
        subject = self._engine.apply(tracked.subject, result.subject_patches)
        history = self._engine.apply(tracked.history, result.history_patches)
        self._tracked[subject_id] = TrackedSubject(subject, history)

    @staticmethod
    def _summary(subject_id: str, tracked: TrackedSubject) -> dict:
        history = tracked.history
        return {
            "subject_id": subject_id,
            "undo_depth": len(history["undoStack"]),
            "redo_depth": len(history["redoStack"]),
            "can_undo": can_undo(history),
            "can_redo": can_redo(history),
        }
