"""
Core interfaces for the patch history system.

- PatchOperation / PatchSet: the JSON Patch shapes shared by every package
- IPatchEngine: protocol for applying and inverting patch sets
"""
from __future__ import annotations

from typing import Any, Protocol, Sequence

PatchOperation = dict[str, Any]
PatchSet = list[PatchOperation]


class IPatchEngine(Protocol):
    """
    Protocol defining the patch engine interface.
    The history functions depend on this protocol, not the concrete implementation.

    Both methods must leave *document* untouched and must raise when a
    patch addresses a path that is absent from, or of mismatched shape
    in, *document*.
    """

    def apply(
        self,
        document: Any,
        operations: Sequence[PatchOperation],
    ) -> Any: ...

    def invert(
        self,
        document: Any,
        operations: Sequence[PatchOperation],
    ) -> PatchSet: ...
