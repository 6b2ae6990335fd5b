"""Boundary Protocols — contracts between the capture pipeline and its store.

Invariants:
    - The pipeline depends only on EntryStore, never on a concrete store
    - save() is called exactly once per validated Entry; failures raise PersistenceError
    - close() is called once per store lifetime (application shutdown), never per request
    - Implementations must be safe for concurrent use; the pipeline does no locking

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Health checking is a separate optional protocol: the capture path never needs it
"""

from typing import Protocol, runtime_checkable

from capture.core.entry import Entry


class EntryStore(Protocol):
    """Contract for entry persistence — implemented by infrastructure."""
    async def save(self, entry: Entry) -> None: ...
    async def close(self) -> None: ...


@runtime_checkable
class SupportsHealthCheck(Protocol):
    """Stores that can report connectivity for readiness probes."""
    async def health_check(self) -> bool: ...
