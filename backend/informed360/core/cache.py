"""In-memory holder of the current snapshot."""
from __future__ import annotations

from typing import Optional

from informed360.models import Snapshot


class CacheStore:
    """
    Owns the single snapshot reference.

    ``publish`` swaps the reference in one assignment; readers holding the
    previous snapshot keep a complete, immutable view.
    """

    def __init__(self) -> None:
        self._snapshot: Optional[Snapshot] = None

    def get(self) -> Optional[Snapshot]:
        return self._snapshot

    def get_or_empty(self) -> Snapshot:
        return self._snapshot or Snapshot.empty()

    def publish(self, snapshot: Snapshot) -> None:
        self._snapshot = snapshot

    @property
    def ready(self) -> bool:
        return self._snapshot is not None
