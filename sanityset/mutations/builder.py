from __future__ import annotations

import logging
import threading
from typing import Iterable

from .batch import MutationBatch
from .models import Mutation

logger = logging.getLogger(__name__)


class MutationBuilder:
    """
    Registry of per-type mutation batches plus transaction assembly.

    Batches are created once per document type and kept for the builder's
    lifetime; clearing empties them but never unregisters them. ``build()``
    concatenates batches in the order their types were first touched.
    """

    def __init__(self) -> None:
        # dict preserves insertion order, which is the first-touched order
        self._batches: dict[type, MutationBatch] = {}
        self._lock = threading.Lock()

    def for_type(self, doc_type: type) -> MutationBatch:
        """Return the batch for ``doc_type``, creating it on first use."""
        batch = self._batches.get(doc_type)
        if batch is not None:
            return batch
        with self._lock:
            batch = self._batches.get(doc_type)
            if batch is None:
                batch = MutationBatch(doc_type)
                self._batches[doc_type] = batch
                logger.debug("Registered mutation batch for %s", doc_type.__name__)
            return batch

    def _snapshot_batches(self) -> list[MutationBatch]:
        with self._lock:
            return list(self._batches.values())

    def build(self) -> list[Mutation]:
        """All pending mutations across types, as one ordered transaction."""
        mutations: list[Mutation] = []
        for batch in self._snapshot_batches():
            mutations.extend(batch.build())
        return mutations

    def build_for(self, doc_type: type) -> list[Mutation]:
        """Pending mutations for one type only. Unknown types yield an empty list."""
        batch = self._batches.get(doc_type)
        if batch is None:
            return []
        return batch.build()

    def clear(self) -> None:
        for batch in self._snapshot_batches():
            batch.clear()

    def clear_for(self, doc_type: type) -> None:
        batch = self._batches.get(doc_type)
        if batch is not None:
            batch.clear()

    def discard(self, mutations: Iterable[Mutation]) -> int:
        """Remove committed mutation instances from whichever batches hold them."""
        by_type: dict[type, list[Mutation]] = {}
        for mutation in mutations:
            by_type.setdefault(mutation.doc_type, []).append(mutation)
        removed = 0
        for doc_type, committed in by_type.items():
            batch = self._batches.get(doc_type)
            if batch is not None:
                removed += batch.discard(committed)
        return removed

    def pending_counts(self) -> dict[type, int]:
        return {batch.doc_type: batch.count for batch in self._snapshot_batches()}

    @property
    def count(self) -> int:
        return sum(batch.count for batch in self._snapshot_batches())
