from __future__ import annotations

import threading
from typing import Iterable, Iterator

from ..errors import InvalidMutationError
from .models import REQUIRES_ID, Mutation


class MutationBatch:
    """
    Ordered, append-only list of pending mutations for one document type.

    Appends and snapshots are guarded by a lock, so recording from several
    threads while a commit is reading the batch is safe. ``build()`` always
    returns a copy; anything appended afterwards stays pending.
    """

    def __init__(self, doc_type: type) -> None:
        self.doc_type = doc_type
        self._mutations: list[Mutation] = []
        self._lock = threading.Lock()

    def add(self, mutation: Mutation) -> None:
        """
        Append a mutation.

        Raises:
            InvalidMutationError: If the mutation targets another type, or an
                id-bound mutation (patch, delete, ...) carries no id
        """
        if mutation.doc_type is not self.doc_type:
            raise InvalidMutationError(
                f"Mutation for {mutation.doc_type.__name__} cannot be added "
                f"to batch for {self.doc_type.__name__}"
            )
        if mutation.mutation_type in REQUIRES_ID and not mutation.document_id:
            raise InvalidMutationError(
                f"{mutation.mutation_type.value} mutation for "
                f"{self.doc_type.__name__} requires a document id"
            )
        with self._lock:
            self._mutations.append(mutation)

    @property
    def count(self) -> int:
        with self._lock:
            return len(self._mutations)

    def __len__(self) -> int:
        return self.count

    def __iter__(self) -> Iterator[Mutation]:
        return iter(self.build())

    def build(self) -> list[Mutation]:
        """Snapshot of pending mutations in insertion order."""
        with self._lock:
            return list(self._mutations)

    def clear(self) -> None:
        with self._lock:
            self._mutations.clear()

    def discard(self, mutations: Iterable[Mutation]) -> int:
        """
        Remove exactly the given mutation instances and return how many were removed.

        Mutations appended after the snapshot that produced ``mutations`` are kept.
        """
        committed = {id(m) for m in mutations}
        with self._lock:
            before = len(self._mutations)
            self._mutations = [m for m in self._mutations if id(m) not in committed]
            return before - len(self._mutations)
