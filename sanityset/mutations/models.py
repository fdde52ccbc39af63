from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional, Sequence


class MutationType(str, Enum):
    CREATE = "create"
    CREATE_OR_REPLACE = "createOrReplace"
    CREATE_IF_NOT_EXISTS = "createIfNotExists"
    PATCH = "patch"
    DELETE = "delete"


REQUIRES_ID = frozenset(
    {
        MutationType.CREATE_OR_REPLACE,
        MutationType.CREATE_IF_NOT_EXISTS,
        MutationType.PATCH,
        MutationType.DELETE,
    }
)


class Visibility(str, Enum):
    SYNC = "sync"
    ASYNC = "async"
    DEFERRED = "deferred"


@dataclass
class PatchOperations:
    set: Optional[Mapping[str, Any]] = None
    set_if_missing: Optional[Mapping[str, Any]] = None
    unset: Optional[Sequence[str]] = None
    inc: Optional[Mapping[str, float]] = None
    dec: Optional[Mapping[str, float]] = None
    if_revision_id: Optional[str] = None

    def is_empty(self) -> bool:
        return not (self.set or self.set_if_missing or self.unset or self.inc or self.dec)


@dataclass(eq=False)
class Mutation:
    """
    A single pending document mutation.

    Compared by identity: recording the same change twice yields two
    mutations, and both are sent.
    """
    doc_type: type
    mutation_type: MutationType
    document_id: Optional[str] = None
    # full document for the create variants
    document: Any = None
    patch: Optional[PatchOperations] = None


@dataclass
class MutationResult:
    id: str
    operation: Optional[str] = None
    document: Optional[dict[str, Any]] = None


@dataclass
class MutationResponse:
    """
    Outcome of a successful commit.

    Failed commits raise instead of returning a partially filled response.
    """
    transaction_id: Optional[str] = None
    results: list[MutationResult] = field(default_factory=list)
    success: bool = True

    @property
    def ids(self) -> list[str]:
        return [r.id for r in self.results]

    @property
    def documents(self) -> list[dict[str, Any]]:
        return [r.document for r in self.results if r.document is not None]
