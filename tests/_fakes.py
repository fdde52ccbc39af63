from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence

from sanityset.mutations.models import (
    Mutation,
    MutationResponse,
    MutationResult,
    Visibility,
)


@dataclass
class TransportCall:
    mutations: list[Mutation]
    return_ids: bool
    return_documents: bool
    visibility: Visibility


@dataclass
class Post:
    _id: Optional[str] = None
    title: str = ""
    body: Optional[str] = None


@dataclass
class Author:
    _id: Optional[str] = None
    name: str = ""


class RecordingTransport:
    """
    In-memory transport double.

    Records every transaction, optionally fails with ``error``, and can be
    held mid-flight with ``gate`` to observe in-flight behaviour.
    """

    def __init__(self) -> None:
        self.calls: list[TransportCall] = []
        self.fetch_calls: list[tuple[str, dict[str, Any]]] = []
        self.fetch_result: Any = None
        self.error: Optional[BaseException] = None
        self.gate: Optional[asyncio.Event] = None
        self.entered: Optional[asyncio.Event] = None
        self.closed = False

    async def execute_transaction(
        self,
        mutations: Sequence[Mutation],
        *,
        return_ids: bool,
        return_documents: bool,
        visibility: Visibility,
    ) -> MutationResponse:
        self.calls.append(
            TransportCall(list(mutations), return_ids, return_documents, visibility)
        )
        if self.entered is not None:
            self.entered.set()
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return MutationResponse(
            transaction_id=f"tx-{len(self.calls)}",
            results=[
                MutationResult(id=m.document_id or f"generated-{i}", operation="create")
                for i, m in enumerate(mutations)
            ],
        )

    async def fetch(self, query: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        self.fetch_calls.append((query, dict(params or {})))
        return self.fetch_result

    async def aclose(self) -> None:
        self.closed = True
