from __future__ import annotations

import logging
import threading
import time
from typing import Optional, TypeVar

from .config import SanityOptions, SerializerConfig
from .document_set import DocumentSet
from .documents import SanityDocument, SanityFileAsset, SanityImageAsset
from .errors import NoPendingChangesError
from .metrics import observe_commit
from .mutations.builder import MutationBuilder
from .mutations.models import Mutation, MutationResponse, Visibility
from .transport.base import Transport
from .transport.http import HttpTransport

logger = logging.getLogger(__name__)

TDoc = TypeVar("TDoc")


class DataContext:
    """
    Unit of work over a remote document store.

    Owns one MutationBuilder and one lazily created DocumentSet per document
    type. Recording is synchronous and thread-safe. Commits are async and
    claim the mutations they snapshot, so concurrent commits from any thread
    or event loop never send the same mutation twice and never wait on each
    other. Tracked state is cleared only after the transport reports success.

    Usage:
        async with DataContext(SanityOptions(project_id="abc", dataset="prod")) as ctx:
            ctx.document_set(Post).create(Post(_id="post-1", title="Hello"))
            response = await ctx.commit(return_ids=True)

    On failure (including cancellation) nothing is cleared, so the same
    commit can be retried, or the changes dropped with clear_changes().
    """

    def __init__(
        self,
        options: SanityOptions,
        serializer: Optional[SerializerConfig] = None,
        *,
        transport: Optional[Transport] = None,
    ) -> None:
        if options is None:
            raise ValueError("options must not be None")
        self.options = options
        self.serializer = serializer or SerializerConfig()
        self._owns_transport = transport is None
        self.transport: Transport = transport or HttpTransport(options, self.serializer)
        self._mutations = MutationBuilder()
        self._document_sets: dict[type, DocumentSet] = {}
        self._sets_lock = threading.Lock()
        # ids of mutations claimed by commits still awaiting the transport
        self._in_flight: set[int] = set()
        self._claim_lock = threading.Lock()

    @property
    def mutations(self) -> MutationBuilder:
        return self._mutations

    def document_set(self, doc_type: type[TDoc]) -> DocumentSet[TDoc]:
        """
        Return the DocumentSet for ``doc_type``, creating it on first access.

        Concurrent first calls for the same type construct exactly one set.
        """
        doc_set = self._document_sets.get(doc_type)
        if doc_set is not None:
            return doc_set
        with self._sets_lock:
            doc_set = self._document_sets.get(doc_type)
            if doc_set is None:
                doc_set = DocumentSet(self, doc_type)
                self._document_sets[doc_type] = doc_set
                logger.debug("Created document set for %s", doc_type.__name__)
            return doc_set

    @property
    def documents(self) -> DocumentSet[SanityDocument]:
        return self.document_set(SanityDocument)

    @property
    def images(self) -> DocumentSet[SanityImageAsset]:
        return self.document_set(SanityImageAsset)

    @property
    def files(self) -> DocumentSet[SanityFileAsset]:
        return self.document_set(SanityFileAsset)

    def clear_changes(self) -> None:
        """Discard all pending mutations without contacting the remote side."""
        self._mutations.clear()
        logger.debug("Cleared all pending changes")

    async def commit(
        self,
        *,
        return_ids: bool = False,
        return_documents: bool = False,
        visibility: Visibility = Visibility.SYNC,
    ) -> MutationResponse:
        """
        Send every pending mutation, across all types, as one transaction.

        Raises:
            TransportError: Propagated unchanged from the transport; pending
                mutations are kept
        """
        mutations = self._claim(self._mutations.build())
        return await self._execute(
            "all", mutations, return_ids, return_documents, visibility
        )

    async def commit_for(
        self,
        doc_type: type,
        *,
        return_ids: bool = False,
        return_documents: bool = False,
        visibility: Visibility = Visibility.SYNC,
    ) -> MutationResponse:
        """
        Send only ``doc_type``'s pending mutations as one transaction.

        Other types' pending mutations are left untouched.

        Raises:
            NoPendingChangesError: If nothing is pending for doc_type; no
                transport call is made
            TransportError: Propagated unchanged from the transport
        """
        mutations = self._claim(self._mutations.build_for(doc_type))
        if not mutations:
            raise NoPendingChangesError(doc_type)
        return await self._execute(
            doc_type.__name__, mutations, return_ids, return_documents, visibility
        )

    def _claim(self, mutations: list[Mutation]) -> list[Mutation]:
        """Reserve the mutations no other commit is already sending."""
        with self._claim_lock:
            claimed = [m for m in mutations if id(m) not in self._in_flight]
            self._in_flight.update(id(m) for m in claimed)
        return claimed

    def _release(self, mutations: list[Mutation]) -> None:
        with self._claim_lock:
            self._in_flight.difference_update(id(m) for m in mutations)

    async def _execute(
        self,
        scope: str,
        mutations: list[Mutation],
        return_ids: bool,
        return_documents: bool,
        visibility: Visibility,
    ) -> MutationResponse:
        start_time = time.monotonic()
        try:
            try:
                response = await self.transport.execute_transaction(
                    mutations,
                    return_ids=return_ids,
                    return_documents=return_documents,
                    visibility=visibility,
                )
            except BaseException as exc:
                # Includes cancellation; pending state stays as it was
                observe_commit(scope, "error", time.monotonic() - start_time)
                logger.warning(
                    "Commit of %d mutations (scope=%s) failed: %s: %s",
                    len(mutations),
                    scope,
                    type(exc).__name__,
                    exc,
                )
                raise

            observe_commit(scope, "success", time.monotonic() - start_time, mutations)
            self._mutations.discard(mutations)
        finally:
            self._release(mutations)
        logger.info(
            "Committed %d mutations (scope=%s, transaction=%s)",
            len(mutations),
            scope,
            response.transaction_id,
        )
        return response

    async def aclose(self) -> None:
        if self._owns_transport:
            await self.transport.aclose()

    async def __aenter__(self) -> "DataContext":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
