from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from ..mutations.models import Mutation, MutationResponse, Visibility


class Transport(Protocol):
    """
    Protocol for the remote side of a data context.

    Implementations execute a mutation list as one atomic transaction and
    run read queries. Failures must be raised (``TransportError`` for
    network, HTTP and remote validation problems), never returned.
    """

    async def execute_transaction(
        self,
        mutations: Sequence[Mutation],
        *,
        return_ids: bool,
        return_documents: bool,
        visibility: Visibility,
    ) -> MutationResponse:
        """Execute all mutations in order as a single transaction."""
        ...

    async def fetch(self, query: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        """Run a read query and return its result."""
        ...

    async def aclose(self) -> None:
        """Release any underlying connections."""
        ...
