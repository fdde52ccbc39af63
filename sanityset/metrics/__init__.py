from __future__ import annotations

import logging
from typing import Iterable

from ..mutations.models import Mutation
from .registry import (
    SANITY_COMMIT_LATENCY_SECONDS,
    SANITY_COMMIT_TOTAL,
    SANITY_MUTATIONS_COMMITTED_TOTAL,
)

logger = logging.getLogger(__name__)


def observe_commit(
    scope: str,
    status: str,
    latency_s: float,
    mutations: Iterable[Mutation] = (),
) -> None:
    """
    Record one commit attempt.

    Args:
        scope: "all" for whole-context commits, otherwise the document type name
        status: "success" or "error"
        latency_s: Round-trip time of the transport call
        mutations: Mutations sent; only counted when status is "success"
    """
    # Metrics must never mask the commit outcome
    try:
        SANITY_COMMIT_TOTAL.labels(scope=scope, status=status).inc()
        SANITY_COMMIT_LATENCY_SECONDS.labels(scope=scope).observe(latency_s)
        if status == "success":
            for mutation in mutations:
                SANITY_MUTATIONS_COMMITTED_TOTAL.labels(
                    mutation_type=mutation.mutation_type.value
                ).inc()
    except Exception:
        logger.debug("Failed to record commit metrics", exc_info=True)


__all__ = [
    "observe_commit",
    "SANITY_COMMIT_TOTAL",
    "SANITY_COMMIT_LATENCY_SECONDS",
    "SANITY_MUTATIONS_COMMITTED_TOTAL",
]
