from __future__ import annotations

from typing import Any, Optional


class SanitySetError(Exception):
    """Base exception for sanityset errors."""


class InvalidMutationError(SanitySetError):
    """A locally recorded mutation is malformed (e.g. missing document id)."""


class NoPendingChangesError(SanitySetError):
    """A scoped commit was requested for a document type with nothing pending."""

    def __init__(self, doc_type: type) -> None:
        super().__init__(f"No pending changes for document type {doc_type.__name__}")
        self.doc_type = doc_type


class TransportError(SanitySetError):
    """Network, serialization or remote-rejection failure from the transport."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_body: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body
