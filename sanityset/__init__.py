from .config import SanityOptions, SerializerConfig
from .context import DataContext
from .document_set import DocumentSet
from .errors import (
    InvalidMutationError,
    NoPendingChangesError,
    SanitySetError,
    TransportError,
)
from .mutations import (
    Mutation,
    MutationBatch,
    MutationBuilder,
    MutationResponse,
    MutationResult,
    MutationType,
    Visibility,
)
from .transport import HttpTransport, Transport

__all__ = [
    "DataContext",
    "DocumentSet",
    "SanityOptions",
    "SerializerConfig",
    "Mutation",
    "MutationBatch",
    "MutationBuilder",
    "MutationResponse",
    "MutationResult",
    "MutationType",
    "Visibility",
    "Transport",
    "HttpTransport",
    "SanitySetError",
    "InvalidMutationError",
    "NoPendingChangesError",
    "TransportError",
]
