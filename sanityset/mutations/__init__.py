from .batch import MutationBatch
from .builder import MutationBuilder
from .models import (
    Mutation,
    MutationResponse,
    MutationResult,
    MutationType,
    PatchOperations,
    Visibility,
)

__all__ = [
    "Mutation",
    "MutationBatch",
    "MutationBuilder",
    "MutationResponse",
    "MutationResult",
    "MutationType",
    "PatchOperations",
    "Visibility",
]
