from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, Any, Generic, Mapping, Optional, Sequence, TypeVar

from .documents import SYSTEM_FIELDS, document_id_field, document_type_name, get_document_id
from .errors import InvalidMutationError
from .mutations.batch import MutationBatch
from .mutations.models import Mutation, MutationType, PatchOperations

if TYPE_CHECKING:
    from .context import DataContext

TDoc = TypeVar("TDoc")


def _document_fields(document: Any) -> dict[str, Any]:
    if isinstance(document, Mapping):
        fields = dict(document)
    elif dataclasses.is_dataclass(document) and not isinstance(document, type):
        fields = {f.name: getattr(document, f.name) for f in dataclasses.fields(document)}
    else:
        fields = dict(vars(document))
    id_field = document_id_field(document)
    return {k: v for k, v in fields.items() if k not in SYSTEM_FIELDS and k != id_field}


class DocumentSet(Generic[TDoc]):
    """
    Typed view over one document type of a DataContext.

    Recording methods are synchronous and only append to the context's
    mutation batch for this type; nothing is sent until the context commits.
    Each returns the Mutation it recorded.

    Usage:
        posts = context.document_set(Post)
        posts.create(Post(_id="post-1", title="Hello"))
        posts.patch("post-2", set={"title": "Renamed"})
        posts.delete_by_id("post-3")
        await context.commit()
    """

    def __init__(self, context: "DataContext", doc_type: type[TDoc]) -> None:
        self.context = context
        self.doc_type = doc_type
        self.type_name = document_type_name(doc_type)

    @property
    def mutations(self) -> MutationBatch:
        return self.context.mutations.for_type(self.doc_type)

    @property
    def pending(self) -> int:
        return self.mutations.count

    def _require_id(self, document_id: Optional[str], action: str) -> str:
        if not document_id:
            raise InvalidMutationError(
                f"Cannot {action} {self.doc_type.__name__} without a document id"
            )
        return document_id

    def _record(self, mutation: Mutation) -> Mutation:
        self.mutations.add(mutation)
        return mutation

    def create(self, document: TDoc) -> Mutation:
        """Create a document; the id may be left for the remote side to assign."""
        return self._record(
            Mutation(
                doc_type=self.doc_type,
                mutation_type=MutationType.CREATE,
                document_id=get_document_id(document),
                document=document,
            )
        )

    def create_or_replace(self, document: TDoc) -> Mutation:
        doc_id = self._require_id(get_document_id(document), "create or replace")
        return self._record(
            Mutation(
                doc_type=self.doc_type,
                mutation_type=MutationType.CREATE_OR_REPLACE,
                document_id=doc_id,
                document=document,
            )
        )

    def create_if_not_exists(self, document: TDoc) -> Mutation:
        doc_id = self._require_id(get_document_id(document), "create if not exists")
        return self._record(
            Mutation(
                doc_type=self.doc_type,
                mutation_type=MutationType.CREATE_IF_NOT_EXISTS,
                document_id=doc_id,
                document=document,
            )
        )

    def update(self, document: TDoc) -> Mutation:
        """
        Record a patch setting every non-system field of ``document``.
        """
        doc_id = self._require_id(get_document_id(document), "update")
        return self.patch(doc_id, set=_document_fields(document))

    def patch(
        self,
        document_id: str,
        *,
        set: Optional[Mapping[str, Any]] = None,
        set_if_missing: Optional[Mapping[str, Any]] = None,
        unset: Optional[Sequence[str]] = None,
        inc: Optional[Mapping[str, float]] = None,
        dec: Optional[Mapping[str, float]] = None,
        if_revision_id: Optional[str] = None,
    ) -> Mutation:
        """
        Record a partial update of an existing document.

        Raises:
            InvalidMutationError: If document_id is empty or no operation is given
        """
        doc_id = self._require_id(document_id, "patch")
        operations = PatchOperations(
            set=set,
            set_if_missing=set_if_missing,
            unset=unset,
            inc=inc,
            dec=dec,
            if_revision_id=if_revision_id,
        )
        if operations.is_empty():
            raise InvalidMutationError(f"Patch for {doc_id!r} contains no operations")
        return self._record(
            Mutation(
                doc_type=self.doc_type,
                mutation_type=MutationType.PATCH,
                document_id=doc_id,
                patch=operations,
            )
        )

    def delete(self, document: TDoc) -> Mutation:
        return self.delete_by_id(get_document_id(document))

    def delete_by_id(self, document_id: Optional[str]) -> Mutation:
        doc_id = self._require_id(document_id, "delete")
        return self._record(
            Mutation(
                doc_type=self.doc_type,
                mutation_type=MutationType.DELETE,
                document_id=doc_id,
            )
        )

    async def get(self, document_id: str) -> Optional[dict[str, Any]]:
        """Fetch one document of this type by id, or None."""
        doc_id = self._require_id(document_id, "get")
        return await self.context.transport.fetch(
            "*[_type == $type && _id == $id][0]",
            {"type": self.type_name, "id": doc_id},
        )

    async def all(self) -> list[dict[str, Any]]:
        result = await self.context.transport.fetch(
            "*[_type == $type]", {"type": self.type_name}
        )
        return list(result or [])
