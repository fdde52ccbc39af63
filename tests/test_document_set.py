from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import pytest

from sanityset.context import DataContext
from sanityset.documents import SanityDocument
from sanityset.errors import InvalidMutationError
from sanityset.mutations.models import MutationType

from ._fakes import Post, RecordingTransport


@dataclass
class Tag:
    id: Optional[str] = None
    label: str = ""


class TestRecording:
    def test_create_appends_to_context_batch(self, context: DataContext) -> None:
        posts = context.document_set(Post)

        mutation = posts.create(Post(_id="p1", title="Hello"))

        assert mutation.mutation_type == MutationType.CREATE
        assert mutation.document_id == "p1"
        assert context.mutations.build_for(Post) == [mutation]
        assert posts.pending == 1

    def test_create_without_id_is_allowed(self, context: DataContext) -> None:
        mutation = context.document_set(Post).create(Post(title="no id"))

        assert mutation.document_id is None

    def test_create_variants_record_expected_types(self, context: DataContext) -> None:
        posts = context.document_set(Post)

        posts.create_or_replace(Post(_id="p1"))
        posts.create_if_not_exists({"_id": "p2", "title": "dict document"})

        assert [m.mutation_type for m in context.mutations.build()] == [
            MutationType.CREATE_OR_REPLACE,
            MutationType.CREATE_IF_NOT_EXISTS,
        ]

    def test_update_sets_non_system_fields(self, context: DataContext) -> None:
        mutation = context.document_set(Post).update(Post(_id="p1", title="T", body="B"))

        assert mutation.mutation_type == MutationType.PATCH
        assert mutation.document_id == "p1"
        assert mutation.patch.set == {"title": "T", "body": "B"}

    def test_update_does_not_set_plain_id_field(self, context: DataContext) -> None:
        mutation = context.document_set(Tag).update(Tag(id="t1", label="python"))

        assert mutation.document_id == "t1"
        assert mutation.patch.set == {"label": "python"}

    def test_patch_records_operations(self, context: DataContext) -> None:
        mutation = context.document_set(Post).patch(
            "p1", set={"title": "T"}, unset=["body"], inc={"views": 1}, if_revision_id="rev-1"
        )

        assert mutation.patch.set == {"title": "T"}
        assert mutation.patch.unset == ["body"]
        assert mutation.patch.inc == {"views": 1}
        assert mutation.patch.if_revision_id == "rev-1"

    def test_delete_accepts_document_or_id(self, context: DataContext) -> None:
        posts = context.document_set(Post)

        posts.delete(Post(_id="p1"))
        posts.delete_by_id("p2")

        assert [(m.mutation_type, m.document_id) for m in context.mutations.build()] == [
            (MutationType.DELETE, "p1"),
            (MutationType.DELETE, "p2"),
        ]

    def test_set_holds_no_state_of_its_own(self, context: DataContext) -> None:
        posts = context.document_set(Post)
        posts.create(Post(_id="p1"))

        context.clear_changes()

        assert posts.pending == 0


class TestInvalidMutations:
    @pytest.mark.parametrize("doc_id", [None, ""])
    def test_delete_without_id_fails_fast(self, context: DataContext, doc_id) -> None:
        posts = context.document_set(Post)

        with pytest.raises(InvalidMutationError):
            posts.delete(Post(_id=doc_id))
        with pytest.raises(InvalidMutationError):
            posts.delete_by_id(doc_id)

        assert context.mutations.count == 0

    @pytest.mark.parametrize("doc_id", [None, ""])
    def test_patch_and_update_without_id_fail_fast(self, context: DataContext, doc_id) -> None:
        posts = context.document_set(Post)

        with pytest.raises(InvalidMutationError):
            posts.patch(doc_id, set={"title": "x"})
        with pytest.raises(InvalidMutationError):
            posts.update(Post(_id=doc_id, title="x"))

        assert context.mutations.count == 0

    def test_replace_variants_require_id(self, context: DataContext) -> None:
        posts = context.document_set(Post)

        with pytest.raises(InvalidMutationError):
            posts.create_or_replace(Post(title="x"))
        with pytest.raises(InvalidMutationError):
            posts.create_if_not_exists({"title": "x"})

        assert context.mutations.count == 0

    def test_empty_patch_is_rejected(self, context: DataContext) -> None:
        with pytest.raises(InvalidMutationError, match="no operations"):
            context.document_set(Post).patch("p1")

        assert context.mutations.count == 0


class TestQueries:
    @pytest.mark.asyncio
    async def test_get_queries_by_type_and_id(self, context: DataContext, transport: RecordingTransport) -> None:
        transport.fetch_result = {"_id": "p1", "_type": "post"}

        doc = await context.document_set(Post).get("p1")

        assert doc == {"_id": "p1", "_type": "post"}
        query, params = transport.fetch_calls[0]
        assert "_id == $id" in query
        assert params == {"type": "post", "id": "p1"}

    @pytest.mark.asyncio
    async def test_all_returns_empty_list_for_no_result(self, context: DataContext, transport: RecordingTransport) -> None:
        transport.fetch_result = None

        assert await context.document_set(Post).all() == []

    @pytest.mark.asyncio
    async def test_builtin_sets_use_declared_type_names(self, context: DataContext, transport: RecordingTransport) -> None:
        transport.fetch_result = []

        await context.images.all()

        assert context.documents.doc_type is SanityDocument
        assert transport.fetch_calls[0][1] == {"type": "sanity.imageAsset"}
