from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Optional, Sequence

import httpx

from ..config import SanityOptions, SerializerConfig
from ..documents import document_type_name
from ..errors import TransportError
from ..mutations.models import (
    Mutation,
    MutationResponse,
    MutationResult,
    MutationType,
    PatchOperations,
    Visibility,
)

logger = logging.getLogger(__name__)


def encode_patch(document_id: str, patch: PatchOperations, serializer: SerializerConfig) -> dict[str, Any]:
    body: dict[str, Any] = {"id": document_id}
    if patch.set:
        body["set"] = serializer.encode(patch.set)
    if patch.set_if_missing:
        body["setIfMissing"] = serializer.encode(patch.set_if_missing)
    if patch.unset:
        body["unset"] = [serializer.encode_path(path) for path in patch.unset]
    if patch.inc:
        body["inc"] = {serializer.encode_path(k): v for k, v in patch.inc.items()}
    if patch.dec:
        body["dec"] = {serializer.encode_path(k): v for k, v in patch.dec.items()}
    if patch.if_revision_id:
        body["ifRevisionID"] = patch.if_revision_id
    return body


def encode_mutation(mutation: Mutation, serializer: SerializerConfig) -> dict[str, Any]:
    """
    Encode one mutation as an entry of the ``mutations`` array.
    """
    op = mutation.mutation_type
    if op == MutationType.DELETE:
        return {op.value: {"id": mutation.document_id}}
    if op == MutationType.PATCH:
        if mutation.patch is None:
            raise TransportError(f"patch mutation for {mutation.document_id!r} has no operations")
        return {op.value: encode_patch(mutation.document_id, mutation.patch, serializer)}

    document = serializer.encode(mutation.document)
    if not isinstance(document, dict):
        raise TransportError(
            f"{op.value} payload for {mutation.doc_type.__name__} did not encode to an object"
        )
    if not document.get("_type"):
        document["_type"] = document_type_name(mutation.doc_type)
    if mutation.document_id:
        document["_id"] = mutation.document_id
    return {op.value: document}


def parse_mutation_response(body: Mapping[str, Any]) -> MutationResponse:
    results = [
        MutationResult(
            id=item.get("id"),
            operation=item.get("operation"),
            document=item.get("document"),
        )
        for item in body.get("results") or []
    ]
    return MutationResponse(
        transaction_id=body.get("transactionId"),
        results=results,
        success=True,
    )


class HttpTransport:
    """
    Transport backed by the document store's HTTP API.

    Usage:
        transport = HttpTransport(options, SerializerConfig())
        response = await transport.execute_transaction(
            mutations, return_ids=True, return_documents=False, visibility=Visibility.SYNC
        )
        await transport.aclose()

    Does not retry. Every failure surfaces as TransportError.
    """

    def __init__(
        self,
        options: SanityOptions,
        serializer: Optional[SerializerConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.options = options
        self.serializer = serializer or SerializerConfig()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=options.timeout_s)

    def _base_url(self, use_cdn: bool = False) -> str:
        host = "apicdn.sanity.io" if use_cdn else "api.sanity.io"
        return f"https://{self.options.project_id}.{host}/v{self.options.api_version}"

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.options.token:
            headers["Authorization"] = f"Bearer {self.options.token}"
        return headers

    async def _send(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(method, url, headers=self._headers(), **kwargs)
        except httpx.HTTPError as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc

        try:
            body = response.json()
        except ValueError as exc:
            if response.is_success:
                raise TransportError(
                    f"{method} {url} returned an undecodable body",
                    status_code=response.status_code,
                    response_body=response.text,
                ) from exc
            body = response.text

        if not response.is_success:
            raise TransportError(
                f"{method} {url} failed with HTTP {response.status_code}",
                status_code=response.status_code,
                response_body=body,
            )
        return body

    async def execute_transaction(
        self,
        mutations: Sequence[Mutation],
        *,
        return_ids: bool = False,
        return_documents: bool = False,
        visibility: Visibility = Visibility.SYNC,
    ) -> MutationResponse:
        payload = {"mutations": [encode_mutation(m, self.serializer) for m in mutations]}
        url = f"{self._base_url()}/data/mutate/{self.options.dataset}"
        params = {
            "returnIds": "true" if return_ids else "false",
            "returnDocuments": "true" if return_documents else "false",
            "visibility": Visibility(visibility).value,
        }
        logger.debug("Sending %d mutations to %s", len(mutations), url)
        body = await self._send("POST", url, params=params, json=payload)
        if not isinstance(body, Mapping):
            raise TransportError("mutate response is not a JSON object", response_body=body)
        return parse_mutation_response(body)

    async def fetch(self, query: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        url = f"{self._base_url(self.options.use_cdn)}/data/query/{self.options.dataset}"
        query_params = {"query": query}
        for key, value in (params or {}).items():
            query_params[f"${key}"] = json.dumps(value)
        body = await self._send("GET", url, params=query_params)
        if not isinstance(body, Mapping):
            raise TransportError("query response is not a JSON object", response_body=body)
        return body.get("result")

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
