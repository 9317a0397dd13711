"""Content source backed by the CMS GraphQL content API.

Uses the connection queries the CMS generates per collection
(``lessonConnection(first, after)``) and the single-document queries
(``lesson(relativePath)``).
"""

import logging
from typing import Any, NotRequired, TypedDict

import httpx

from learnstage.core.collections import Collection
from learnstage.core.documents import (
    ContentServiceError,
    Document,
    DocumentNotFoundError,
    DocumentSummary,
    DocumentSys,
)
from learnstage.core.enumerator import ContentPage
from learnstage.core.types import RouteIdentifier

logger = logging.getLogger(__name__)

SYS_SELECTION = "_sys { filename basename breadcrumbs relativePath extension }"


# Content API Response TypedDicts


class SysDict(TypedDict):
    """System metadata of a document."""

    filename: str
    basename: str
    breadcrumbs: list[str]
    relativePath: str
    extension: str


class NodeDict(TypedDict):
    """Document node."""

    _sys: SysDict
    _values: NotRequired[dict[str, Any]]


class EdgeDict(TypedDict):
    """Connection edge."""

    node: NodeDict | None


class PageInfoDict(TypedDict):
    """Connection page info."""

    hasNextPage: bool
    endCursor: str | None


class ConnectionDict(TypedDict):
    """Connection result for one collection."""

    pageInfo: PageInfoDict
    edges: list[EdgeDict | None] | None


def connection_query(collection: Collection) -> str:
    return (
        f"query {collection.name}Connection($first: Float, $after: String) {{ "
        f"{collection.name}Connection(first: $first, after: $after) {{ "
        "pageInfo { hasNextPage endCursor } "
        f"edges {{ node {{ {SYS_SELECTION} }} }} }} }}"
    )


def document_query(collection: Collection) -> str:
    return (
        f"query {collection.name}($relativePath: String!) {{ "
        f"{collection.name}(relativePath: $relativePath) {{ "
        f"... on Document {{ {SYS_SELECTION} _values }} }} }}"
    )


class GraphQLContentSource:
    """Async client for the CMS content API."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        url: str,
        *,
        token: str | None = None,
        page_size: int = 50,
    ) -> None:
        """Initialize content API client.

        Args:
            client: httpx AsyncClient used for all requests
            url: GraphQL endpoint (e.g., https://cms.example.com/api/tina/gql)
            token: Optional bearer token
            page_size: Documents requested per listing page
        """
        self.client = client
        self.url = url
        self.token = token
        self.page_size = page_size

    async def list_page(
        self, collection: Collection, cursor: str | None
    ) -> ContentPage[DocumentSummary]:
        """Fetch one connection page.

        Raises:
            httpx.HTTPError: If the request fails
            ContentServiceError: If the API reports errors
        """
        variables: dict[str, Any] = {"first": self.page_size}
        if cursor is not None:
            variables["after"] = cursor

        payload = await self._query(connection_query(collection), variables)
        errors = payload.get("errors")
        if errors:
            raise ContentServiceError(
                f"{collection.name}Connection failed: {_error_messages(errors)}"
            )

        connection: ConnectionDict = payload["data"][f"{collection.name}Connection"]
        documents = [
            DocumentSummary(sys=_to_sys(collection, edge["node"]["_sys"]))
            for edge in connection.get("edges") or []
            if edge is not None and edge.get("node") is not None
        ]
        page_info = connection["pageInfo"]
        has_more = bool(page_info["hasNextPage"])
        return ContentPage(
            documents=documents,
            has_more=has_more,
            next_cursor=page_info.get("endCursor") if has_more else None,
        )

    async def get_one(self, collection: Collection, identifier: RouteIdentifier) -> Document:
        """Fetch one document with all of its field values.

        Raises:
            httpx.HTTPError: If the request fails
            DocumentNotFoundError: If the API does not return the document
        """
        relative_path = collection.relative_path(identifier)
        payload = await self._query(
            document_query(collection), {"relativePath": relative_path}
        )
        node: NodeDict | None = (payload.get("data") or {}).get(collection.name)
        if payload.get("errors") or node is None:
            logger.debug(
                f"{collection.name} {relative_path} not found: "
                f"{_error_messages(payload.get('errors') or [])}"
            )
            raise DocumentNotFoundError(collection.name, identifier)

        values = dict(node.get("_values") or {})
        body = values.pop("body", "")
        return Document(
            sys=_to_sys(collection, node["_sys"]),
            fields=values,
            body=body if isinstance(body, str) else "",
        )

    async def _query(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        response = await self.client.post(
            self.url,
            json={"query": query, "variables": variables},
            headers=headers,
        )
        if response.status_code >= 400:
            logger.error(f"Error response: {response.text}")
        response.raise_for_status()

        data: dict[str, Any] = response.json()
        return data


def _to_sys(collection: Collection, sys: SysDict) -> DocumentSys:
    return DocumentSys(
        collection=collection.name,
        relative_path=sys["relativePath"],
        filename=sys["filename"],
        basename=sys["basename"],
        extension=sys["extension"],
        breadcrumbs=tuple(sys["breadcrumbs"]),
    )


def _error_messages(errors: list[dict[str, Any]]) -> str:
    return "; ".join(str(e.get("message", e)) for e in errors)
