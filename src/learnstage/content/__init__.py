"""Content query services.

A content source answers two questions per collection: fetch one document
by route identifier, and list one page of document summaries.
"""

from typing import TYPE_CHECKING, Protocol

from learnstage.core.collections import Collection
from learnstage.core.documents import Document, DocumentSummary
from learnstage.core.enumerator import ContentPage, FetchPage, enumerate_identifiers
from learnstage.core.types import RouteIdentifier

if TYPE_CHECKING:
    import httpx

    from learnstage.config import ContentConfig


class ContentSource(Protocol):
    """Protocol for content query services."""

    async def get_one(self, collection: Collection, identifier: RouteIdentifier) -> Document:
        """Fetch a fully populated document.

        Raises:
            DocumentNotFoundError: If the identifier does not resolve
        """
        ...

    async def list_page(
        self, collection: Collection, cursor: str | None
    ) -> ContentPage[DocumentSummary]:
        """Fetch one page of document summaries, starting after ``cursor``."""
        ...


def fetch_page(source: ContentSource, collection: Collection) -> FetchPage[DocumentSummary]:
    """Bind a source's listing query to one collection."""

    async def fetch(cursor: str | None) -> ContentPage[DocumentSummary]:
        return await source.list_page(collection, cursor)

    return fetch


def create_source(
    content: "ContentConfig", client: "httpx.AsyncClient | None" = None
) -> ContentSource:
    """Create the content source selected by configuration.

    Args:
        content: Content configuration
        client: httpx AsyncClient, required for the graphql source

    Returns:
        Configured content source

    Raises:
        ValueError: If the graphql source is selected without a client or URL
    """
    if content.source == "graphql":
        from learnstage.content.graphql import GraphQLContentSource

        if client is None or content.graphql is None:
            raise ValueError("graphql source requires an HTTP client and content.graphql.url")
        return GraphQLContentSource(
            client,
            content.graphql.url,
            token=content.graphql.token,
            page_size=content.page_size,
        )

    from learnstage.content.local import FileContentSource

    return FileContentSource(content.content_dir, page_size=content.page_size)


async def list_identifiers(
    source: ContentSource, collection: Collection
) -> list[RouteIdentifier]:
    """Enumerate the route identifier of every document in a collection."""
    return await enumerate_identifiers(fetch_page(source, collection), collection.identifier_of)
