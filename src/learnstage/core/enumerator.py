"""Static path enumeration over paginated content listings.

Drains a cursor-paginated listing query to produce every route identifier
of one collection, the input set for pre-generating its pages.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

from learnstage.core.documents import DocumentSummary
from learnstage.core.types import RouteIdentifier

logger = logging.getLogger(__name__)

D = TypeVar("D")
I = TypeVar("I")  # noqa: E741


@dataclass
class ContentPage(Generic[D]):
    """One page of a listing query.

    ``next_cursor`` is present iff ``has_more`` is true and is only valid
    for the query that produced it.
    """

    documents: list[D] = field(default_factory=list)
    has_more: bool = False
    next_cursor: str | None = None


FetchPage = Callable[[str | None], Awaitable[ContentPage[D]]]


async def enumerate_identifiers(
    fetch_page: FetchPage[D],
    identifier_of: Callable[[D], I],
) -> list[I]:
    """Walk all pages of a listing and collect one identifier per document.

    Pages are requested strictly one after another, each with the cursor
    of the page just received. ``has_more`` alone decides whether another
    page is requested. A page that comes back empty although more were
    announced ends the walk, as does a page announcing more without a
    cursor to fetch them with.

    Errors raised by ``fetch_page`` propagate unchanged; no partial list
    is returned.

    Args:
        fetch_page: Bound listing query taking an optional cursor
        identifier_of: Extracts the route identifier from a document

    Returns:
        Identifiers in page order, then in-page order
    """
    page = await fetch_page(None)
    if not page.documents:
        return []

    identifiers = [identifier_of(document) for document in page.documents]
    pages = 1

    while page.has_more:
        if page.next_cursor is None:
            logger.debug(f"No cursor after {pages} pages despite has_more, stopping")
            break
        page = await fetch_page(page.next_cursor)
        if not page.documents:
            logger.debug(f"Empty page after {pages} pages despite has_more, stopping")
            break
        identifiers.extend(identifier_of(document) for document in page.documents)
        pages += 1

    logger.debug(f"Enumerated {len(identifiers)} identifiers over {pages} pages")
    return identifiers


def filename_identifier(document: DocumentSummary) -> str:
    """Identifier for flat collections: the filename without extension."""
    return document.sys.filename


def breadcrumb_identifier(document: DocumentSummary) -> tuple[str, ...]:
    """Identifier for nested collections: path segments from the root."""
    return tuple(document.sys.breadcrumbs)


def route_segments(identifier: RouteIdentifier) -> tuple[str, ...]:
    """Normalize either identifier form to its path segments."""
    if isinstance(identifier, str):
        return (identifier,)
    return tuple(identifier)


class RoutingScheme(Enum):
    """How a collection derives route identifiers from documents."""

    FILENAME = "filename"
    BREADCRUMBS = "breadcrumbs"

    @property
    def identifier_of(self) -> Callable[[DocumentSummary], RouteIdentifier]:
        if self is RoutingScheme.FILENAME:
            return filename_identifier
        return breadcrumb_identifier
