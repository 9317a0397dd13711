"""Document rendering.

Turns a fetched document into the payload served for its route: HTML body,
title, breadcrumbs and display-ready fields.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import mistune

from learnstage.core.blocks import render_blocks
from learnstage.core.collections import Collection, resolve_reference
from learnstage.core.documents import Document, DocumentSummary
from learnstage.core.enumerator import route_segments
from learnstage.core.types import JSONValue, RouteIdentifier, URLPath

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BreadcrumbItem:
    """Breadcrumb navigation item."""

    title: str
    path: str

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        return {"title": self.title, "path": self.path}


@dataclass
class RenderedDocument:
    """Result of rendering a document."""

    collection: str
    identifier: RouteIdentifier
    path: URLPath
    title: str
    html: str
    fields: dict[str, JSONValue]
    breadcrumbs: list[BreadcrumbItem]
    source_path: Path | None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON payload served for the route."""
        return {
            "meta": {
                "collection": self.collection,
                "title": self.title,
                "path": self.path,
                "source_file": str(self.source_path) if self.source_path else None,
            },
            "breadcrumbs": [b.to_dict() for b in self.breadcrumbs],
            "fields": self.fields,
            "content": self.html,
        }


class DocumentRenderer:
    """Renders documents of any collection.

    Markdown and MDX bodies go through mistune with raw HTML enabled, so
    MDX component tags pass through untouched for the client to hydrate.
    """

    def __init__(self) -> None:
        self._markdown = mistune.create_markdown(
            escape=False,
            plugins=["strikethrough", "table", "url"],
        )

    def render(self, collection: Collection, document: Document) -> RenderedDocument:
        """Render a document.

        Args:
            collection: Collection the document belongs to
            document: Fetched document

        Returns:
            RenderedDocument ready for serialization
        """
        identifier = collection.identifier_of(DocumentSummary(sys=document.sys))
        html = self.render_markdown(document.body)

        blocks = document.fields.get("blocks")
        if isinstance(blocks, list):
            html = render_blocks(blocks) + html

        return RenderedDocument(
            collection=collection.name,
            identifier=identifier,
            path=collection.route_path(identifier),
            title=_title(collection, document),
            html=html,
            fields=self._render_fields(collection, document.fields),
            breadcrumbs=_breadcrumbs(collection, identifier),
            source_path=document.source_path,
        )

    def render_markdown(self, text: str) -> str:
        if not text.strip():
            return ""
        return str(self._markdown(text))

    def _render_fields(
        self, collection: Collection, fields: dict[str, JSONValue]
    ) -> dict[str, JSONValue]:
        rendered = dict(fields)
        for name in collection.rich_text_fields:
            value = rendered.get(name)
            if isinstance(value, str):
                rendered[name] = self.render_markdown(value)
        for name in collection.reference_fields:
            value = rendered.get(name)
            if isinstance(value, str) and value:
                path = resolve_reference(value)
                if path is None:
                    logger.debug(f"Unresolved {collection.name}.{name} reference: {value}")
                rendered[name] = {"value": value, "path": path}
        return rendered


def _title(collection: Collection, document: Document) -> str:
    parts = [
        str(document.fields[name]).strip()
        for name in collection.title_fields
        if document.fields.get(name) not in (None, "")
    ]
    return " ".join(p for p in parts if p) or document.sys.filename


def _breadcrumbs(collection: Collection, identifier: RouteIdentifier) -> list[BreadcrumbItem]:
    """Build breadcrumbs from Home down to the parent of the document."""
    breadcrumbs = [BreadcrumbItem(title="Home", path="/")]
    segments = route_segments(identifier)
    if collection.route_prefix:
        breadcrumbs.append(BreadcrumbItem(title=collection.label, path=collection.index_path()))
    for depth in range(1, len(segments)):
        breadcrumbs.append(
            BreadcrumbItem(
                title=segments[depth - 1],
                path=collection.route_path(segments[:depth]),
            )
        )
    return breadcrumbs
