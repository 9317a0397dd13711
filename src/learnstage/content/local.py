"""Content source backed by the local content tree.

Documents are markdown/MDX files with YAML front matter, stored the way
the CMS commits them:

    content/
    ├── instructors/
    │   └── jane-doe.md
    └── lessons/
        └── track-a/
            └── intro.mdx
"""

import asyncio
import base64
import binascii
import logging
import re
from datetime import date, datetime
from pathlib import Path

import yaml

from learnstage.core.collections import Collection
from learnstage.core.documents import (
    ContentServiceError,
    Document,
    DocumentNotFoundError,
    DocumentSummary,
    DocumentSys,
)
from learnstage.core.enumerator import ContentPage, RoutingScheme
from learnstage.core.types import JSONValue, RouteIdentifier

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50

FRONT_MATTER_PATTERN = re.compile(r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL)


def encode_cursor(relative_path: str) -> str:
    return base64.urlsafe_b64encode(relative_path.encode("utf-8")).decode("ascii")


def decode_cursor(cursor: str) -> str:
    """Decode a listing cursor back to the last relative path served.

    Raises:
        ContentServiceError: If the cursor is not one this source issued
    """
    try:
        decoded = base64.b64decode(cursor.encode("ascii"), altchars=b"-_", validate=True)
        relative_path = decoded.decode("utf-8")
    except (binascii.Error, UnicodeError, ValueError) as e:
        raise ContentServiceError(f"Invalid cursor: {cursor!r}") from e
    if not relative_path:
        raise ContentServiceError(f"Invalid cursor: {cursor!r}")
    return relative_path


def parse_front_matter(text: str) -> tuple[dict[str, JSONValue], str]:
    """Split a document into front matter fields and body.

    Args:
        text: Full document source

    Returns:
        Tuple of (fields, body). Documents without front matter have no fields.

    Raises:
        ContentServiceError: If front matter is not a YAML mapping
    """
    match = FRONT_MATTER_PATTERN.match(text)
    if match is None:
        return {}, text

    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as e:
        raise ContentServiceError(f"Invalid front matter: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ContentServiceError("Front matter must be a mapping")

    return {str(k): _normalize(v) for k, v in data.items()}, text[match.end() :]


def _normalize(value: object) -> JSONValue:
    """Convert YAML scalars that JSON cannot carry (dates) to strings."""
    if isinstance(value, datetime | date):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): _normalize(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_normalize(v) for v in value]
    return value


class FileContentSource:
    """Serves documents from ``content_dir`` with cursor pagination.

    Listings are sorted by relative path. A cursor encodes the last path
    served, so the next page always starts strictly after it.
    """

    def __init__(self, content_dir: Path, *, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        """Initialize source.

        Args:
            content_dir: Content root containing collection directories
            page_size: Maximum documents per listing page

        Raises:
            ValueError: If page_size is less than 1
        """
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self._content_dir = content_dir
        self._page_size = page_size

    @property
    def content_dir(self) -> Path:
        """Content root directory."""
        return self._content_dir

    @property
    def page_size(self) -> int:
        return self._page_size

    async def list_page(
        self, collection: Collection, cursor: str | None
    ) -> ContentPage[DocumentSummary]:
        paths = await asyncio.to_thread(self._scan, collection)

        if cursor is not None:
            after = decode_cursor(cursor)
            paths = [p for p in paths if p > after]

        selected = paths[: self._page_size]
        has_more = len(paths) > len(selected)
        logger.debug(
            f"Listing {collection.name}: {len(selected)} documents, has_more={has_more}"
        )
        return ContentPage(
            documents=[
                DocumentSummary(sys=DocumentSys.from_relative_path(collection.name, p))
                for p in selected
            ],
            has_more=has_more,
            next_cursor=encode_cursor(selected[-1]) if has_more else None,
        )

    async def get_one(self, collection: Collection, identifier: RouteIdentifier) -> Document:
        relative_path = collection.relative_path(identifier)
        source_path = self._resolve(collection, relative_path)
        if source_path is None or not source_path.is_file():
            raise DocumentNotFoundError(collection.name, identifier)

        try:
            text = await asyncio.to_thread(source_path.read_text, encoding="utf-8")
        except UnicodeDecodeError as e:
            raise ContentServiceError(f"{source_path} is not valid UTF-8: {e}") from e
        fields, body = parse_front_matter(text)
        return Document(
            sys=DocumentSys.from_relative_path(collection.name, relative_path),
            fields=fields,
            body=body,
            source_path=source_path,
        )

    def _collection_root(self, collection: Collection) -> Path:
        return self._content_dir / collection.path

    def _resolve(self, collection: Collection, relative_path: str) -> Path | None:
        """Resolve a relative path, rejecting anything outside the collection."""
        parts = relative_path.split("/")
        if any(part in ("", ".", "..") for part in parts):
            return None
        return self._collection_root(collection).joinpath(*parts)

    def _scan(self, collection: Collection) -> list[str]:
        root = self._collection_root(collection)
        if not root.is_dir():
            return []
        pattern = f"*.{collection.format}"
        # Filename identifiers only address files directly under the root
        if collection.routing is RoutingScheme.FILENAME:
            candidates = root.glob(pattern)
        else:
            candidates = root.rglob(pattern)
        return sorted(
            path.relative_to(root).as_posix() for path in candidates if path.is_file()
        )
