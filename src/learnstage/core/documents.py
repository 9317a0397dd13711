"""Document data structures shared by content sources and renderers.

Mirrors the system metadata a git-backed CMS attaches to every stored
file, so routing works the same whether documents come from the local
content tree or from the content API.
"""

from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

from learnstage.core.types import JSONValue, RouteIdentifier


class DocumentNotFoundError(LookupError):
    """Raised when a route identifier does not resolve to a document."""

    def __init__(self, collection: str, identifier: RouteIdentifier) -> None:
        self.collection = collection
        self.identifier = identifier
        super().__init__(f"Document not found in {collection}: {identifier!r}")


class ContentServiceError(RuntimeError):
    """Raised when the content service answers with an error."""


@dataclass(frozen=True)
class DocumentSys:
    """System metadata for one stored document."""

    collection: str
    relative_path: str
    filename: str
    basename: str
    extension: str
    breadcrumbs: tuple[str, ...]

    @classmethod
    def from_relative_path(cls, collection: str, relative_path: str) -> "DocumentSys":
        """Derive metadata from a path relative to the collection root.

        Args:
            collection: Collection name (e.g., "lesson")
            relative_path: Path with extension (e.g., "track-a/intro.mdx")

        Returns:
            DocumentSys with filename, basename and breadcrumbs filled in
        """
        path = PurePosixPath(relative_path)
        breadcrumbs = (*path.parent.parts, path.stem)
        return cls(
            collection=collection,
            relative_path=path.as_posix(),
            filename=path.stem,
            basename=path.name,
            extension=path.suffix,
            breadcrumbs=tuple(breadcrumbs),
        )


@dataclass(frozen=True)
class DocumentSummary:
    """Document reference as returned by a listing page."""

    sys: DocumentSys


@dataclass
class Document:
    """Fully populated document."""

    sys: DocumentSys
    fields: dict[str, JSONValue] = field(default_factory=dict)
    body: str = ""
    source_path: Path | None = None
