"""Content collection registry.

Each collection maps a storage directory of markdown/MDX files to a URL
prefix and a routing scheme (flat filename slugs or nested breadcrumbs).
"""

from dataclasses import dataclass
from pathlib import PurePosixPath

from learnstage.core.documents import DocumentSummary
from learnstage.core.enumerator import RoutingScheme, route_segments
from learnstage.core.types import RouteIdentifier, URLPath

HOME_DOCUMENT = "home"


@dataclass(frozen=True)
class Collection:
    """Declaration of one content collection."""

    name: str
    label: str
    path: str
    format: str
    route_prefix: str
    routing: RoutingScheme
    title_fields: tuple[str, ...] = ("name",)
    rich_text_fields: tuple[str, ...] = ()
    reference_fields: tuple[str, ...] = ()

    def identifier_of(self, summary: DocumentSummary) -> RouteIdentifier:
        """Derive the route identifier using this collection's scheme."""
        return self.routing.identifier_of(summary)

    def relative_path(self, identifier: RouteIdentifier) -> str:
        """Storage path of a document relative to the collection root.

        Args:
            identifier: Filename slug or breadcrumb segments

        Returns:
            Relative path with extension (e.g., "track-a/intro.mdx")
        """
        return "/".join(route_segments(identifier)) + f".{self.format}"

    def route_path(self, identifier: RouteIdentifier) -> URLPath:
        """Externally visible path of a document.

        The ``home`` page of a prefix-less collection maps to "/".
        """
        segments = route_segments(identifier)
        if not self.route_prefix:
            if segments == (HOME_DOCUMENT,):
                return URLPath("/")
            return URLPath("/" + "/".join(segments))
        return URLPath(f"/{self.route_prefix}/" + "/".join(segments))

    def index_path(self) -> URLPath:
        return URLPath(f"/{self.route_prefix}" if self.route_prefix else "/")

    def parse_route(self, path: str) -> RouteIdentifier:
        """Convert a request path below the prefix into an identifier.

        Args:
            path: Path without the collection prefix (e.g., "track-a/intro")

        Returns:
            Identifier in this collection's scheme

        Raises:
            ValueError: If the path cannot address a document here
        """
        segments = tuple(s for s in path.strip("/").split("/") if s)
        if not segments and not self.route_prefix:
            segments = (HOME_DOCUMENT,)
        if not segments:
            raise ValueError(f"Empty route for {self.name}")
        if any(s in (".", "..") for s in segments):
            raise ValueError(f"Invalid route segment in {path!r}")
        if self.routing is RoutingScheme.FILENAME:
            if len(segments) != 1:
                raise ValueError(f"{self.name} routes have exactly one segment")
            return segments[0]
        return segments


INSTRUCTOR = Collection(
    name="instructor",
    label="Instructors",
    path="content/instructors",
    format="md",
    route_prefix="instructors",
    routing=RoutingScheme.FILENAME,
    title_fields=("firstName", "lastName"),
    rich_text_fields=("bio",),
)

LAB = Collection(
    name="lab",
    label="Labs",
    path="content/labs",
    format="mdx",
    route_prefix="labs",
    routing=RoutingScheme.BREADCRUMBS,
    rich_text_fields=("description",),
    reference_fields=("module", "topic"),
)

LESSON = Collection(
    name="lesson",
    label="Lessons",
    path="content/lessons",
    format="mdx",
    route_prefix="lessons",
    routing=RoutingScheme.BREADCRUMBS,
    reference_fields=("module", "lab"),
)

MODULE = Collection(
    name="module",
    label="Modules",
    path="content/modules",
    format="mdx",
    route_prefix="modules",
    routing=RoutingScheme.BREADCRUMBS,
    reference_fields=("instructor", "topic"),
)

TRACK = Collection(
    name="track",
    label="Tracks",
    path="content/tracks",
    format="mdx",
    route_prefix="tracks",
    routing=RoutingScheme.BREADCRUMBS,
    rich_text_fields=("description",),
    reference_fields=("topic",),
)

TOPIC = Collection(
    name="topic",
    label="Topics",
    path="content/topics",
    format="md",
    route_prefix="topics",
    routing=RoutingScheme.FILENAME,
    rich_text_fields=("description",),
)

SKILL = Collection(
    name="skill",
    label="Skills",
    path="content/skills",
    format="md",
    route_prefix="skills",
    routing=RoutingScheme.FILENAME,
    rich_text_fields=("description",),
    reference_fields=("topic",),
)

PAGE = Collection(
    name="page",
    label="Pages",
    path="content/pages",
    format="mdx",
    route_prefix="",
    routing=RoutingScheme.BREADCRUMBS,
    title_fields=("title",),
)

COLLECTIONS: tuple[Collection, ...] = (
    INSTRUCTOR,
    LAB,
    LESSON,
    MODULE,
    TRACK,
    TOPIC,
    SKILL,
    PAGE,
)

# Collections with their own route namespace (everything except pages)
CONTENT_COLLECTIONS: tuple[Collection, ...] = (
    INSTRUCTOR,
    LAB,
    LESSON,
    MODULE,
    TRACK,
    TOPIC,
    SKILL,
)

_BY_NAME = {c.name: c for c in COLLECTIONS}
_BY_PREFIX = {c.route_prefix: c for c in CONTENT_COLLECTIONS}


def get_collection(name: str) -> Collection:
    """Look up a collection by name.

    Raises:
        KeyError: If no collection has that name
    """
    try:
        return _BY_NAME[name]
    except KeyError:
        raise KeyError(f"Unknown collection: {name}") from None


def get_collection_by_prefix(prefix: str) -> Collection | None:
    return _BY_PREFIX.get(prefix)


def resolve_reference(value: str) -> URLPath | None:
    """Resolve a stored reference to the referenced document's route.

    References name the target file from the content root, e.g.
    "content/modules/intro/basics.mdx".

    Args:
        value: Reference value as stored in front matter

    Returns:
        Route path, or None if no collection owns the path
    """
    path = PurePosixPath(value)
    for collection in COLLECTIONS:
        root = PurePosixPath(collection.path)
        if not path.is_relative_to(root) or path == root:
            continue
        relative = path.relative_to(root)
        segments = (*relative.parent.parts, relative.stem)
        if collection.routing is RoutingScheme.FILENAME:
            return collection.route_path(segments[-1])
        return collection.route_path(segments)
    return None
