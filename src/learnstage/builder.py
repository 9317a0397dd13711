"""Static site builder.

Enumerates every document of every collection and writes one JSON payload
per route, plus a routes manifest:

    dist/
    ├── index.json                   # home page
    ├── routes.json                  # collection -> route paths
    ├── instructors/
    │   └── jane-doe.json
    └── lessons/
        └── track-a/
            └── intro.json
"""

import asyncio
import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from learnstage.content import ContentSource, list_identifiers
from learnstage.core.collections import COLLECTIONS, Collection
from learnstage.core.renderer import DocumentRenderer, RenderedDocument
from learnstage.core.types import URLPath

logger = logging.getLogger(__name__)


class BuildError(Exception):
    """Raised when one or more collections failed to build."""

    def __init__(self, failures: dict[str, BaseException]) -> None:
        self.failures = failures
        details = "; ".join(f"{name}: {error}" for name, error in failures.items())
        super().__init__(f"Build failed for {', '.join(failures)} ({details})")


@dataclass
class BuildResult:
    """Routes written per collection."""

    routes: dict[str, list[URLPath]]

    @property
    def total(self) -> int:
        return sum(len(paths) for paths in self.routes.values())


def output_file(output_dir: Path, path: str) -> Path:
    """Map a route path to its output JSON file."""
    relative = path.strip("/")
    if not relative:
        return output_dir / "index.json"
    target = output_dir.joinpath(*relative.split("/"))
    return target.with_name(target.name + ".json")


class StaticSiteBuilder:
    """Pre-generates every routable document."""

    def __init__(
        self,
        source: ContentSource,
        renderer: DocumentRenderer,
        output_dir: Path,
    ) -> None:
        self._source = source
        self._renderer = renderer
        self._output_dir = output_dir

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    async def build(self, collections: Iterable[Collection] = COLLECTIONS) -> BuildResult:
        """Build all collections.

        Collections are enumerated and rendered concurrently. A collection
        whose enumeration or rendering fails writes nothing; the others
        still complete before BuildError is raised. Pages listed in the
        previous build's manifest are removed first, so documents that no
        longer exist, and collections that failed, leave nothing behind.

        Args:
            collections: Collections to build

        Returns:
            BuildResult with the routes written per collection

        Raises:
            BuildError: If any collection failed
        """
        collections = list(collections)
        results = await asyncio.gather(
            *(self._render_collection(c) for c in collections),
            return_exceptions=True,
        )

        self._remove_previous_output()

        routes: dict[str, list[URLPath]] = {}
        failures: dict[str, BaseException] = {}
        for collection, result in zip(collections, results, strict=True):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.error(f"Failed to build {collection.name}: {result}")
                failures[collection.name] = result
                continue
            routes[collection.name] = self._write(result)
            logger.info(f"Built {len(result)} {collection.label.lower()}")

        self._write_manifest(routes)

        if failures:
            raise BuildError(failures)
        return BuildResult(routes=routes)

    async def enumerate_routes(self, collection: Collection) -> list[URLPath]:
        """List the route path of every document in a collection."""
        identifiers = await list_identifiers(self._source, collection)
        return [collection.route_path(identifier) for identifier in identifiers]

    async def _render_collection(self, collection: Collection) -> list[RenderedDocument]:
        """Render every document of a collection without writing anything."""
        identifiers = await list_identifiers(self._source, collection)
        rendered = []
        for identifier in identifiers:
            document = await self._source.get_one(collection, identifier)
            rendered.append(self._renderer.render(collection, document))
        return rendered

    def _write(self, documents: list[RenderedDocument]) -> list[URLPath]:
        paths = []
        for document in documents:
            target = output_file(self._output_dir, document.path)
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(
                json.dumps(document.to_dict(), ensure_ascii=False, indent=2),
                encoding="utf-8",
            )
            paths.append(document.path)
        return paths

    def _remove_previous_output(self) -> None:
        """Delete every page the previous build listed in its manifest."""
        manifest = self._output_dir / "routes.json"
        if not manifest.is_file():
            return
        try:
            previous = json.loads(manifest.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring unreadable manifest {manifest}: {e}")
            return
        if not isinstance(previous, dict):
            return

        removed = 0
        for paths in previous.values():
            for path in paths if isinstance(paths, list) else []:
                if ".." in str(path).split("/"):
                    continue
                target = output_file(self._output_dir, str(path))
                if target.is_file():
                    target.unlink()
                    removed += 1
                    self._prune_empty_parents(target.parent)
        logger.debug(f"Removed {removed} pages from the previous build")

    def _prune_empty_parents(self, directory: Path) -> None:
        while directory != self._output_dir and directory.is_relative_to(self._output_dir):
            if any(directory.iterdir()):
                return
            directory.rmdir()
            directory = directory.parent

    def _write_manifest(self, routes: dict[str, list[URLPath]]) -> None:
        self._output_dir.mkdir(parents=True, exist_ok=True)
        manifest = self._output_dir / "routes.json"
        manifest.write_text(json.dumps(routes, indent=2), encoding="utf-8")
