"""Document API endpoints.

Renders one document per request and returns JSON with metadata,
breadcrumbs, fields and HTML content.
"""

import json
from hashlib import md5

from aiohttp import web

from learnstage.app_keys import renderer_key, revalidate_key, source_key
from learnstage.core.collections import CONTENT_COLLECTIONS, PAGE, Collection
from learnstage.core.documents import DocumentNotFoundError


def create_documents_routes() -> list[web.RouteDef]:
    routes = [
        web.get(f"/api/{collection.route_prefix}/{{path:.+}}", _handler(collection))
        for collection in CONTENT_COLLECTIONS
    ]
    routes.append(web.get("/api/pages/{path:.*}", _handler(PAGE)))
    return routes


def _handler(collection: Collection):
    async def handler(request: web.Request) -> web.StreamResponse:
        return await get_document(request, collection)

    return handler


async def get_document(request: web.Request, collection: Collection) -> web.StreamResponse:
    path = request.match_info["path"]
    source = request.app[source_key]
    renderer = request.app[renderer_key]

    try:
        identifier = collection.parse_route(path)
        document = await source.get_one(collection, identifier)
    except (ValueError, DocumentNotFoundError):
        return web.json_response(
            {"error": "Document not found", "path": path},
            status=404,
        )

    result = renderer.render(collection, document)
    payload = result.to_dict()
    etag = _compute_etag(json.dumps(payload, sort_keys=True, ensure_ascii=False))

    if request.headers.get("If-None-Match") == etag:
        return web.Response(status=304)

    return web.json_response(
        payload,
        headers={
            "ETag": etag,
            "Cache-Control": f"public, max-age={request.app[revalidate_key]}",
        },
    )


def _compute_etag(content: str) -> str:
    # First 16 hex chars (64 bits) of the payload hash
    content_hash = md5(content.encode("utf-8"), usedforsecurity=False).hexdigest()[:16]
    return f'"{content_hash}"'
