"""Route listing endpoint.

Exposes the static path enumeration of one collection.
"""

from aiohttp import web

from learnstage.app_keys import source_key
from learnstage.content import list_identifiers
from learnstage.core.collections import get_collection


def create_routes_routes() -> list[web.RouteDef]:
    return [
        web.get("/api/routes/{collection}", get_routes),
    ]


async def get_routes(request: web.Request) -> web.Response:
    name = request.match_info["collection"]
    try:
        collection = get_collection(name)
    except KeyError:
        return web.json_response(
            {"error": "Collection not found", "collection": name},
            status=404,
        )

    source = request.app[source_key]
    identifiers = await list_identifiers(source, collection)
    return web.json_response(
        {
            "collection": collection.name,
            "routes": [collection.route_path(identifier) for identifier in identifiers],
        }
    )
