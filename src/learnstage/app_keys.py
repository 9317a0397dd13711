"""Application keys for type-safe app configuration access."""

from aiohttp import web

from learnstage.content import ContentSource
from learnstage.core.renderer import DocumentRenderer

source_key = web.AppKey("source", ContentSource)
renderer_key = web.AppKey("renderer", DocumentRenderer)
revalidate_key = web.AppKey("revalidate", int)
