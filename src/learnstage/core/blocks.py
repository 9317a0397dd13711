"""Block-based page sections.

Marketing pages store an ordered list of blocks, each tagged with its
template. Rendering dispatches on the tag; unknown tags render nothing.
"""

import logging
from collections.abc import Callable
from html import escape
from typing import Any

import mistune

logger = logging.getLogger(__name__)

# GraphQL type names carry this prefix (PageBlocksHero -> hero)
TYPENAME_PREFIX = "PageBlocks"

_markdown = mistune.create_markdown(escape=False, plugins=["strikethrough", "table", "url"])

Block = dict[str, Any]


def block_type(block: Block) -> str | None:
    """Return the normalized type tag of a block.

    Accepts both the ``_template`` key of stored content and the
    ``__typename`` of API responses.
    """
    template = block.get("_template")
    if isinstance(template, str) and template:
        return template.lower()

    typename = block.get("__typename")
    if isinstance(typename, str) and typename.startswith(TYPENAME_PREFIX):
        return typename[len(TYPENAME_PREFIX) :].lower() or None
    return None


def _text(block: Block, key: str) -> str:
    value = block.get(key)
    return escape(str(value)) if value is not None else ""


def _actions(block: Block) -> str:
    links = []
    for action in block.get("actions") or []:
        if not isinstance(action, dict) or not action.get("label"):
            continue
        href = escape(str(action.get("link") or "#"), quote=True)
        links.append(f'<a class="action" href="{href}">{_text(action, "label")}</a>')
    if not links:
        return ""
    return f'<div class="actions">{"".join(links)}</div>'


def render_hero(block: Block) -> str:
    parts = []
    if block.get("tagline"):
        parts.append(f'<p class="tagline">{_text(block, "tagline")}</p>')
    if block.get("headline"):
        parts.append(f"<h1>{_text(block, 'headline')}</h1>")
    if block.get("text"):
        parts.append(f"<p>{_text(block, 'text')}</p>")
    parts.append(_actions(block))
    image = block.get("image")
    if isinstance(image, dict) and image.get("src"):
        src = escape(str(image["src"]), quote=True)
        alt = escape(str(image.get("alt") or ""), quote=True)
        parts.append(f'<img src="{src}" alt="{alt}">')
    return f'<section class="block hero">{"".join(parts)}</section>'


def render_callout(block: Block) -> str:
    text = _text(block, "text")
    if block.get("url"):
        href = escape(str(block["url"]), quote=True)
        text = f'<a href="{href}">{text}</a>'
    return f'<section class="block callout"><p>{text}</p></section>'


def render_stats(block: Block) -> str:
    items = [
        f'<li><strong>{_text(stat, "stat")}</strong> <span>{_text(stat, "type")}</span></li>'
        for stat in block.get("stats") or []
        if isinstance(stat, dict)
    ]
    return (
        '<section class="block stats">'
        f"<h2>{_text(block, 'title')}</h2>"
        f"<p>{_text(block, 'description')}</p>"
        f"<ul>{''.join(items)}</ul>"
        "</section>"
    )


def render_cta(block: Block) -> str:
    return (
        '<section class="block cta">'
        f"<h2>{_text(block, 'title')}</h2>"
        f"<p>{_text(block, 'description')}</p>"
        f"{_actions(block)}"
        "</section>"
    )


def render_content(block: Block) -> str:
    body = block.get("body")
    html = _markdown(body) if isinstance(body, str) else ""
    return f'<section class="block content">{html}</section>'


def render_video(block: Block) -> str:
    if not block.get("url"):
        return ""
    src = escape(str(block["url"]), quote=True)
    return (
        '<section class="block video">'
        f'<iframe src="{src}" allowfullscreen></iframe>'
        "</section>"
    )


BLOCK_RENDERERS: dict[str, Callable[[Block], str]] = {
    "hero": render_hero,
    "callout": render_callout,
    "stats": render_stats,
    "cta": render_cta,
    "content": render_content,
    "video": render_video,
}


def render_blocks(blocks: list[Block] | None) -> str:
    """Render an ordered list of blocks to HTML.

    Args:
        blocks: Blocks as stored in page front matter

    Returns:
        Concatenated HTML of all recognized blocks, in order
    """
    html = []
    for block in blocks or []:
        if not isinstance(block, dict):
            continue
        tag = block_type(block)
        renderer = BLOCK_RENDERERS.get(tag) if tag else None
        if renderer is None:
            logger.debug(f"Skipping block with unknown type: {tag!r}")
            continue
        html.append(renderer(block))
    return "".join(html)
