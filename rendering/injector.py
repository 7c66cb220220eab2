"""
HTML head injection.

Two pure phases: ``strip_managed_tags`` removes every head tag this module owns
(a previously injected block, titles, description/robots meta, canonical
link, og:* and twitter:* meta), then ``insert_block`` places one freshly
rendered block right after the opening <head> tag. Running the pair twice
yields the same document as running it once.
"""
import json
import re

from django.core.serializers.json import DjangoJSONEncoder
from django.utils.html import escape

BLOCK_START = '<!-- seo-geo:start -->'
BLOCK_END = '<!-- seo-geo:end -->'

_INJECTED_BLOCK = re.compile(re.escape(BLOCK_START) + r'.*?' + re.escape(BLOCK_END), re.S)
_MANAGED_TAGS = (
    re.compile(r'<title\b[^>]*>.*?</title\s*>\s*', re.I | re.S),
    re.compile(r'<meta\b[^>]*\bname\s*=\s*["\'](?:description|robots)["\'][^>]*>\s*', re.I),
    re.compile(r'<link\b[^>]*\brel\s*=\s*["\']canonical["\'][^>]*>\s*', re.I),
    re.compile(r'<meta\b[^>]*\bproperty\s*=\s*["\']og:[^"\']*["\'][^>]*>\s*', re.I),
    re.compile(r'<meta\b[^>]*\bname\s*=\s*["\']twitter:[^"\']*["\'][^>]*>\s*', re.I),
)
# <head> or <head lang=...>, never <header>
_HEAD_OPEN = re.compile(r'<head(?:\s[^>]*)?>', re.I)
_HEAD_CLOSE = re.compile(r'</head\s*>', re.I)

_JSON_SCRIPT_ESCAPES = {
    ord('>'): '\\u003E',
    ord('<'): '\\u003C',
    ord('&'): '\\u0026',
}


def serialize_json_ld(payload) -> str:
    """JSON text safe to embed inside a <script> element."""
    return json.dumps(payload, cls=DjangoJSONEncoder, ensure_ascii=False).translate(_JSON_SCRIPT_ESCAPES)


def _meta(attr, key, value):
    return f'<meta {attr}="{key}" content="{escape(value)}">'


def render_head_block(metadata, json_ld=()) -> str:
    og = metadata['og']
    twitter = metadata['twitter']
    lines = [f"<title>{escape(metadata['title'])}</title>"]
    if metadata.get('description'):
        lines.append(_meta('name', 'description', metadata['description']))
    lines.append(f'<link rel="canonical" href="{escape(metadata["canonical_url"])}">')
    lines.append(_meta('name', 'robots', metadata['robots']))

    for key in ('title', 'description', 'image', 'url', 'type', 'site_name'):
        if og.get(key):
            lines.append(_meta('property', f'og:{key}', og[key]))
    for key in ('card', 'title', 'description', 'image'):
        if twitter.get(key):
            lines.append(_meta('name', f'twitter:{key}', twitter[key]))

    for payload in json_ld:
        lines.append(f'<script type="application/ld+json">{serialize_json_ld(payload)}</script>')

    return '\n'.join([BLOCK_START, *lines, BLOCK_END])


def strip_managed_tags(html: str) -> str:
    """
    Drop the previous block anywhere, and managed tags only before </head>;
    body markup such as an inline <svg><title> stays. A document without
    </head> is treated as all head.
    """
    html = _INJECTED_BLOCK.sub('', html)
    match = _HEAD_CLOSE.search(html)
    head, rest = (html[:match.start()], html[match.start():]) if match else (html, '')
    for pattern in _MANAGED_TAGS:
        head = pattern.sub('', head)
    return head + rest


def insert_block(html: str, block: str) -> str:
    match = _HEAD_OPEN.search(html)
    if match:
        return html[:match.end()] + block + html[match.end():]
    match = _HEAD_CLOSE.search(html)
    if match:
        return html[:match.start()] + block + html[match.start():]
    return block + html


def inject(html: str, metadata, json_ld=()) -> str:
    return insert_block(strip_managed_tags(html), render_head_block(metadata, json_ld))
