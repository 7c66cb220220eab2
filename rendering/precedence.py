"""
Precedence resolution for page-level discovery metadata.

Every value is chosen from an ordered list of candidates: the per-page or
per-product override first, then what the content itself declares, then the
global defaults. The functions here are pure; they read nothing but their
arguments (and the configured fallback canonical base).
"""
from typing import NamedTuple, Optional

from django.conf import settings as django_settings


class ContentFallback(NamedTuple):
    """Values the matched content declares on its own (page name, product SEO fields)."""
    title: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    robots_index: Optional[bool] = None
    robots_follow: Optional[bool] = None


EMPTY_CONTENT = ContentFallback()


def normalize_path(path) -> str:
    """Strip the query string and trailing slashes; the root (and '', '//', ...) is '/'."""
    path = (path or '').split('?', 1)[0].split('#', 1)[0].strip()
    path = path.rstrip('/')
    if not path:
        return '/'
    if not path.startswith('/'):
        path = '/' + path
    return path


def first_non_empty(*candidates):
    """First candidate that is a non-blank string, stripped; None otherwise."""
    for value in candidates:
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def first_boolean(*candidates):
    """First candidate that is an actual boolean; None otherwise."""
    for value in candidates:
        if isinstance(value, bool):
            return value
    return None


def canonical_base(settings) -> str:
    base = first_non_empty(
        getattr(settings, 'canonical_base_url', None),
        django_settings.SEOGEO.get('DEFAULT_CANONICAL_BASE'),
    )
    return (base or '').rstrip('/')


def build_canonical(path, settings, override=None) -> str:
    explicit = first_non_empty(getattr(override, 'canonical_url', None))
    if explicit:
        return explicit
    return f"{canonical_base(settings)}{normalize_path(path)}"


def compute_robots(settings, override=None, content=EMPTY_CONTENT) -> str:
    index = first_boolean(
        getattr(override, 'robots_index', None),
        content.robots_index,
        getattr(settings, 'default_robots_index', None) is not False,
    )
    follow = first_boolean(
        getattr(override, 'robots_follow', None),
        content.robots_follow,
        getattr(settings, 'default_robots_follow', None) is not False,
    )
    return f"{'index' if index else 'noindex'},{'follow' if follow else 'nofollow'}"


def resolve_title(settings, override=None, content=EMPTY_CONTENT) -> str:
    site_name = first_non_empty(getattr(settings, 'site_name', None))
    specific = first_non_empty(getattr(override, 'title', None), content.title)
    if specific:
        return f"{specific} | {site_name}" if site_name else specific
    return first_non_empty(getattr(settings, 'default_title', None), site_name) or ''


def resolve_metadata(path, settings, override=None, content=None, og_type='website') -> dict:
    """
    Resolve title, description, canonical URL, robots directive and the
    social-preview tags for one request path.

    ``settings`` is the global SeoSettings (or None), ``override`` the
    PageSeo/ProductSeo matched for the path (or None) and ``content`` a
    ContentFallback for the matched page or product.
    """
    content = content or EMPTY_CONTENT

    title = resolve_title(settings, override, content)
    description = first_non_empty(
        getattr(override, 'description', None),
        content.description,
        getattr(settings, 'default_description', None),
    )
    canonical_url = build_canonical(path, settings, override)
    image = first_non_empty(
        getattr(override, 'og_image_url', None),
        content.image,
        getattr(settings, 'default_og_image_url', None),
    )
    site_name = first_non_empty(getattr(settings, 'site_name', None))

    return {
        'title': title,
        'description': description,
        'canonical_url': canonical_url,
        'robots': compute_robots(settings, override, content),
        'og': {
            'title': title,
            'description': description,
            'image': image,
            'url': canonical_url,
            'type': og_type,
            'site_name': site_name,
        },
        'twitter': {
            'card': 'summary_large_image' if image else 'summary',
            'title': title,
            'description': description,
            'image': image,
        },
    }
