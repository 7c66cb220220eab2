"""
Public, unauthenticated routes: the document shell, robots.txt and sitemap.xml.
"""
import logging

from django.http import HttpResponse
from django.views.decorators.http import require_safe

from rendering.renderer import DocumentRenderer
from rendering.sitemap import build_sitemap_entries, build_sitemap_xml, robots_body
from seogeo.models import SeoSettings
from seogeo.store import MetadataStore

logger = logging.getLogger(__name__)

_renderer = None


def get_renderer() -> DocumentRenderer:
    global _renderer
    if _renderer is None:
        _renderer = DocumentRenderer()
    return _renderer


@require_safe
def document_view(request):
    """Any client-side route: the application shell with metadata injected."""
    html = get_renderer().render(request.path)
    if html is None:
        return HttpResponse(
            'Service temporarily unavailable',
            status=503,
            content_type='text/plain; charset=utf-8',
        )
    return HttpResponse(html, content_type='text/html; charset=utf-8')


@require_safe
def robots_txt(request):
    settings = MetadataStore().get_or_create_singleton(SeoSettings)
    return HttpResponse(robots_body(settings), content_type='text/plain; charset=utf-8')


@require_safe
def sitemap_xml(request):
    settings = MetadataStore().get_or_create_singleton(SeoSettings)
    if not settings.sitemap_enabled:
        return HttpResponse('Sitemap disabled', status=404, content_type='text/plain; charset=utf-8')
    entries = build_sitemap_entries(settings)
    logger.debug("Serving sitemap with %d urls", len(entries))
    return HttpResponse(build_sitemap_xml(entries), content_type='application/xml; charset=utf-8')
