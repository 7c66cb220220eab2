"""
sitemap.xml and robots.txt generation.
"""
import xml.etree.ElementTree as ET
from typing import NamedTuple, Optional

from django.conf import settings as django_settings

from catalog.models import Article, CustomPage, DownloadableProduct
from rendering.precedence import canonical_base, normalize_path

SITEMAP_NAMESPACE = 'http://www.sitemaps.org/schemas/sitemap/0.9'


class SitemapEntry(NamedTuple):
    loc: str
    lastmod: Optional[str] = None
    changefreq: str = 'weekly'
    priority: str = '0.7'


def product_route_prefix() -> str:
    prefixes = django_settings.SEOGEO.get('PRODUCT_ROUTE_PREFIXES') or ('products',)
    return prefixes[0]


def product_path(product) -> str:
    return f"/{product_route_prefix()}/{product.slug}"


def build_sitemap_entries(settings) -> list:
    """Home page always; active pages, published articles and products as enabled."""
    base = canonical_base(settings)
    entries = [SitemapEntry(f"{base}/", priority='1.0')]

    enabled = getattr(settings, 'sitemap_enabled', True)

    if enabled and getattr(settings, 'sitemap_include_pages', True):
        for page in CustomPage.objects.filter(status='ACTIVE').order_by('route'):
            entries.append(SitemapEntry(f"{base}{normalize_path(page.route)}", page.updated_at.isoformat()))

    if enabled and getattr(settings, 'sitemap_include_articles', False):
        entries.append(SitemapEntry(f"{base}/articles"))
        for article in Article.objects.filter(status='PUBLISHED').order_by('-updated_at'):
            entries.append(SitemapEntry(f"{base}/articles/{article.slug}", article.updated_at.isoformat()))

    if enabled and getattr(settings, 'sitemap_include_products', True):
        products = DownloadableProduct.objects.filter(is_active=True, is_archived=False).order_by('slug')
        for product in products:
            entries.append(SitemapEntry(f"{base}{product_path(product)}", product.updated_at.isoformat()))

    seen = set()
    unique = []
    for entry in entries:
        # the root page route would repeat the home entry
        key = entry.loc.rstrip('/')
        if key not in seen:
            seen.add(key)
            unique.append(entry)
    return unique


def build_urlset(entries) -> ET.Element:
    root = ET.Element('urlset', xmlns=SITEMAP_NAMESPACE)
    for entry in entries:
        url_node = ET.SubElement(root, 'url')
        ET.SubElement(url_node, 'loc').text = entry.loc
        if entry.lastmod:
            ET.SubElement(url_node, 'lastmod').text = entry.lastmod
        ET.SubElement(url_node, 'changefreq').text = entry.changefreq
        ET.SubElement(url_node, 'priority').text = entry.priority
    return root


def build_sitemap_xml(entries) -> str:
    root = build_urlset(entries)
    ET.indent(root, space='  ')
    return ET.tostring(root, encoding='utf-8', xml_declaration=True).decode('utf-8')


def default_robots_txt(settings) -> str:
    lines = ['User-agent: *']
    if getattr(settings, 'default_robots_index', True) is False:
        lines.append('Disallow: /')
        return '\n'.join(lines)
    lines.append('Allow: /')
    if getattr(settings, 'sitemap_enabled', True):
        lines.append(f"Sitemap: {canonical_base(settings)}/sitemap.xml")
    return '\n'.join(lines)


def robots_body(settings) -> str:
    stored = getattr(settings, 'robots_txt', None)
    if stored and stored.strip():
        return stored
    return default_robots_txt(settings)
