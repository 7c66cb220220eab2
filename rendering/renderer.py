"""
Document renderer: serves the single-page application shell with the
discovery metadata for the requested path injected into <head>.
"""
import logging
import time
from typing import NamedTuple, Optional

from django.conf import settings as django_settings

from catalog.models import CompanySettings, CustomPage, DownloadableProduct
from rendering.caches import TemplateCache, TtlCache
from rendering.injector import inject
from rendering.precedence import ContentFallback, first_non_empty, normalize_path, resolve_metadata
from rendering.sitemap import product_path
from rendering.structured_data import build_structured_data
from seogeo.models import SINGLETON_KEY, GeoFaqItem, GeoIdentity, PageSeo, ProductSeo, SeoSettings
from seogeo.store import MetadataStore

logger = logging.getLogger(__name__)

# Paths served by the admin UI or the API never resolve page/product content
RESERVED_PREFIXES = ('/admin', '/api')


class GlobalsSnapshot(NamedTuple):
    settings: SeoSettings
    identity: GeoIdentity
    company: Optional[CompanySettings]
    faq: tuple


class RenderContext(NamedTuple):
    override: object = None
    content: Optional[ContentFallback] = None
    product: Optional[DownloadableProduct] = None
    og_type: str = 'website'
    canonical_path: Optional[str] = None


DEFAULT_CONTEXT = RenderContext()


class DocumentRenderer:

    def __init__(self, template_path=None, store=None, globals_ttl=None, clock=time.monotonic):
        config = django_settings.SEOGEO
        self.store = store or MetadataStore()
        self.template_cache = TemplateCache(template_path or config['INDEX_HTML_PATH'])
        self.globals_cache = TtlCache(
            config['GLOBALS_CACHE_TTL'] if globals_ttl is None else globals_ttl,
            clock=clock,
            name='seo globals',
        )
        self.product_prefixes = tuple(p.lower() for p in config.get('PRODUCT_ROUTE_PREFIXES', ('products',)))

    def load_globals(self) -> GlobalsSnapshot:
        return GlobalsSnapshot(
            settings=self.store.get_or_create_singleton(SeoSettings),
            identity=self.store.get_or_create_singleton(GeoIdentity),
            company=CompanySettings.objects.filter(singleton_key=SINGLETON_KEY).first(),
            faq=tuple(self.store.list_items(GeoFaqItem)),
        )

    def resolve_context(self, path) -> RenderContext:
        path = normalize_path(path)
        if any(path == prefix or path.startswith(prefix + '/') for prefix in RESERVED_PREFIXES):
            return DEFAULT_CONTEXT

        segments = path.strip('/').split('/')
        if len(segments) == 2 and segments[0].lower() in self.product_prefixes:
            product = DownloadableProduct.objects.filter(
                slug=segments[1], is_active=True, is_archived=False,
            ).first()
            if product is not None:
                return RenderContext(
                    override=self.store.get_override(ProductSeo, product.id),
                    content=ContentFallback(
                        title=product.seo_title or product.name,
                        description=first_non_empty(
                            product.seo_description, product.short_description, product.long_description,
                        ),
                        image=product.og_image_url,
                        robots_index=product.index,
                        robots_follow=product.follow,
                    ),
                    product=product,
                    og_type='product',
                    # every prefix alias shares the sitemap URL
                    canonical_path=product_path(product),
                )

        page = CustomPage.objects.filter(route__in=[path, path + '/'], status='ACTIVE').first()
        if page is not None:
            return RenderContext(
                override=self.store.get_override(PageSeo, page.id),
                content=ContentFallback(title=page.name),
            )
        return DEFAULT_CONTEXT

    def render(self, path) -> Optional[str]:
        """
        Return the template with metadata injected for ``path``; the bare
        template if anything fails while resolving; None when the template
        itself cannot be read.
        """
        template = self.template_cache.load()
        if template is None:
            return None
        try:
            snapshot = self.globals_cache.get_or_refresh(self.load_globals)
            context = self.resolve_context(path)
            metadata = resolve_metadata(
                context.canonical_path or path, snapshot.settings,
                override=context.override, content=context.content, og_type=context.og_type,
            )
            json_ld = build_structured_data(
                path, snapshot.settings, metadata,
                identity=snapshot.identity, company=snapshot.company, faq_items=snapshot.faq,
                product=context.product, override=context.override,
            )
            return inject(template, metadata, json_ld)
        except Exception:
            logger.exception("SEO injection failed for %s; serving the bare template", path)
            return template
