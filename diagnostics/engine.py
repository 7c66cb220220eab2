"""
SEO/GEO diagnostics: audits the metadata corpus for indexing problems.

Every check contributes exactly one finding, either the problem or its
"ok" counterpart, so the summary always covers the same set of checks.
"""
import logging
import time
from collections import Counter, defaultdict

from django.conf import settings as django_settings
from django.utils import timezone

from catalog.models import CustomPage, DownloadableProduct
from rendering.caches import TtlCache
from rendering.precedence import build_canonical, first_non_empty, normalize_path
from rendering.sitemap import build_sitemap_entries, build_sitemap_xml, product_path
from seogeo.models import GeoAnswer, GeoFaqItem, GeoIdentity, PageSeo, ProductSeo, SeoSettings
from seogeo.store import MetadataStore

logger = logging.getLogger(__name__)

LEVEL_OK = 'ok'
LEVEL_WARNING = 'warning'
LEVEL_ERROR = 'error'

INDEXING = 'indexing'
SITEMAP = 'sitemap'
METADATA = 'metadata'
DUPLICATES = 'duplicates'
AI_READINESS = 'ai_readiness'

SAMPLE_SIZE = 5
XML_PREVIEW_LENGTH = 2000


def contains_robots_block(body) -> bool:
    if not body:
        return False
    lower = body.lower()
    return 'disallow: /' in lower or 'noindex' in lower


def summarize(checks) -> dict:
    summary = {'errors': 0, 'warnings': 0, 'ok': 0}
    for check in checks:
        if check['level'] == LEVEL_ERROR:
            summary['errors'] += 1
        elif check['level'] == LEVEL_WARNING:
            summary['warnings'] += 1
        else:
            summary['ok'] += 1
    return summary


def _check(check_id, category, level, title, message, action=None, meta=None):
    check = {'id': check_id, 'category': category, 'level': level, 'title': title, 'message': message}
    if action:
        check['action'] = action
    if meta is not None:
        check['meta'] = meta
    return check


def _action(label, tab=None, href=None):
    if href is None:
        href = django_settings.SEOGEO.get('ADMIN_URL', '/admin/seo-geo')
        if tab:
            href = f"{href}?tab={tab}"
    return {'label': label, 'href': href}


class DiagnosticsEngine:
    """Runs every check and caches the full result for a short TTL."""

    def __init__(self, store=None, ttl=None, clock=time.monotonic):
        self.store = store or MetadataStore()
        self.cache = TtlCache(
            django_settings.SEOGEO['DIAGNOSTICS_CACHE_TTL'] if ttl is None else ttl,
            clock=clock,
            name='diagnostics',
        )

    def run(self) -> dict:
        return self.cache.get_or_refresh(self.compute)

    def compute(self) -> dict:
        settings = self.store.get_or_create_singleton(SeoSettings)
        identity = self.store.get_or_create_singleton(GeoIdentity)
        pages = list(CustomPage.objects.filter(status='ACTIVE'))
        products = list(DownloadableProduct.objects.filter(is_active=True, is_archived=False))
        page_overrides = self.store.list_overrides(PageSeo)
        product_overrides = self.store.list_overrides(ProductSeo)

        checks = []
        checks.extend(self.indexing_checks(settings))
        checks.append(self.sitemap_check(settings))
        checks.extend(self.page_metadata_checks(settings, pages, page_overrides))
        checks.extend(self.product_metadata_checks(settings, products, product_overrides))
        checks.append(self.duplicate_routes_check(pages))
        checks.append(self.duplicate_canonicals_check(settings, pages, page_overrides, products, product_overrides))
        checks.extend(self.ai_readiness_checks(
            identity,
            self.store.count_items(GeoFaqItem),
            self.store.count_items(GeoAnswer),
        ))

        result = {
            'generated_at': timezone.now().isoformat(),
            'summary': summarize(checks),
            'checks': checks,
        }
        logger.info("SEO/GEO diagnostics computed: %s", result['summary'])
        return result

    # -- indexing ----------------------------------------------------------

    def indexing_checks(self, settings):
        checks = []
        if contains_robots_block(settings.robots_txt):
            checks.append(_check(
                'robots-blocking', INDEXING, LEVEL_ERROR, 'robots.txt blocks indexing',
                'The robots.txt body contains a global Disallow or noindex directive.',
                action=_action('Open SEO settings', 'seo'),
            ))
        else:
            checks.append(_check(
                'robots-ok', INDEXING, LEVEL_OK, 'robots.txt',
                'No blocking directive found in robots.txt.',
            ))

        if settings.default_robots_index is False:
            checks.append(_check(
                'global-noindex', INDEXING, LEVEL_ERROR, 'Global noindex enabled',
                'The global configuration disables indexing for every page without an override.',
                action=_action('Disable', 'seo'),
            ))
        else:
            checks.append(_check(
                'global-index-ok', INDEXING, LEVEL_OK, 'Global indexing',
                'Pages are indexable by default.',
            ))

        if settings.default_robots_follow is False:
            checks.append(_check(
                'global-nofollow', INDEXING, LEVEL_WARNING, 'Global nofollow enabled',
                'Links are marked nofollow by default.',
                action=_action('Adjust', 'seo'),
            ))
        else:
            checks.append(_check(
                'global-follow-ok', INDEXING, LEVEL_OK, 'Global link following',
                'Links are followed by default.',
            ))
        return checks

    # -- sitemap -----------------------------------------------------------

    def sitemap_check(self, settings):
        entries = build_sitemap_entries(settings)
        if not settings.sitemap_enabled:
            return _check(
                'sitemap-disabled', SITEMAP, LEVEL_WARNING, 'Sitemap disabled',
                'Enable sitemap generation to help crawlers discover your pages.',
                action=_action('Enable', 'seo'),
                meta={'url_count': len(entries)},
            )
        sparse = len(entries) <= 1
        return _check(
            'sitemap-enabled', SITEMAP, LEVEL_WARNING if sparse else LEVEL_OK, 'Sitemap',
            'The sitemap only lists the home page. Publish pages or products.'
            if sparse else f'The sitemap lists {len(entries)} URLs.',
            action=_action('View', 'seo'),
            meta={
                'url_count': len(entries),
                'xml_preview': build_sitemap_xml(entries)[:XML_PREVIEW_LENGTH],
            },
        )

    # -- metadata ----------------------------------------------------------

    def page_metadata_checks(self, settings, pages, overrides):
        has_default_title = bool(first_non_empty(settings.default_title))
        has_default_description = bool(first_non_empty(settings.default_description))

        missing_title = [
            p for p in pages
            if not has_default_title and not first_non_empty(getattr(overrides.get(p.id), 'title', None))
        ]
        missing_description = [
            p for p in pages
            if not has_default_description and not first_non_empty(getattr(overrides.get(p.id), 'description', None))
        ]

        checks = []
        if missing_title:
            checks.append(_check(
                'pages-title-missing', METADATA, LEVEL_WARNING, 'Missing page titles',
                f'{len(missing_title)} page(s) have no SEO title and no default title is set.',
                action=_action('Complete', 'seo'),
                meta={'routes': [p.route for p in missing_title[:SAMPLE_SIZE]]},
            ))
        else:
            checks.append(_check(
                'pages-title-ok', METADATA, LEVEL_OK, 'Page titles',
                'Every page has a title or a global fallback.',
            ))

        if missing_description:
            checks.append(_check(
                'pages-description-missing', METADATA, LEVEL_WARNING, 'Missing page descriptions',
                f'{len(missing_description)} page(s) have no SEO description and no global default.',
                action=_action('Complete', 'seo'),
                meta={'routes': [p.route for p in missing_description[:SAMPLE_SIZE]]},
            ))
        else:
            checks.append(_check(
                'pages-description-ok', METADATA, LEVEL_OK, 'Page descriptions',
                'Descriptions are available or a global fallback exists.',
            ))
        return checks

    def product_metadata_checks(self, settings, products, overrides):
        has_default_title = bool(first_non_empty(settings.default_title))
        has_default_description = bool(first_non_empty(settings.default_description))

        def lacks_title(product):
            override = overrides.get(product.id)
            return not first_non_empty(getattr(override, 'title', None), product.seo_title)

        def lacks_description(product):
            override = overrides.get(product.id)
            return not first_non_empty(
                getattr(override, 'description', None),
                product.seo_description,
                product.long_description,
                product.short_description,
            )

        missing_title = [p for p in products if not has_default_title and lacks_title(p)]
        missing_description = [p for p in products if not has_default_description and lacks_description(p)]

        checks = []
        if missing_title:
            checks.append(_check(
                'products-title-missing', METADATA, LEVEL_WARNING, 'Missing product titles',
                f'{len(missing_title)} product(s) have no dedicated SEO title and no global title.',
                action=_action('Update', 'seo'),
                meta={'slugs': [p.slug for p in missing_title[:SAMPLE_SIZE]]},
            ))
        else:
            checks.append(_check(
                'products-title-ok', METADATA, LEVEL_OK, 'Product titles',
                'Every product has a title or a fallback.',
            ))

        if missing_description:
            checks.append(_check(
                'products-description-missing', METADATA, LEVEL_WARNING, 'Missing product descriptions',
                f'{len(missing_description)} product(s) have neither an SEO description nor content, '
                f'and no global default is set.',
                action=_action('Update', 'seo'),
                meta={'slugs': [p.slug for p in missing_description[:SAMPLE_SIZE]]},
            ))
        else:
            checks.append(_check(
                'products-description-ok', METADATA, LEVEL_OK, 'Product descriptions',
                'Descriptions are available or a global fallback exists.',
            ))
        return checks

    # -- duplicates --------------------------------------------------------

    def duplicate_routes_check(self, pages):
        counts = Counter(normalize_path(p.route) for p in pages)
        duplicates = sorted(route for route, count in counts.items() if count > 1)
        if duplicates:
            return _check(
                'duplicate-routes', DUPLICATES, LEVEL_WARNING, 'Duplicate page routes',
                f"Some routes are used by more than one page: {', '.join(duplicates)}.",
                action=_action('Review', 'seo'),
                meta={'routes': duplicates},
            )
        return _check(
            'routes-unique', DUPLICATES, LEVEL_OK, 'Unique routes',
            'No duplicate route detected.',
        )

    def duplicate_canonicals_check(self, settings, pages, page_overrides, products, product_overrides):
        owners = defaultdict(list)
        for page in pages:
            url = build_canonical(page.route, settings, page_overrides.get(page.id))
            owners[url].append(f"page:{normalize_path(page.route)}")
        for product in products:
            url = build_canonical(product_path(product), settings, product_overrides.get(product.id))
            owners[url].append(f"product:{product.slug}")

        duplicates = {url: items for url, items in owners.items() if len(items) > 1}
        if duplicates:
            urls = sorted(duplicates)
            return _check(
                'canonical-duplicates', DUPLICATES, LEVEL_WARNING, 'Duplicate canonical URLs',
                f"Several items share the same canonical URL: {', '.join(urls)}.",
                action=_action('Clean up', 'seo'),
                meta={'duplicates': urls, 'items': {url: duplicates[url] for url in urls}},
            )
        return _check(
            'canonical-unique', DUPLICATES, LEVEL_OK, 'Unique canonicals',
            'No duplicate canonical URL detected.',
        )

    # -- AI readiness ------------------------------------------------------

    def ai_readiness_checks(self, identity, faq_count, answer_count):
        checks = []
        if not first_non_empty(identity.short_description) or not first_non_empty(identity.long_description):
            checks.append(_check(
                'geo-identity-missing', AI_READINESS, LEVEL_WARNING, 'Incomplete AI identity',
                'Add both a short and a long description for AI assistants.',
                action=_action('Complete', 'geo'),
            ))
        else:
            checks.append(_check(
                'geo-identity-ok', AI_READINESS, LEVEL_OK, 'AI identity',
                'Short and long descriptions are present.',
            ))

        if faq_count == 0:
            checks.append(_check(
                'geo-faq-empty', AI_READINESS, LEVEL_WARNING, 'Empty FAQ',
                'Add questions and answers to feed AI assistants and the FAQ page.',
                action=_action('Add', 'geo'),
            ))
        else:
            checks.append(_check(
                'geo-faq-ok', AI_READINESS, LEVEL_OK, 'FAQ',
                f'{faq_count} item(s) present.',
                meta={'count': faq_count},
            ))

        if answer_count == 0:
            checks.append(_check(
                'geo-answers-empty', AI_READINESS, LEVEL_WARNING, 'No answer blocks',
                'Add global answer blocks for AI assistants.',
                action=_action('Add', 'geo'),
            ))
        else:
            checks.append(_check(
                'geo-answers-ok', AI_READINESS, LEVEL_OK, 'Answer blocks',
                f'{answer_count} block(s) configured.',
                meta={'count': answer_count},
            ))
        return checks
