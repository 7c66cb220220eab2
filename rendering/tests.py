"""
Tests for the rendering app - precedence resolver, structured data, head
injection, caches and the public document/robots/sitemap routes.
"""
import json
import re
import xml.etree.ElementTree as ET

import pytest
from django.test import Client

from catalog.models import CompanySettings, CustomPage, DownloadableProduct
from rendering import views as rendering_views
from rendering.caches import TemplateCache, TtlCache
from rendering.injector import BLOCK_START, inject, insert_block, serialize_json_ld, strip_managed_tags
from rendering.precedence import (
    ContentFallback, first_boolean, first_non_empty, normalize_path, resolve_metadata,
)
from rendering.renderer import DocumentRenderer
from rendering.sitemap import SitemapEntry, build_sitemap_entries, build_sitemap_xml, default_robots_txt
from rendering.structured_data import build_structured_data
from seogeo.models import GeoFaqItem, PageSeo, ProductSeo, SeoSettings

TEMPLATE = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8">
    <title>Vite App</title>
    <meta name="description" content="placeholder">
    <meta property="og:title" content="placeholder">
    <meta name="twitter:card" content="summary">
    <link rel="canonical" href="https://old.example/">
  </head>
  <body><div id="root"></div></body>
</html>
"""


def make_settings(**kwargs):
    fields = {'site_name': 'Acme', 'canonical_base_url': 'https://acme.test/'}
    fields.update(kwargs)
    return SeoSettings(**fields)


def count_titles(html):
    return len(re.findall(r'<title\b', html, re.I))


def json_ld_payloads(html):
    return [json.loads(body) for body in re.findall(r'<script type="application/ld\+json">(.*?)</script>', html, re.S)]


@pytest.fixture
def template_file(tmp_path):
    path = tmp_path / 'index.html'
    path.write_text(TEMPLATE, encoding='utf-8')
    return path


@pytest.fixture
def renderer(template_file):
    return DocumentRenderer(template_path=str(template_file), globals_ttl=0)


@pytest.fixture
def public_client(monkeypatch, renderer):
    monkeypatch.setattr(rendering_views, '_renderer', renderer)
    return Client()


class TestPrecedenceHelpers:

    def test_first_non_empty_skips_blank_values(self):
        assert first_non_empty(None, '  ', 'Pricing', 'Other') == 'Pricing'
        assert first_non_empty(None, '') is None

    def test_first_boolean_keeps_explicit_false(self):
        assert first_boolean(None, False, True) is False
        assert first_boolean(None, None) is None

    @pytest.mark.parametrize('path', ['/', '//', '', '///', None, '/?utm=1'])
    def test_root_normalization(self, path):
        assert normalize_path(path) == '/'

    def test_trailing_slashes_are_stripped(self):
        assert normalize_path('/pricing///') == '/pricing'
        assert normalize_path('pricing') == '/pricing'


class TestResolveMetadata:

    def test_override_title_gets_site_name_suffix(self):
        metadata = resolve_metadata('/pricing', make_settings(default_title=None), override=PageSeo(title='Pricing'))
        assert metadata['title'] == 'Pricing | Acme'

    def test_title_falls_back_to_default_then_site_name(self):
        assert resolve_metadata('/', make_settings(default_title='Acme tools'))['title'] == 'Acme tools'
        assert resolve_metadata('/', make_settings())['title'] == 'Acme'
        assert resolve_metadata('/', SeoSettings())['title'] == ''

    def test_content_title_used_when_override_is_empty(self):
        metadata = resolve_metadata(
            '/pricing', make_settings(), override=PageSeo(title='  '), content=ContentFallback(title='Plans'),
        )
        assert metadata['title'] == 'Plans | Acme'

    def test_resolution_is_deterministic(self):
        args = ('/pricing', make_settings(default_description='Tools'), PageSeo(title='Pricing'))
        assert resolve_metadata(*args) == resolve_metadata(*args)

    def test_override_canonical_is_verbatim(self):
        canonical = 'https://Other.example/Some/Path/?ref=1'
        metadata = resolve_metadata('/pricing', make_settings(), override=PageSeo(canonical_url=canonical))
        assert metadata['canonical_url'] == canonical
        assert metadata['og']['url'] == canonical

    def test_canonical_joins_base_and_path(self):
        assert resolve_metadata('/pricing/', make_settings())['canonical_url'] == 'https://acme.test/pricing'
        assert resolve_metadata('//', make_settings())['canonical_url'] == 'https://acme.test/'

    def test_canonical_base_falls_back_to_configured_default(self, settings):
        settings.SEOGEO = {**settings.SEOGEO, 'DEFAULT_CANONICAL_BASE': 'https://fallback.test/'}
        metadata = resolve_metadata('/faq', SeoSettings(canonical_base_url=None))
        assert metadata['canonical_url'] == 'https://fallback.test/faq'

    def test_root_paths_resolve_identically(self):
        results = [resolve_metadata(path, make_settings()) for path in ('/', '//', '', '////')]
        assert all(result == results[0] for result in results)

    def test_robots_precedence(self):
        settings = make_settings(default_robots_index=True, default_robots_follow=False)
        assert resolve_metadata('/', settings)['robots'] == 'index,nofollow'
        assert resolve_metadata('/', settings, override=PageSeo(robots_index=False))['robots'] == 'noindex,nofollow'
        product_content = ContentFallback(robots_index=False, robots_follow=True)
        assert resolve_metadata('/', settings, content=product_content)['robots'] == 'noindex,follow'
        override = ProductSeo(robots_index=True)
        assert resolve_metadata('/', settings, override=override, content=product_content)['robots'] == 'index,follow'

    def test_twitter_card_depends_on_image(self):
        assert resolve_metadata('/', make_settings())['twitter']['card'] == 'summary'
        metadata = resolve_metadata('/', make_settings(default_og_image_url='https://acme.test/og.png'))
        assert metadata['twitter']['card'] == 'summary_large_image'
        assert metadata['og']['image'] == 'https://acme.test/og.png'


class TestStructuredData:

    def faq(self):
        return [
            GeoFaqItem(question='Second?', answer='B', order=1),
            GeoFaqItem(question='First?', answer='A <b>bold</b>', order=0),
        ]

    def test_organization_and_website_always_present(self):
        settings = make_settings(default_description='Tools for teams')
        payloads = build_structured_data('/pricing', settings, resolve_metadata('/pricing', settings),
                                         faq_items=self.faq(), company=CompanySettings(logo_url='https://acme.test/logo.png'))
        types = [p['@type'] for p in payloads]
        assert types == ['Organization', 'WebSite']
        assert payloads[0]['logo'] == 'https://acme.test/logo.png'
        assert payloads[0]['description'] == 'Tools for teams'

    def test_faq_page_on_faq_routes_in_order(self):
        settings = make_settings()
        payloads = build_structured_data('/faq/', settings, resolve_metadata('/faq', settings), faq_items=self.faq())
        faq_page = payloads[2]
        assert faq_page['@type'] == 'FAQPage'
        assert [q['name'] for q in faq_page['mainEntity']] == ['First?', 'Second?']
        assert faq_page['mainEntity'][0]['acceptedAnswer'] == {'@type': 'Answer', 'text': 'A <b>bold</b>'}

    def test_product_offer_only_with_price(self):
        settings = make_settings()
        metadata = resolve_metadata('/products/kit', settings, og_type='product')
        priced = DownloadableProduct(name='Kit', slug='kit', price_cents=1900, currency='USD')
        free = DownloadableProduct(name='Kit', slug='kit', price_cents=None)

        offer = build_structured_data('/products/kit', settings, metadata, product=priced)[-1]['offers']
        assert offer['price'] == '19.00'
        assert offer['priceCurrency'] == 'USD'
        assert offer['availability'] == 'http://schema.org/InStock'
        assert 'offers' not in build_structured_data('/products/kit', settings, metadata, product=free)[-1]

    def test_custom_json_ld_is_appended(self):
        settings = make_settings()
        override = PageSeo(json_ld_override=[{'@type': 'Event', 'name': 'Launch'}])
        payloads = build_structured_data('/launch', settings, resolve_metadata('/launch', settings), override=override)
        assert payloads[-1] == {'@type': 'Event', 'name': 'Launch'}


class TestInjector:

    def metadata(self):
        return resolve_metadata('/pricing', make_settings(), override=PageSeo(title='Pricing & "Plans"'))

    def test_single_title_after_injection(self):
        html = inject(TEMPLATE.replace('</head>', '<title>stray</title></head>'), self.metadata())
        assert count_titles(html) == 1
        assert 'Vite App' not in html
        assert 'placeholder' not in html
        assert 'https://old.example/' not in html

    def test_injection_is_idempotent(self):
        once = inject(TEMPLATE, self.metadata(), [{'@type': 'WebSite'}])
        twice = inject(once, self.metadata(), [{'@type': 'WebSite'}])
        assert once == twice
        assert once.count(BLOCK_START) == 1

    def test_values_are_escaped(self):
        html = inject(TEMPLATE, self.metadata())
        assert '<title>Pricing &amp; &quot;Plans&quot; | Acme</title>' in html

    def test_block_follows_opening_head_tag(self):
        html = inject('<html><head lang="en"><meta charset="utf-8"></head></html>', self.metadata())
        assert html.startswith('<html><head lang="en">' + BLOCK_START)

    def test_header_element_is_not_mistaken_for_head(self):
        html = insert_block('<body><header>Nav</header></body>', 'BLOCK')
        assert html == 'BLOCK<body><header>Nav</header></body>'

    def test_insert_before_closing_head(self):
        assert insert_block('<meta charset="utf-8"></head><body>', 'BLOCK') == '<meta charset="utf-8">BLOCK</head><body>'

    def test_body_titles_are_kept(self):
        html = inject(
            '<html><head><title>x</title></head><body><svg><title>Close icon</title></svg></body></html>',
            self.metadata(),
        )
        assert '<svg><title>Close icon</title></svg>' in html
        assert count_titles(html.split('</head>')[0]) == 1
        assert inject(html, self.metadata()) == html

    def test_strip_keeps_unrelated_tags(self):
        stripped = strip_managed_tags(TEMPLATE)
        assert '<meta charset="utf-8">' in stripped
        assert count_titles(stripped) == 0

    def test_json_ld_cannot_close_script(self):
        body = serialize_json_ld({'text': '</script><script>alert(1)</script> & more'})
        assert '</script>' not in body
        assert '\\u003C/script\\u003E' in body
        assert json.loads(body)['text'].startswith('</script>')


class TestCaches:

    def test_ttl_cache_refreshes_after_expiry(self):
        now = [100.0]
        calls = []
        cache = TtlCache(60, clock=lambda: now[0])

        def loader():
            calls.append(now[0])
            return len(calls)

        assert cache.get_or_refresh(loader) == 1
        now[0] += 59
        assert cache.get_or_refresh(loader) == 1
        now[0] += 2
        assert cache.get_or_refresh(loader) == 2
        assert len(calls) == 2

    def test_template_cache_reads_once(self, template_file):
        cache = TemplateCache(str(template_file))
        assert cache.load() == TEMPLATE
        template_file.write_text('changed', encoding='utf-8')
        assert cache.load() == TEMPLATE

    def test_template_cache_retries_after_failure(self, tmp_path):
        path = tmp_path / 'missing.html'
        cache = TemplateCache(str(path))
        assert cache.load() is None
        path.write_text('<html></html>', encoding='utf-8')
        assert cache.load() == '<html></html>'


@pytest.mark.django_db
class TestDocumentRenderer:

    def test_page_override_and_faq(self, renderer):
        SeoSettings.objects.create(site_name='Acme', canonical_base_url='https://acme.test')
        page = CustomPage.objects.create(name='Pricing page', route='/pricing', status='ACTIVE')
        PageSeo.objects.create(page=page, title='Pricing')

        html = renderer.render('/pricing/')

        assert '<title>Pricing | Acme</title>' in html
        assert '<link rel="canonical" href="https://acme.test/pricing">' in html
        assert count_titles(html) == 1

    def test_draft_page_uses_defaults(self, renderer):
        SeoSettings.objects.create(site_name='Acme', default_title='Acme home')
        CustomPage.objects.create(name='Secret', route='/secret', status='DRAFT')

        assert '<title>Acme home</title>' in renderer.render('/secret')

    def test_product_page(self, renderer):
        SeoSettings.objects.create(site_name='Acme', canonical_base_url='https://acme.test')
        DownloadableProduct.objects.create(
            name='Starter Kit', slug='starter-kit', short_description='Everything to get going.',
            price_cents=2500, index=False,
        )

        html = renderer.render('/products/starter-kit')

        assert '<title>Starter Kit | Acme</title>' in html
        assert '<meta property="og:type" content="product">' in html
        assert '<meta name="robots" content="noindex,follow">' in html
        product = [p for p in json_ld_payloads(html) if p['@type'] == 'Product'][0]
        assert product['offers']['price'] == '25.00'
        assert product['offers']['priceCurrency'] == 'EUR'

    def test_archived_product_is_not_matched(self, renderer):
        SeoSettings.objects.create(site_name='Acme')
        DownloadableProduct.objects.create(name='Old Kit', slug='old-kit', is_archived=True)

        html = renderer.render('/products/old-kit')
        assert 'Old Kit' not in html
        assert '<meta property="og:type" content="website">' in html

    def test_product_description_falls_back_to_long_description(self, renderer):
        SeoSettings.objects.create(site_name='Acme')
        DownloadableProduct.objects.create(name='Kit', slug='kit', long_description='Full product write-up.')

        html = renderer.render('/products/kit')

        assert '<meta name="description" content="Full product write-up.">' in html
        product = [p for p in json_ld_payloads(html) if p['@type'] == 'Product'][0]
        assert product['description'] == 'Full product write-up.'

    def test_product_aliases_share_one_canonical(self, settings, template_file):
        settings.SEOGEO = {**settings.SEOGEO, 'PRODUCT_ROUTE_PREFIXES': ('products', 'downloads')}
        renderer = DocumentRenderer(template_path=str(template_file), globals_ttl=0)
        SeoSettings.objects.create(site_name='Acme', canonical_base_url='https://acme.test')
        DownloadableProduct.objects.create(name='Kit', slug='kit')

        for path in ('/products/kit', '/downloads/kit', '/Downloads/kit'):
            html = renderer.render(path)
            assert '<meta property="og:type" content="product">' in html
            assert '<link rel="canonical" href="https://acme.test/products/kit">' in html

    def test_globals_are_reused_until_ttl_expires(self, template_file):
        now = [1000.0]
        renderer = DocumentRenderer(template_path=str(template_file), globals_ttl=60, clock=lambda: now[0])
        SeoSettings.objects.create(site_name='Acme')

        assert '<title>Acme</title>' in renderer.render('/')
        SeoSettings.objects.update(site_name='Acme Labs')
        now[0] += 59
        assert '<title>Acme</title>' in renderer.render('/')
        now[0] += 2
        assert '<title>Acme Labs</title>' in renderer.render('/')

    def test_faq_payload_on_home(self, renderer):
        GeoFaqItem.objects.create(question='Is there a trial?', answer='Yes.', order=0)

        payloads = json_ld_payloads(renderer.render('/'))
        assert 'FAQPage' in [p['@type'] for p in payloads]
        assert 'FAQPage' not in [p['@type'] for p in json_ld_payloads(renderer.render('/pricing'))]

    def test_failure_serves_bare_template(self, renderer, monkeypatch):
        def broken(path):
            raise RuntimeError('store unavailable')
        monkeypatch.setattr(renderer, 'resolve_context', broken)

        assert renderer.render('/pricing') == TEMPLATE

    def test_unreadable_template(self, tmp_path):
        renderer = DocumentRenderer(template_path=str(tmp_path / 'nope.html'))
        assert renderer.render('/') is None


@pytest.mark.django_db
class TestPublicRoutes:

    def test_document_route(self, public_client):
        SeoSettings.objects.create(site_name='Acme')
        response = public_client.get('/about')
        assert response.status_code == 200
        assert response['Content-Type'].startswith('text/html')
        assert count_titles(response.content.decode()) == 1

    def test_document_route_without_template(self, monkeypatch, tmp_path):
        monkeypatch.setattr(rendering_views, '_renderer', DocumentRenderer(template_path=str(tmp_path / 'x.html')))
        response = Client().get('/about')
        assert response.status_code == 503

    def test_robots_txt_generated(self, public_client):
        SeoSettings.objects.create(canonical_base_url='https://acme.test/')
        response = public_client.get('/robots.txt')
        assert response.status_code == 200
        assert response.content.decode() == 'User-agent: *\nAllow: /\nSitemap: https://acme.test/sitemap.xml'

    def test_robots_txt_stored_body(self, public_client):
        SeoSettings.objects.create(robots_txt='User-agent: *\nDisallow: /private')
        assert public_client.get('/robots.txt').content.decode() == 'User-agent: *\nDisallow: /private'

    def test_robots_txt_global_noindex(self):
        assert default_robots_txt(SeoSettings(default_robots_index=False)) == 'User-agent: *\nDisallow: /'

    def test_sitemap(self, public_client):
        SeoSettings.objects.create(canonical_base_url='https://acme.test')
        CustomPage.objects.create(name='Pricing', route='/pricing', status='ACTIVE')
        CustomPage.objects.create(name='Draft', route='/draft', status='DRAFT')
        DownloadableProduct.objects.create(name='Kit', slug='kit')

        response = public_client.get('/sitemap.xml')

        body = response.content.decode()
        assert response.status_code == 200
        assert '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">' in body
        assert '<loc>https://acme.test/</loc>' in body
        assert '<loc>https://acme.test/pricing</loc>' in body
        assert '<loc>https://acme.test/products/kit</loc>' in body
        assert '/draft' not in body

    def test_sitemap_disabled(self, public_client):
        SeoSettings.objects.create(sitemap_enabled=False)
        assert public_client.get('/sitemap.xml').status_code == 404

    def test_root_page_route_does_not_repeat_home(self):
        settings = SeoSettings.objects.create(canonical_base_url='https://acme.test')
        CustomPage.objects.create(name='Home', route='/', status='ACTIVE')
        entries = build_sitemap_entries(settings)
        assert [e.loc for e in entries] == ['https://acme.test/']
        assert '<priority>1.0</priority>' in build_sitemap_xml(entries)

    def test_sitemap_xml_is_well_formed(self):
        entries = [
            SitemapEntry('https://acme.test/', priority='1.0'),
            SitemapEntry('https://acme.test/search?q=a&b', '2024-05-01T10:00:00+00:00'),
        ]
        body = build_sitemap_xml(entries)

        assert body.startswith('<?xml')
        assert '<loc>https://acme.test/search?q=a&amp;b</loc>' in body
        namespace = {'sm': 'http://www.sitemaps.org/schemas/sitemap/0.9'}
        urls = ET.fromstring(body.encode('utf-8')).findall('sm:url', namespace)
        assert [u.find('sm:loc', namespace).text for u in urls] == [e.loc for e in entries]
        assert urls[0].find('sm:lastmod', namespace) is None
        assert urls[1].find('sm:changefreq', namespace).text == 'weekly'
        assert urls[1].find('sm:priority', namespace).text == '0.7'
