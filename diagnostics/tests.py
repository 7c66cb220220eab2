"""
Tests for the diagnostics app.
"""
import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from catalog.models import CustomPage, DownloadableProduct
from diagnostics import views as diagnostics_views
from diagnostics.engine import DiagnosticsEngine, contains_robots_block, summarize
from seogeo.models import GeoAnswer, GeoFaqItem, GeoIdentity, PageSeo, ProductSeo, SeoSettings


@pytest.fixture
def engine():
    return DiagnosticsEngine(ttl=0)


@pytest.fixture
def admin_client():
    from django.contrib.auth import get_user_model
    user = get_user_model().objects.create_user(
        username='admin@example.com', email='admin@example.com', password='testpass123', is_staff=True,
    )
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {str(RefreshToken.for_user(user).access_token)}')
    return client


def by_id(result):
    return {check['id']: check for check in result['checks']}


def healthy_corpus():
    SeoSettings.objects.create(
        site_name='Acme',
        default_title='Acme',
        default_description='Tools for small teams.',
        canonical_base_url='https://acme.test',
    )
    GeoIdentity.objects.create(short_description='Short', long_description='Long')
    GeoFaqItem.objects.create(question='Q', answer='A', order=0)
    GeoAnswer.objects.create(question='Q', short_answer='A', order=0)
    CustomPage.objects.create(name='Pricing', route='/pricing', status='ACTIVE')
    DownloadableProduct.objects.create(name='Kit', slug='kit')


class TestHelpers:

    @pytest.mark.parametrize('body', ['User-agent: *\nDisallow: /', 'user-agent: *\ndisallow: /', 'X-Robots: NOINDEX'])
    def test_robots_block_detected(self, body):
        assert contains_robots_block(body)

    @pytest.mark.parametrize('body', [None, '', 'User-agent: *\nAllow: /'])
    def test_robots_block_absent(self, body):
        assert not contains_robots_block(body)

    def test_summary_is_a_fold_over_levels(self):
        checks = [{'level': 'ok'}, {'level': 'warning'}, {'level': 'error'}, {'level': 'ok'}]
        assert summarize(checks) == {'errors': 1, 'warnings': 1, 'ok': 2}


@pytest.mark.django_db
class TestDiagnosticsEngine:

    def test_healthy_corpus_is_all_ok(self, engine):
        healthy_corpus()

        result = engine.run()

        assert result['summary'] == {'errors': 0, 'warnings': 0, 'ok': len(result['checks'])}
        assert set(by_id(result)) == {
            'robots-ok', 'global-index-ok', 'global-follow-ok', 'sitemap-enabled',
            'pages-title-ok', 'pages-description-ok', 'products-title-ok', 'products-description-ok',
            'routes-unique', 'canonical-unique', 'geo-identity-ok', 'geo-faq-ok', 'geo-answers-ok',
        }
        assert by_id(result)['sitemap-enabled']['meta']['url_count'] == 3

    def test_every_check_emits_one_finding(self, engine):
        result = engine.run()
        categories = [check['category'] for check in result['checks']]
        assert len(result['checks']) == 13
        assert set(categories) == {'indexing', 'sitemap', 'metadata', 'duplicates', 'ai_readiness'}
        summary = result['summary']
        assert summary['errors'] + summary['warnings'] + summary['ok'] == len(result['checks'])

    def test_robots_disallow_is_an_error(self, engine):
        SeoSettings.objects.create(robots_txt='User-agent: *\nDisallow: /')

        check = by_id(engine.run())['robots-blocking']

        assert check['level'] == 'error'
        assert check['category'] == 'indexing'
        assert check['action']['href'] == '/admin/seo-geo?tab=seo'

    def test_robots_without_block_is_ok(self, engine):
        SeoSettings.objects.create(robots_txt='User-agent: *\nAllow: /')
        assert by_id(engine.run())['robots-ok']['level'] == 'ok'

    def test_global_noindex_and_nofollow(self, engine):
        SeoSettings.objects.create(default_robots_index=False, default_robots_follow=False)

        checks = by_id(engine.run())

        assert checks['global-noindex']['level'] == 'error'
        assert checks['global-nofollow']['level'] == 'warning'

    def test_sitemap_with_home_only_warns(self, engine):
        SeoSettings.objects.create()
        check = by_id(engine.run())['sitemap-enabled']
        assert check['level'] == 'warning'
        assert check['meta']['url_count'] == 1
        assert check['meta']['xml_preview'].startswith('<?xml')

    def test_sitemap_disabled(self, engine):
        SeoSettings.objects.create(sitemap_enabled=False)
        assert by_id(engine.run())['sitemap-disabled']['level'] == 'warning'

    def test_pages_without_title_or_default(self, engine):
        SeoSettings.objects.create(default_title=None, default_description='Fallback')
        page = CustomPage.objects.create(name='A', route='/a', status='ACTIVE')
        PageSeo.objects.create(page=page, description='Own description')
        CustomPage.objects.create(name='B', route='/b', status='ACTIVE')
        CustomPage.objects.create(name='C', route='/c', status='DRAFT')

        checks = by_id(engine.run())

        assert checks['pages-title-missing']['meta']['routes'] == ['/a', '/b']
        assert checks['pages-description-ok']['level'] == 'ok'

    def test_products_missing_metadata(self, engine):
        SeoSettings.objects.create()
        DownloadableProduct.objects.create(name='Bare', slug='bare')
        DownloadableProduct.objects.create(name='Described', slug='described', long_description='Body', seo_title='T')

        checks = by_id(engine.run())

        assert checks['products-title-missing']['meta']['slugs'] == ['bare']
        assert checks['products-description-missing']['meta']['slugs'] == ['bare']

    def test_duplicate_routes(self, engine):
        CustomPage.objects.create(name='One', route='/offer', status='ACTIVE')
        CustomPage.objects.create(name='Two', route='/offer/', status='ACTIVE')

        checks = by_id(engine.run())

        assert checks['duplicate-routes']['level'] == 'warning'
        assert checks['duplicate-routes']['meta']['routes'] == ['/offer']

    def test_duplicate_product_canonicals_lists_both(self, engine):
        SeoSettings.objects.create(canonical_base_url='https://acme.test')
        first = DownloadableProduct.objects.create(name='Kit', slug='kit')
        second = DownloadableProduct.objects.create(name='Kit Pro', slug='kit-pro')
        ProductSeo.objects.create(product=first, canonical_url='https://acme.test/kit')
        ProductSeo.objects.create(product=second, canonical_url='https://acme.test/kit')

        check = by_id(engine.run())['canonical-duplicates']

        assert check['level'] == 'warning'
        assert check['meta']['duplicates'] == ['https://acme.test/kit']
        assert sorted(check['meta']['items']['https://acme.test/kit']) == ['product:kit', 'product:kit-pro']

    def test_computed_canonical_collision_with_page(self, engine):
        SeoSettings.objects.create(canonical_base_url='https://acme.test')
        product = DownloadableProduct.objects.create(name='Kit', slug='kit')
        page = CustomPage.objects.create(name='Kit landing', route='/landing', status='ACTIVE')
        PageSeo.objects.create(page=page, canonical_url='https://acme.test/products/kit')

        check = by_id(engine.run())['canonical-duplicates']

        assert check['meta']['items']['https://acme.test/products/kit'] == ['page:/landing', f'product:{product.slug}']

    def test_ai_readiness_warnings(self, engine):
        GeoIdentity.objects.create(short_description='Only short')

        checks = by_id(engine.run())

        assert checks['geo-identity-missing']['level'] == 'warning'
        assert checks['geo-faq-empty']['level'] == 'warning'
        assert checks['geo-answers-empty']['level'] == 'warning'

    def test_result_is_cached(self):
        engine = DiagnosticsEngine(ttl=30)
        first = engine.run()
        SeoSettings.objects.filter().update(robots_txt='Disallow: /')

        assert engine.run() is first
        engine.cache.clear()
        assert 'robots-blocking' in by_id(engine.run())


@pytest.mark.django_db
class TestDiagnosticsApi:

    def test_run_diagnostics(self, admin_client, monkeypatch):
        monkeypatch.setattr(diagnostics_views, '_engine', DiagnosticsEngine(ttl=0))

        response = admin_client.get('/api/v1/seo-geo/diagnostics/')

        assert response.status_code == 200
        assert response.data['ok'] is True
        assert set(response.data['data']) == {'generated_at', 'summary', 'checks'}

    def test_requires_staff(self):
        response = APIClient().get('/api/v1/seo-geo/diagnostics/')
        assert response.status_code == 401
