"""
Tests for the autofill app - proposals, diffs and transactional apply.
"""
import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from autofill.defaults import DEFAULT_ANSWERS, DEFAULT_FAQ, build_robots, clip_description, summarize_content
from autofill.engine import FILL_ONLY_MISSING, OVERWRITE, AutofillEngine, AutofillOptions
from catalog.models import CustomPage, DownloadableProduct
from seogeo.errors import ValidationError
from seogeo.models import GeoAnswer, GeoFaqItem, GeoIdentity, PageSeo, ProductSeo, SeoSettings

ALL_GROUPS = {
    'include_global_seo': True,
    'include_geo_identity': True,
    'include_geo_faq': True,
    'include_geo_answers': True,
    'include_page_seo': True,
    'include_product_seo': True,
}


def options(mode=FILL_ONLY_MISSING, confirm=False, **overrides):
    payload = dict(ALL_GROUPS, mode=mode, confirm=confirm)
    payload.update(overrides)
    return AutofillOptions.from_payload(payload)


def store_state():
    """Everything autofill can touch, including timestamps."""
    return {
        'settings': list(SeoSettings.objects.values()),
        'identity': list(GeoIdentity.objects.values()),
        'faq': list(GeoFaqItem.objects.order_by('order').values()),
        'answers': list(GeoAnswer.objects.order_by('order').values()),
        'page_seo': list(PageSeo.objects.order_by('page_id').values()),
        'product_seo': list(ProductSeo.objects.order_by('product_id').values()),
    }


@pytest.fixture
def engine():
    return AutofillEngine()


@pytest.fixture
def admin_client():
    user = get_user_model().objects.create_user(
        username='admin@example.com', email='admin@example.com', password='testpass123', is_staff=True,
    )
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {str(RefreshToken.for_user(user).access_token)}')
    return client


@pytest.fixture
def catalog():
    page = CustomPage.objects.create(name='Pricing', route='/pricing', status='ACTIVE')
    CustomPage.objects.create(name='Draft', route='/draft', status='DRAFT')
    product = DownloadableProduct.objects.create(
        name='Starter Kit', slug='starter-kit',
        long_description='Everything a small team needs.   ' + 'Detailed walkthrough. ' * 20,
    )
    return page, product


class TestDefaults:

    def test_clip_description_cuts_on_word_boundary(self):
        text = 'word ' * 50
        clipped = clip_description(text)
        assert len(clipped) <= 175
        assert clipped.endswith('word')

    def test_short_description_untouched(self):
        assert clip_description('Short text') == 'Short text'

    def test_summarize_content_collapses_whitespace(self):
        assert summarize_content('  Line one\n\n  line two ') == 'Line one line two'
        assert summarize_content('', 'fallback') == 'fallback'

    def test_build_robots_references_sitemap(self):
        assert build_robots('https://acme.test/') == 'User-agent: *\nAllow: /\nSitemap: https://acme.test/sitemap.xml'

    def test_seed_sizes(self):
        assert len(DEFAULT_FAQ) == 8
        assert len(DEFAULT_ANSWERS) == 4


class TestOptions:

    def test_required_flags_must_be_booleans(self):
        with pytest.raises(ValidationError) as exc_info:
            AutofillOptions.from_payload(dict(ALL_GROUPS, include_geo_faq='yes'))
        assert exc_info.value.code == 'INVALID_BODY'

    def test_optional_flags_and_mode_defaults(self):
        opts = AutofillOptions.from_payload({
            'include_global_seo': True, 'include_geo_identity': False,
            'include_geo_faq': False, 'include_geo_answers': False,
            'include_page_seo': 'true', 'mode': 'SOMETHING', 'confirm': 'true',
        })
        assert opts.include_page_seo is False
        assert opts.include_product_seo is False
        assert opts.mode == FILL_ONLY_MISSING
        assert opts.confirm is False


@pytest.mark.django_db
class TestPreview:

    def test_preview_performs_no_writes(self, engine, catalog):
        before = store_state()

        result = engine.preview(options())

        assert result['diff']
        assert store_state() == before
        assert SeoSettings.objects.count() == 0

    def test_fill_only_missing_keeps_existing_values(self, engine, catalog):
        SeoSettings.objects.create(
            site_name='Acme', default_title='Acme tools', default_robots_index=False,
            robots_txt='User-agent: *\nDisallow: /tmp', sitemap_include_articles=True,
        )
        GeoIdentity.objects.create(short_description='We make kits.', brand_tone='EXPERT')

        result = engine.preview(options())
        current = result['current']

        for group in ('seo_settings', 'geo_identity'):
            for field, value in current[group].items():
                if value not in (None, ''):
                    assert result['proposed'][group][field] == value
        assert result['proposed']['seo_settings']['default_robots_index'] is False
        assert result['proposed']['seo_settings']['default_description']

    def test_page_and_product_proposals(self, engine, catalog):
        SeoSettings.objects.create(site_name='Acme')
        page, product = catalog
        PageSeo.objects.create(page=page, title='Plans', canonical_url='https://acme.test/plans')

        result = engine.preview(options())

        [page_proposal] = result['proposed']['page_seo']
        assert page_proposal['title'] == 'Plans'
        assert page_proposal['label'] == '/pricing'
        [product_proposal] = result['proposed']['product_seo']
        assert product_proposal['title'] == 'Starter Kit | Acme'
        assert product_proposal['description'].startswith('Everything a small team needs. Detailed')
        assert len(product_proposal['description']) <= 175
        targets = {(d['target'], d['field']) for d in result['diff']}
        assert (f'page:{page.id}', 'title') not in targets
        assert (f'page:{page.id}', 'description') in targets
        assert ('product:starter-kit', 'title') in targets

    def test_non_empty_list_is_kept_when_filling(self, engine):
        GeoFaqItem.objects.create(question='Custom?', answer='Yes.', order=0)

        result = engine.preview(options())

        assert result['proposed']['faq_items'] == [{'question': 'Custom?', 'answer': 'Yes.'}]
        assert 'geo_faq' not in {d['target'] for d in result['diff']}
        answers_diff = [d for d in result['diff'] if d['target'] == 'geo_answers']
        assert answers_diff == [{'target': 'geo_answers', 'field': 'items', 'before': 0, 'after': 4}]

    def test_default_og_image_is_never_invented(self, engine):
        result = engine.preview(options(mode=OVERWRITE, confirm=True))
        assert result['proposed']['seo_settings']['default_og_image_url'] is None


@pytest.mark.django_db
class TestApply:

    def test_overwrite_without_confirmation_is_rejected(self, engine, catalog):
        SeoSettings.objects.create(site_name='Acme')
        before = store_state()

        with pytest.raises(ValidationError) as exc_info:
            engine.apply(options(mode=OVERWRITE, confirm=False))

        assert exc_info.value.code == 'CONFIRMATION_REQUIRED'
        assert exc_info.value.status == 400
        assert store_state() == before

    def test_fill_apply_then_empty_diff(self, engine, catalog):
        result = engine.apply(options())

        assert result['diff']
        assert GeoFaqItem.objects.count() == 8
        assert list(GeoAnswer.objects.values_list('order', flat=True)) == [0, 1, 2, 3]
        assert SeoSettings.objects.get().robots_txt.startswith('User-agent: *\nAllow: /')
        assert PageSeo.objects.get().title.endswith('| Storefront')

        assert engine.preview(options())['diff'] == []

    def test_empty_diff_apply_leaves_store_unchanged(self, engine, catalog):
        engine.apply(options())
        before = store_state()

        result = engine.apply(options())

        assert result['diff'] == []
        assert store_state() == before

    def test_overwrite_replaces_values_and_lists(self, engine, catalog):
        page, _ = catalog
        SeoSettings.objects.create(site_name='Acme', default_robots_follow=False)
        GeoFaqItem.objects.create(question='Custom?', answer='Yes.', order=0)
        PageSeo.objects.create(page=page, title='Plans', canonical_url='https://acme.test/plans')

        engine.apply(options(mode=OVERWRITE, confirm=True))

        settings = SeoSettings.objects.get()
        assert settings.site_name == 'Storefront'
        assert settings.default_robots_follow is True
        assert not GeoFaqItem.objects.filter(question='Custom?').exists()
        assert list(GeoFaqItem.objects.order_by('order').values_list('order', flat=True)) == list(range(8))
        override = PageSeo.objects.get(page=page)
        assert override.title == 'Pricing | Storefront'
        assert override.canonical_url == 'https://acme.test/plans'

        assert engine.preview(options(mode=OVERWRITE, confirm=True))['diff'] == []

    def test_failure_rolls_back_every_write(self, engine, catalog, monkeypatch):
        def broken(model, rows):
            raise RuntimeError('disk full')
        monkeypatch.setattr(engine.store, 'replace_items', broken)
        before = store_state()

        with pytest.raises(RuntimeError):
            engine.apply(options())

        assert store_state() == before

    def test_only_selected_groups_are_written(self, engine, catalog):
        engine.apply(options(include_global_seo=False, include_geo_identity=False,
                             include_geo_answers=False, include_page_seo=False, include_product_seo=False))

        assert GeoFaqItem.objects.count() == 8
        assert SeoSettings.objects.count() == 0
        assert GeoAnswer.objects.count() == 0
        assert PageSeo.objects.count() == 0


@pytest.mark.django_db
class TestAutofillApi:

    def test_preview(self, admin_client):
        response = admin_client.post('/api/v1/seo-geo/autofill/preview/', data=ALL_GROUPS, format='json')

        assert response.status_code == 200
        assert response.data['ok'] is True
        assert set(response.data['data']) == {'current', 'proposed', 'diff'}

    def test_apply_requires_confirmation(self, admin_client):
        response = admin_client.post(
            '/api/v1/seo-geo/autofill/apply/', data=dict(ALL_GROUPS, mode='OVERWRITE'), format='json',
        )
        assert response.status_code == 400
        assert response.data['error']['code'] == 'CONFIRMATION_REQUIRED'
        assert SeoSettings.objects.count() == 0

    def test_apply(self, admin_client):
        response = admin_client.post('/api/v1/seo-geo/autofill/apply/', data=ALL_GROUPS, format='json')

        assert response.status_code == 200
        assert set(response.data['data']) == {'applied', 'proposed', 'current', 'diff'}
        assert len(response.data['data']['applied']['faq_items']) == 8

    def test_invalid_body(self, admin_client):
        response = admin_client.post('/api/v1/seo-geo/autofill/preview/', data={'include_global_seo': True}, format='json')
        assert response.status_code == 400
        assert response.data['error']['code'] == 'INVALID_BODY'
