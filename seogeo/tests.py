"""
Tests for the seogeo app - metadata store, admin services and admin API.
"""
import uuid

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from rendering import views as rendering_views
from rendering.renderer import DocumentRenderer
from seogeo.errors import ValidationError
from seogeo.models import GeoAnswer, GeoFaqItem, GeoIdentity, PageSeo, SeoSettings
from seogeo.services import SeoGeoService, normalize_boolean, normalize_string, parse_brand_tone
from seogeo.store import MetadataStore


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def create_user():
    def _create_user(email="admin@example.com", password="testpass123", is_staff=True):
        return get_user_model().objects.create_user(
            username=email,
            email=email,
            password=password,
            is_staff=is_staff,
        )
    return _create_user


@pytest.fixture
def admin_client(api_client, create_user):
    user = create_user()
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {str(refresh.access_token)}')
    return api_client


@pytest.fixture
def store():
    return MetadataStore()


@pytest.fixture
def create_faq(store):
    def _create_faq(question="What is it?", answer="A product."):
        return store.create_item(GeoFaqItem, {'question': question, 'answer': answer})
    return _create_faq


@pytest.fixture
def create_page():
    def _create_page(name="Pricing", route="/pricing", status="ACTIVE"):
        from catalog.models import CustomPage
        return CustomPage.objects.create(name=name, route=route, status=status)
    return _create_page


@pytest.fixture
def create_product():
    def _create_product(name="Starter Kit", slug="starter-kit", **kwargs):
        from catalog.models import DownloadableProduct
        return DownloadableProduct.objects.create(name=name, slug=slug, **kwargs)
    return _create_product


class TestNormalization:

    def test_normalize_string_trims_and_clips(self):
        assert normalize_string("  Acme  ") == "Acme"
        assert normalize_string("   ") is None
        assert normalize_string(None) is None
        assert normalize_string(42) is None
        assert normalize_string("abcdef", max_len=3) == "abc"

    def test_normalize_boolean_accepts_strings(self):
        assert normalize_boolean(True) is True
        assert normalize_boolean("false") is False
        assert normalize_boolean(" TRUE ") is True
        assert normalize_boolean("yes") is None
        assert normalize_boolean(1) is None

    def test_parse_brand_tone(self):
        assert parse_brand_tone("expert") == "EXPERT"
        assert parse_brand_tone("") is None
        with pytest.raises(ValidationError) as exc_info:
            parse_brand_tone("SARCASTIC")
        assert exc_info.value.status == 400


@pytest.mark.django_db
class TestMetadataStore:

    def test_singleton_is_created_once(self, store):
        assert store.find_singleton(SeoSettings) is None

        first = store.get_or_create_singleton(SeoSettings)
        second = store.get_or_create_singleton(SeoSettings)

        assert first.id == second.id
        assert SeoSettings.objects.count() == 1
        assert first.default_robots_index is True
        assert first.sitemap_include_articles is False

    def test_upsert_singleton_updates_existing_row(self, store):
        store.get_or_create_singleton(GeoIdentity)
        store.upsert_singleton(GeoIdentity, {'language': 'de'})

        assert GeoIdentity.objects.count() == 1
        assert GeoIdentity.objects.get().language == 'de'

    def test_create_item_appends_dense_order(self, store, create_faq):
        items = [create_faq(question=f"Q{i}") for i in range(3)]
        assert [item.order for item in items] == [0, 1, 2]

    def test_reorder_renumbers_full_list(self, store, create_faq):
        a, b, c = create_faq("A"), create_faq("B"), create_faq("C")

        reordered = store.reorder(GeoFaqItem, [str(c.id), str(a.id), str(b.id)])

        assert [item.question for item in reordered] == ["C", "A", "B"]
        assert [item.order for item in reordered] == [0, 1, 2]

    def test_reorder_rejects_duplicate_ids(self, store, create_faq):
        a, b = create_faq("A"), create_faq("B")

        with pytest.raises(ValidationError) as exc_info:
            store.reorder(GeoFaqItem, [str(a.id), str(a.id)])

        assert exc_info.value.code == 'DUPLICATE_IDS'
        assert [item.question for item in store.list_items(GeoFaqItem)] == ["A", "B"]

    def test_reorder_rejects_unknown_ids(self, store, create_faq):
        a = create_faq("A")

        with pytest.raises(ValidationError) as exc_info:
            store.reorder(GeoFaqItem, [str(a.id), str(uuid.uuid4())])

        assert exc_info.value.code == 'NOT_FOUND'
        assert exc_info.value.status == 400

    def test_reorder_rejects_empty_list(self, store):
        with pytest.raises(ValidationError):
            store.reorder(GeoFaqItem, [])

    def test_delete_item_keeps_order_dense(self, store, create_faq):
        a, b, c = create_faq("A"), create_faq("B"), create_faq("C")

        store.delete_item(GeoFaqItem, b.id)

        assert [(i.question, i.order) for i in store.list_items(GeoFaqItem)] == [("A", 0), ("C", 1)]

    def test_delete_unknown_item_is_not_found(self, store):
        with pytest.raises(ValidationError) as exc_info:
            store.delete_item(GeoAnswer, uuid.uuid4())
        assert exc_info.value.status == 404

    def test_replace_items(self, store, create_faq):
        create_faq("Old")

        store.replace_items(GeoFaqItem, [
            {'question': 'New 1', 'answer': 'x'},
            {'question': 'New 2', 'answer': 'y'},
        ])

        assert [(i.question, i.order) for i in store.list_items(GeoFaqItem)] == [("New 1", 0), ("New 2", 1)]


@pytest.mark.django_db
class TestSeoGeoService:

    def test_create_faq_requires_question_and_answer(self):
        with pytest.raises(ValidationError) as exc_info:
            SeoGeoService().create_faq({'question': 'Only a question'})
        assert exc_info.value.code == 'MISSING_FIELDS'
        assert GeoFaqItem.objects.count() == 0

    def test_update_seo_settings_is_partial(self):
        service = SeoGeoService()
        service.update_seo_settings({'site_name': ' Acme ', 'default_robots_follow': 'false'})
        service.update_seo_settings({'default_title': 'Welcome'})

        settings = service.get_seo_settings()
        assert settings.site_name == 'Acme'
        assert settings.default_title == 'Welcome'
        assert settings.default_robots_follow is False

    def test_save_page_seo_for_unknown_page(self):
        with pytest.raises(ValidationError) as exc_info:
            SeoGeoService().save_page_seo(str(uuid.uuid4()), {'title': 'x'})
        assert exc_info.value.status == 404
        assert exc_info.value.code == 'NOT_FOUND'

    def test_save_page_seo_clears_empty_fields(self, create_page):
        page = create_page()
        service = SeoGeoService()
        service.save_page_seo(str(page.id), {'title': 'Plans', 'robots_index': False})
        service.save_page_seo(str(page.id), {'title': '   ', 'robots_index': None})

        override = PageSeo.objects.get(page=page)
        assert override.title is None
        assert override.robots_index is None

    def test_save_product_seo_rejects_invalid_json_ld(self, create_product):
        product = create_product()
        with pytest.raises(ValidationError) as exc_info:
            SeoGeoService().save_product_seo(str(product.id), {'json_ld_override': 'not json-ld'})
        assert exc_info.value.code == 'INVALID_BODY'


@pytest.mark.django_db
class TestAdminApi:

    def test_requires_authentication(self, api_client):
        response = api_client.get('/api/v1/seo-geo/settings/')
        assert response.status_code == 401
        assert response.data['ok'] is False
        assert response.data['error']['code'] == 'NOT_AUTHENTICATED'

    def test_requires_staff_user(self, api_client, create_user):
        user = create_user(email="customer@example.com", is_staff=False)
        refresh = RefreshToken.for_user(user)
        api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {str(refresh.access_token)}')

        response = api_client.get('/api/v1/seo-geo/settings/')
        assert response.status_code == 403
        assert response.data['ok'] is False

    def test_get_settings_creates_singleton(self, admin_client):
        response = admin_client.get('/api/v1/seo-geo/settings/')

        assert response.status_code == 200
        assert response.data['ok'] is True
        assert response.data['data']['default_robots_index'] is True
        assert SeoSettings.objects.count() == 1

    def test_update_settings(self, admin_client):
        response = admin_client.put(
            '/api/v1/seo-geo/settings/',
            data={'site_name': 'Acme', 'canonical_base_url': 'https://acme.test/'},
            format='json',
        )
        assert response.status_code == 200
        assert response.data['data']['site_name'] == 'Acme'

    def test_update_identity_with_invalid_tone(self, admin_client):
        response = admin_client.put('/api/v1/seo-geo/identity/', data={'brand_tone': 'LOUD'}, format='json')
        assert response.status_code == 400
        assert response.data['error']['code'] == 'INVALID_BRAND_TONE'

    def test_create_and_list_faq(self, admin_client):
        response = admin_client.post(
            '/api/v1/seo-geo/faq/',
            data={'question': 'Do you ship abroad?', 'answer': 'Downloads work everywhere.'},
            format='json',
        )
        assert response.status_code == 201
        assert response.data['data']['order'] == 0

        response = admin_client.get('/api/v1/seo-geo/faq/')
        assert response.status_code == 200
        assert len(response.data['data']) == 1

    def test_reorder_duplicate_ids(self, admin_client, create_faq):
        item = create_faq()
        response = admin_client.post(
            '/api/v1/seo-geo/faq/reorder/',
            data={'ids': [str(item.id), str(item.id)]},
            format='json',
        )
        assert response.status_code == 400
        assert response.data['error']['code'] == 'DUPLICATE_IDS'

    def test_delete_answer(self, admin_client, store):
        answer = store.create_item(GeoAnswer, {'question': 'Why?'})
        response = admin_client.delete(f'/api/v1/seo-geo/answers/{answer.id}/')
        assert response.status_code == 200
        assert GeoAnswer.objects.count() == 0

    def test_page_seo_unknown_page(self, admin_client):
        response = admin_client.get('/api/v1/seo-geo/pages/not-a-page/')
        assert response.status_code == 404
        assert response.data['error']['code'] == 'NOT_FOUND'

    def test_save_and_read_product_seo(self, admin_client, create_product):
        product = create_product()
        response = admin_client.put(
            f'/api/v1/seo-geo/products/{product.id}/',
            data={'title': 'Starter Kit for teams', 'canonical_url': 'https://acme.test/kit'},
            format='json',
        )
        assert response.status_code == 200

        response = admin_client.get(f'/api/v1/seo-geo/products/{product.id}/')
        assert response.data['data']['seo']['canonical_url'] == 'https://acme.test/kit'
        assert response.data['data']['product']['slug'] == 'starter-kit'


@pytest.mark.django_db
class TestProjectRoutes:

    def test_health_check(self, api_client, monkeypatch, tmp_path):
        shell = tmp_path / 'index.html'
        shell.write_text('<html><head></head></html>', encoding='utf-8')
        monkeypatch.setattr(rendering_views, '_renderer', DocumentRenderer(template_path=str(shell)))

        response = api_client.get('/api/v1/health/')
        assert response.status_code == 200
        assert response.json() == {'status': 'ok', 'service': 'seogeo-backend', 'document_shell': 'ready'}

    def test_health_check_reports_missing_shell(self, api_client, monkeypatch, tmp_path):
        monkeypatch.setattr(rendering_views, '_renderer', DocumentRenderer(template_path=str(tmp_path / 'gone.html')))

        response = api_client.get('/api/v1/health/')
        assert response.status_code == 200
        assert response.json()['status'] == 'degraded'
        assert response.json()['document_shell'] == 'missing'

    def test_admin_responses_are_never_cached(self, admin_client):
        response = admin_client.get('/api/v1/seo-geo/settings/')
        assert 'no-store' in response['Cache-Control']

    def test_slashless_api_route_is_not_redirected(self, admin_client):
        response = admin_client.put('/api/v1/seo-geo/settings', {'site_name': 'Acme'}, format='json')
        assert response.status_code == 404

    def test_unknown_api_route_returns_json(self, api_client):
        response = api_client.get('/api/v1/does-not-exist/')
        assert response.status_code == 404
        assert response.json()['error']['code'] == 'NOT_FOUND'
