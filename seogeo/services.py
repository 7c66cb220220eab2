"""
Admin-side service layer over the Metadata Store: input normalization and
the CRUD operations behind the /api/v1/seo-geo/ endpoints.
"""
import logging
import uuid

from catalog.models import CustomPage, DownloadableProduct
from seogeo.errors import ValidationError, not_found
from seogeo.models import (
    GeoAnswer, GeoFaqItem, GeoIdentity, PageSeo, ProductSeo, SeoSettings,
)
from seogeo.store import MetadataStore

logger = logging.getLogger(__name__)

BRAND_TONES = {choice for choice, _ in GeoIdentity.BRAND_TONE_CHOICES}

# field -> max length; None means unbounded text
SETTINGS_STRING_FIELDS = {
    'site_name': 180,
    'default_title': 180,
    'default_description': 320,
    'default_og_image_url': 500,
    'canonical_base_url': 500,
    'robots_txt': 5000,
}
SETTINGS_BOOLEAN_FIELDS = (
    'default_robots_index',
    'default_robots_follow',
    'sitemap_enabled',
    'sitemap_include_pages',
    'sitemap_include_products',
    'sitemap_include_articles',
)
IDENTITY_STRING_FIELDS = {
    'short_description': 260,
    'long_description': 2000,
    'target_audience': 255,
    'positioning': 255,
    'differentiation': 2000,
    'language': 10,
}
OVERRIDE_STRING_FIELDS = {
    'title': 180,
    'description': 320,
    'og_image_url': 500,
    'canonical_url': 500,
}


def normalize_string(value, max_len=None):
    """Trim; empty or non-string becomes None; clip to ``max_len``."""
    if not isinstance(value, str):
        return None
    value = value.strip()
    if not value:
        return None
    if max_len is not None and len(value) > max_len:
        value = value[:max_len]
    return value


def normalize_boolean(value):
    """Accepts real booleans and the strings "true"/"false"; anything else is None."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == 'true':
            return True
        if lowered == 'false':
            return False
    return None


def parse_brand_tone(value):
    if value is None or value == '':
        return None
    if not isinstance(value, str) or value.strip().upper() not in BRAND_TONES:
        raise ValidationError(
            f"Invalid brand tone. Expected one of: {', '.join(sorted(BRAND_TONES))}",
            code='INVALID_BRAND_TONE',
        )
    return value.strip().upper()


def _require_object(payload):
    if not isinstance(payload, dict):
        raise ValidationError('Request body must be a JSON object', code='INVALID_BODY')
    return payload


def _collect_strings(payload, limits):
    return {name: normalize_string(payload[name], max_len) for name, max_len in limits.items() if name in payload}


def _collect_booleans(payload, names):
    fields = {}
    for name in names:
        if name in payload:
            value = normalize_boolean(payload[name])
            if value is not None:
                fields[name] = value
    return fields


class SeoGeoService:
    """Operations used by the admin API. Every write goes through the store."""

    def __init__(self, store=None):
        self.store = store or MetadataStore()

    # -- global settings & identity ---------------------------------------

    def get_seo_settings(self) -> SeoSettings:
        return self.store.get_or_create_singleton(SeoSettings)

    def update_seo_settings(self, payload) -> SeoSettings:
        payload = _require_object(payload)
        fields = _collect_strings(payload, SETTINGS_STRING_FIELDS)
        fields.update(_collect_booleans(payload, SETTINGS_BOOLEAN_FIELDS))
        obj = self.store.upsert_singleton(SeoSettings, fields)
        logger.info("Updated SEO settings fields: %s", sorted(fields))
        return obj

    def get_geo_identity(self) -> GeoIdentity:
        return self.store.get_or_create_singleton(GeoIdentity)

    def update_geo_identity(self, payload) -> GeoIdentity:
        payload = _require_object(payload)
        fields = _collect_strings(payload, IDENTITY_STRING_FIELDS)
        if 'brand_tone' in payload:
            fields['brand_tone'] = parse_brand_tone(payload['brand_tone'])
        obj = self.store.upsert_singleton(GeoIdentity, fields)
        logger.info("Updated GEO identity fields: %s", sorted(fields))
        return obj

    # -- FAQ ---------------------------------------------------------------

    def list_faq(self):
        return self.store.list_items(GeoFaqItem)

    def create_faq(self, payload) -> GeoFaqItem:
        payload = _require_object(payload)
        question = normalize_string(payload.get('question'), 500)
        answer = normalize_string(payload.get('answer'), 5000)
        if not question or not answer:
            raise ValidationError('Question and answer are required', code='MISSING_FIELDS')
        return self.store.create_item(GeoFaqItem, {'question': question, 'answer': answer})

    def update_faq(self, item_id, payload) -> GeoFaqItem:
        payload = _require_object(payload)
        fields = {}
        for name, max_len in (('question', 500), ('answer', 5000)):
            if name in payload:
                value = normalize_string(payload[name], max_len)
                if not value:
                    raise ValidationError(f'{name.capitalize()} cannot be empty', code='MISSING_FIELDS')
                fields[name] = value
        return self.store.update_item(GeoFaqItem, item_id, fields, label='FAQ item')

    def delete_faq(self, item_id):
        self.store.delete_item(GeoFaqItem, item_id, label='FAQ item')

    def reorder_faq(self, ids):
        return self.store.reorder(GeoFaqItem, ids, label='FAQ item')

    # -- answer blocks -----------------------------------------------------

    def list_answers(self):
        return self.store.list_items(GeoAnswer)

    def create_answer(self, payload) -> GeoAnswer:
        payload = _require_object(payload)
        question = normalize_string(payload.get('question'), 500)
        if not question:
            raise ValidationError('Question is required', code='MISSING_FIELDS')
        return self.store.create_item(GeoAnswer, {
            'question': question,
            'short_answer': normalize_string(payload.get('short_answer'), 1000),
            'long_answer': normalize_string(payload.get('long_answer'), 5000),
        })

    def update_answer(self, item_id, payload) -> GeoAnswer:
        payload = _require_object(payload)
        fields = _collect_strings(payload, {'short_answer': 1000, 'long_answer': 5000})
        if 'question' in payload:
            question = normalize_string(payload['question'], 500)
            if not question:
                raise ValidationError('Question cannot be empty', code='MISSING_FIELDS')
            fields['question'] = question
        return self.store.update_item(GeoAnswer, item_id, fields, label='Answer')

    def delete_answer(self, item_id):
        self.store.delete_item(GeoAnswer, item_id, label='Answer')

    def reorder_answers(self, ids):
        return self.store.reorder(GeoAnswer, ids, label='Answer')

    # -- per-page / per-product overrides ---------------------------------

    def get_page_seo(self, page_id):
        page = self._get_page(page_id)
        return page, self.store.get_override(PageSeo, page.id)

    def save_page_seo(self, page_id, payload) -> PageSeo:
        page = self._get_page(page_id)
        fields = self._override_fields(_require_object(payload))
        obj = self.store.upsert_override(PageSeo, page.id, fields)
        logger.info("Saved SEO override for page %s", page.route)
        return obj

    def get_product_seo(self, product_id):
        product = self._get_product(product_id)
        return product, self.store.get_override(ProductSeo, product.id)

    def save_product_seo(self, product_id, payload) -> ProductSeo:
        product = self._get_product(product_id)
        fields = self._override_fields(_require_object(payload))
        obj = self.store.upsert_override(ProductSeo, product.id, fields)
        logger.info("Saved SEO override for product %s", product.slug)
        return obj

    def _override_fields(self, payload):
        fields = _collect_strings(payload, OVERRIDE_STRING_FIELDS)
        for name in ('robots_index', 'robots_follow'):
            # null clears the override so the global default applies again
            if name in payload:
                fields[name] = normalize_boolean(payload[name])
        if 'json_ld_override' in payload:
            value = payload['json_ld_override']
            if value in (None, '', [], {}):
                fields['json_ld_override'] = None
            elif isinstance(value, dict) or (isinstance(value, list) and all(isinstance(v, dict) for v in value)):
                fields['json_ld_override'] = value
            else:
                raise ValidationError('json_ld_override must be an object or a list of objects', code='INVALID_BODY')
        return fields

    def _get_page(self, page_id) -> CustomPage:
        key = _parse_uuid(page_id)
        page = CustomPage.objects.filter(id=key).first() if key else None
        if page is None:
            raise not_found('Page not found')
        return page

    def _get_product(self, product_id) -> DownloadableProduct:
        key = _parse_uuid(product_id)
        product = DownloadableProduct.objects.filter(id=key).first() if key else None
        if product is None:
            raise not_found('Product not found')
        return product


def _parse_uuid(value):
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None
