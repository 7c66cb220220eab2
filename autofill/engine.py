"""
Autofill: proposes default-filled SEO/GEO metadata, diffs it against the
current store and applies it in a single transaction.

Run states, logged per run:
    IDLE -> PREVIEWING -> (REJECTED | DIFF_READY) -> (IDLE | APPLYING -> COMMITTED | ROLLED_BACK)
"""
import logging
import uuid
from dataclasses import dataclass

from django.conf import settings as django_settings

from autofill import defaults
from catalog.models import CustomPage, DownloadableProduct
from rendering.precedence import first_non_empty
from seogeo.errors import ValidationError
from seogeo.models import GeoAnswer, GeoFaqItem, GeoIdentity, PageSeo, ProductSeo, SeoSettings
from seogeo.store import MetadataStore

logger = logging.getLogger(__name__)

FILL_ONLY_MISSING = 'FILL_ONLY_MISSING'
OVERWRITE = 'OVERWRITE'

SETTINGS_FIELDS = (
    'site_name', 'default_title', 'default_description', 'default_og_image_url',
    'canonical_base_url', 'default_robots_index', 'default_robots_follow', 'robots_txt',
    'sitemap_enabled', 'sitemap_include_pages', 'sitemap_include_products',
    'sitemap_include_articles',
)
SETTINGS_FLAG_DEFAULTS = {
    'default_robots_index': True,
    'default_robots_follow': True,
    'sitemap_enabled': True,
    'sitemap_include_pages': True,
    'sitemap_include_products': True,
    'sitemap_include_articles': False,
}
IDENTITY_FIELDS = (
    'short_description', 'long_description', 'target_audience', 'positioning',
    'differentiation', 'brand_tone', 'language',
)
ITEM_FIELDS = ('title', 'description')
TITLE_MAX_LENGTH = 180

TARGET_SETTINGS = 'seo_settings'
TARGET_IDENTITY = 'geo_identity'
TARGET_FAQ = 'geo_faq'
TARGET_ANSWERS = 'geo_answers'

REQUIRED_FLAGS = ('include_global_seo', 'include_geo_identity', 'include_geo_faq', 'include_geo_answers')


@dataclass
class AutofillOptions:
    """Which target groups take part in a run, and how."""
    include_global_seo: bool
    include_geo_identity: bool
    include_geo_faq: bool
    include_geo_answers: bool
    include_page_seo: bool = False
    include_product_seo: bool = False
    mode: str = FILL_ONLY_MISSING
    confirm: bool = False

    @property
    def overwrite(self):
        return self.mode == OVERWRITE

    @classmethod
    def from_payload(cls, payload):
        if not isinstance(payload, dict):
            raise ValidationError('Request body must be a JSON object', code='INVALID_BODY')
        flags = {}
        for name in REQUIRED_FLAGS:
            if not isinstance(payload.get(name), bool):
                raise ValidationError(f'Field {name} must be a boolean', code='INVALID_BODY')
            flags[name] = payload[name]
        for name in ('include_page_seo', 'include_product_seo'):
            flags[name] = payload.get(name) if isinstance(payload.get(name), bool) else False
        return cls(
            mode=OVERWRITE if payload.get('mode') == OVERWRITE else FILL_ONLY_MISSING,
            confirm=payload.get('confirm') is True,
            **flags,
        )


def is_empty(value):
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def pick(current, default, overwrite):
    """Scalar rule: keep a non-empty current value unless overwriting."""
    if not overwrite and not is_empty(current):
        return current
    return default


def compute_diff(before, after, target, fields):
    return [
        {'target': target, 'field': name, 'before': before.get(name), 'after': after.get(name)}
        for name in fields
        if before.get(name) != after.get(name)
    ]


def item_title(name, site_name):
    return f"{name} | {site_name}"[:TITLE_MAX_LENGTH]


def _snapshot(obj, fields):
    if obj is None:
        return None
    return {name: getattr(obj, name) for name in fields}


class AutofillEngine:

    def __init__(self, store=None):
        self.store = store or MetadataStore()
        config = django_settings.SEOGEO
        self.default_site_name = config['DEFAULT_SITE_NAME']
        self.default_base = config['DEFAULT_CANONICAL_BASE']
        self.default_language = config['DEFAULT_LANGUAGE']

    # -- public entry points -----------------------------------------------

    def preview(self, options: AutofillOptions) -> dict:
        run_id = uuid.uuid4().hex[:8]
        self._log_state(run_id, 'PREVIEWING', options)
        result = self._build_preview(options)
        self._log_state(run_id, 'DIFF_READY', options, changes=len(result['diff']))
        self._log_state(run_id, 'IDLE', options)
        return {'current': result['current'], 'proposed': result['proposed'], 'diff': result['diff']}

    def apply(self, options: AutofillOptions) -> dict:
        run_id = uuid.uuid4().hex[:8]
        self._log_state(run_id, 'PREVIEWING', options)
        if options.overwrite and options.confirm is not True:
            self._log_state(run_id, 'REJECTED', options)
            raise ValidationError(
                'Confirmation is required to overwrite existing values',
                code='CONFIRMATION_REQUIRED',
            )

        preview = self._build_preview(options)
        self._log_state(run_id, 'DIFF_READY', options, changes=len(preview['diff']))
        self._log_state(run_id, 'APPLYING', options)
        try:
            with self.store.atomic():
                self._write(options, preview)
        except Exception:
            self._log_state(run_id, 'ROLLED_BACK', options)
            raise
        self._log_state(run_id, 'COMMITTED', options, changes=len(preview['diff']))

        return {
            'applied': self._current_snapshot(options)['current'],
            'proposed': preview['proposed'],
            'current': preview['current'],
            'diff': preview['diff'],
        }

    # -- preview -----------------------------------------------------------

    def _current_snapshot(self, options):
        current = {}
        state = {}
        if options.include_global_seo or options.include_page_seo or options.include_product_seo:
            state['settings'] = self.store.find_singleton(SeoSettings)
        if options.include_global_seo:
            current[TARGET_SETTINGS] = _snapshot(state['settings'], SETTINGS_FIELDS)
        if options.include_geo_identity:
            current[TARGET_IDENTITY] = _snapshot(self.store.find_singleton(GeoIdentity), IDENTITY_FIELDS)
        if options.include_geo_faq:
            current['faq_items'] = [
                {'question': i.question, 'answer': i.answer} for i in self.store.list_items(GeoFaqItem)
            ]
        if options.include_geo_answers:
            current['answers'] = [
                {'question': i.question, 'short_answer': i.short_answer, 'long_answer': i.long_answer}
                for i in self.store.list_items(GeoAnswer)
            ]
        if options.include_page_seo:
            state['pages'] = list(CustomPage.objects.filter(status='ACTIVE').order_by('created_at'))
            overrides = self.store.list_overrides(PageSeo)
            current['page_seo'] = [
                self._item_snapshot('page_id', page.id, page.route, overrides.get(page.id))
                for page in state['pages']
            ]
        if options.include_product_seo:
            state['products'] = list(
                DownloadableProduct.objects.filter(is_active=True, is_archived=False).order_by('created_at')
            )
            overrides = self.store.list_overrides(ProductSeo)
            current['product_seo'] = [
                self._item_snapshot('product_id', product.id, product.slug, overrides.get(product.id))
                for product in state['products']
            ]
        return {'current': current, 'state': state}

    def _item_snapshot(self, key_name, key, label, override):
        item = {key_name: str(key), 'label': label}
        for name in ITEM_FIELDS:
            item[name] = getattr(override, name, None)
        return item

    def _build_preview(self, options):
        snapshot = self._current_snapshot(options)
        current, state = snapshot['current'], snapshot['state']
        proposed = {}
        diff = []
        overwrite = options.overwrite

        existing_settings = _snapshot(state.get('settings'), SETTINGS_FIELDS) or {}
        site_name = first_non_empty(existing_settings.get('site_name')) or self.default_site_name
        default_description = first_non_empty(existing_settings.get('default_description'))

        if options.include_global_seo:
            proposed_settings = self.propose_settings(existing_settings, overwrite)
            proposed[TARGET_SETTINGS] = proposed_settings
            site_name = first_non_empty(proposed_settings['site_name']) or self.default_site_name
            default_description = first_non_empty(proposed_settings['default_description'])
            diff.extend(compute_diff(current[TARGET_SETTINGS] or {}, proposed_settings, TARGET_SETTINGS, SETTINGS_FIELDS))

        fallback_description = default_description or defaults.clip_description(
            defaults.render(defaults.DEFAULT_DESCRIPTION, site_name)
        )

        if options.include_geo_identity:
            proposed_identity = self.propose_identity(current[TARGET_IDENTITY] or {}, site_name, overwrite)
            proposed[TARGET_IDENTITY] = proposed_identity
            diff.extend(compute_diff(current[TARGET_IDENTITY] or {}, proposed_identity, TARGET_IDENTITY, IDENTITY_FIELDS))

        if options.include_geo_faq:
            proposed['faq_items'] = self.propose_list(current['faq_items'], defaults.faq_seed(site_name), overwrite)
            diff.extend(self._list_diff(TARGET_FAQ, current['faq_items'], proposed['faq_items']))

        if options.include_geo_answers:
            proposed['answers'] = self.propose_list(current['answers'], defaults.answer_seed(site_name), overwrite)
            diff.extend(self._list_diff(TARGET_ANSWERS, current['answers'], proposed['answers']))

        if options.include_page_seo:
            proposed['page_seo'] = []
            for page, before in zip(state['pages'], current['page_seo']):
                after = dict(before)
                after['title'] = pick(before['title'], item_title(page.name, site_name), overwrite)
                after['description'] = pick(before['description'], fallback_description, overwrite)
                proposed['page_seo'].append(after)
                diff.extend(compute_diff(before, after, f"page:{page.id}", ITEM_FIELDS))

        if options.include_product_seo:
            proposed['product_seo'] = []
            for product, before in zip(state['products'], current['product_seo']):
                content_description = defaults.summarize_content(
                    first_non_empty(product.seo_description, product.long_description, product.short_description),
                    fallback_description,
                )
                after = dict(before)
                after['title'] = pick(before['title'], item_title(product.name, site_name), overwrite)
                after['description'] = pick(before['description'], content_description, overwrite)
                proposed['product_seo'].append(after)
                diff.extend(compute_diff(before, after, f"product:{product.slug}", ITEM_FIELDS))

        return {'current': current, 'proposed': proposed, 'diff': diff, 'state': state}

    def propose_settings(self, current, overwrite):
        site_name = pick(current.get('site_name'), self.default_site_name, overwrite)
        base = pick(current.get('canonical_base_url'), self.default_base, overwrite)
        proposed = {
            'site_name': site_name,
            'default_title': pick(current.get('default_title'), defaults.render(defaults.DEFAULT_TITLE, site_name), overwrite),
            'default_description': pick(
                current.get('default_description'),
                defaults.clip_description(defaults.render(defaults.DEFAULT_DESCRIPTION, site_name)),
                overwrite,
            ),
            # a social image is never invented
            'default_og_image_url': current.get('default_og_image_url'),
            'canonical_base_url': base,
            'robots_txt': pick(current.get('robots_txt'), defaults.build_robots(base), overwrite),
        }
        for name, default in SETTINGS_FLAG_DEFAULTS.items():
            proposed[name] = pick(current.get(name), default, overwrite)
        return proposed

    def propose_identity(self, current, site_name, overwrite):
        texts = {
            'short_description': defaults.DEFAULT_SHORT_DESCRIPTION,
            'long_description': defaults.DEFAULT_LONG_DESCRIPTION,
            'target_audience': defaults.DEFAULT_TARGET_AUDIENCE,
            'positioning': defaults.DEFAULT_POSITIONING,
            'differentiation': defaults.DEFAULT_DIFFERENTIATION,
        }
        proposed = {
            name: pick(current.get(name), defaults.render(template, site_name), overwrite)
            for name, template in texts.items()
        }
        proposed['brand_tone'] = pick(current.get('brand_tone'), defaults.DEFAULT_BRAND_TONE, overwrite)
        proposed['language'] = pick(current.get('language'), self.default_language, overwrite)
        return proposed

    def propose_list(self, current, seed, overwrite):
        if current and not overwrite:
            return current
        return seed

    def _list_diff(self, target, before, after):
        if before == after:
            return []
        return [{'target': target, 'field': 'items', 'before': len(before), 'after': len(after)}]

    # -- apply -------------------------------------------------------------

    def _write(self, options, preview):
        changed = {}
        for entry in preview['diff']:
            changed.setdefault(entry['target'], {})[entry['field']] = entry['after']

        if TARGET_SETTINGS in changed:
            self.store.upsert_singleton(SeoSettings, changed[TARGET_SETTINGS])
        if TARGET_IDENTITY in changed:
            self.store.upsert_singleton(GeoIdentity, changed[TARGET_IDENTITY])
        if TARGET_FAQ in changed:
            self.store.replace_items(GeoFaqItem, preview['proposed']['faq_items'])
        if TARGET_ANSWERS in changed:
            self.store.replace_items(GeoAnswer, preview['proposed']['answers'])

        for page in preview['state'].get('pages', ()):
            fields = changed.get(f"page:{page.id}")
            if fields:
                self.store.upsert_override(PageSeo, page.id, fields)
        for product in preview['state'].get('products', ()):
            fields = changed.get(f"product:{product.slug}")
            if fields:
                self.store.upsert_override(ProductSeo, product.id, fields)

    def _log_state(self, run_id, state, options, changes=None):
        if changes is None:
            logger.info("Autofill run %s [%s] -> %s", run_id, options.mode, state)
        else:
            logger.info("Autofill run %s [%s] -> %s (%d change(s))", run_id, options.mode, state, changes)
