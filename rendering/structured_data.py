"""
JSON-LD payloads embedded in every served document.
"""
from django.conf import settings as django_settings

from rendering.precedence import canonical_base, first_non_empty, normalize_path

SCHEMA_CONTEXT = 'https://schema.org'
IN_STOCK = 'http://schema.org/InStock'


def _compact(payload):
    return {key: value for key, value in payload.items() if value not in (None, '', [])}


def build_organization(settings, identity=None, company=None) -> dict:
    return _compact({
        '@context': SCHEMA_CONTEXT,
        '@type': 'Organization',
        'name': first_non_empty(getattr(company, 'company_name', None), getattr(settings, 'site_name', None)),
        'url': canonical_base(settings) or None,
        'logo': first_non_empty(getattr(company, 'logo_url', None), getattr(settings, 'default_og_image_url', None)),
        'description': first_non_empty(
            getattr(identity, 'short_description', None),
            getattr(identity, 'long_description', None),
            getattr(settings, 'default_description', None),
        ),
        'email': first_non_empty(getattr(company, 'contact_email', None), getattr(company, 'support_email', None)),
    })


def build_website(settings) -> dict:
    return _compact({
        '@context': SCHEMA_CONTEXT,
        '@type': 'WebSite',
        'name': first_non_empty(getattr(settings, 'site_name', None), getattr(settings, 'default_title', None)),
        'url': canonical_base(settings) or None,
    })


def build_faq_page(faq_items) -> dict:
    return {
        '@context': SCHEMA_CONTEXT,
        '@type': 'FAQPage',
        'mainEntity': [
            {
                '@type': 'Question',
                'name': item.question,
                'acceptedAnswer': {'@type': 'Answer', 'text': item.answer},
            }
            for item in sorted(faq_items, key=lambda item: item.order)
        ],
    }


def format_price(price_cents) -> str:
    return f"{price_cents / 100:.2f}"


def build_product(product, metadata) -> dict:
    payload = _compact({
        '@context': SCHEMA_CONTEXT,
        '@type': 'Product',
        'name': product.name,
        'description': metadata.get('description'),
        'image': metadata['og'].get('image'),
        'url': metadata['canonical_url'],
        'sku': product.slug,
    })
    if product.price_cents is not None:
        payload['offers'] = {
            '@type': 'Offer',
            'price': format_price(product.price_cents),
            'priceCurrency': product.currency or 'EUR',
            'availability': IN_STOCK,
            'url': metadata['canonical_url'],
        }
    return payload


def build_structured_data(path, settings, metadata, identity=None, company=None,
                          faq_items=(), product=None, override=None) -> list:
    """
    Ordered JSON-LD payloads for one document: Organization and WebSite
    always, FAQPage on the FAQ routes when FAQ items exist, the Product
    payload on product detail pages, then any custom payload stored on the
    matched override.
    """
    payloads = [build_organization(settings, identity, company), build_website(settings)]

    faq_routes = django_settings.SEOGEO.get('FAQ_ROUTES', ('/', '/faq'))
    if faq_items and normalize_path(path) in faq_routes:
        payloads.append(build_faq_page(faq_items))

    if product is not None:
        payloads.append(build_product(product, metadata))

    custom = getattr(override, 'json_ld_override', None)
    if isinstance(custom, dict) and custom:
        payloads.append(custom)
    elif isinstance(custom, list):
        payloads.extend(entry for entry in custom if isinstance(entry, dict) and entry)

    return payloads
