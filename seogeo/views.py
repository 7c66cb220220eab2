"""
Admin API for the SEO/GEO metadata store.

All endpoints answer with the {"ok": ..., "data"|"error": ...} envelope;
ValidationError raised by the service layer is mapped by the project
exception handler.
"""
import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAdminUser

from seogeo.errors import ok_response
from seogeo.serializers import (
    GeoAnswerSerializer, GeoFaqItemSerializer, GeoIdentitySerializer,
    PageSeoSerializer, ProductSeoSerializer, SeoSettingsSerializer,
)
from seogeo.services import SeoGeoService

logger = logging.getLogger(__name__)


def _service():
    return SeoGeoService()


@api_view(['GET', 'PUT'])
@permission_classes([IsAdminUser])
def seo_settings_detail(request):
    """GET/PUT /api/v1/seo-geo/settings/"""
    service = _service()
    if request.method == 'PUT':
        obj = service.update_seo_settings(request.data)
        return ok_response(SeoSettingsSerializer(obj).data, message='SEO settings saved')
    return ok_response(SeoSettingsSerializer(service.get_seo_settings()).data)


@api_view(['GET', 'PUT'])
@permission_classes([IsAdminUser])
def geo_identity_detail(request):
    """GET/PUT /api/v1/seo-geo/identity/"""
    service = _service()
    if request.method == 'PUT':
        obj = service.update_geo_identity(request.data)
        return ok_response(GeoIdentitySerializer(obj).data, message='GEO identity saved')
    return ok_response(GeoIdentitySerializer(service.get_geo_identity()).data)


# ── FAQ ──────────────────────────────────────────────────────

@api_view(['GET', 'POST'])
@permission_classes([IsAdminUser])
def faq_list_create(request):
    """GET/POST /api/v1/seo-geo/faq/"""
    service = _service()
    if request.method == 'POST':
        item = service.create_faq(request.data)
        return ok_response(GeoFaqItemSerializer(item).data, http_status=status.HTTP_201_CREATED)
    return ok_response(GeoFaqItemSerializer(service.list_faq(), many=True).data)


@api_view(['PUT', 'DELETE'])
@permission_classes([IsAdminUser])
def faq_detail(request, item_id):
    """PUT/DELETE /api/v1/seo-geo/faq/{id}/"""
    service = _service()
    if request.method == 'DELETE':
        service.delete_faq(item_id)
        return ok_response({'id': str(item_id)}, message='FAQ item deleted')
    item = service.update_faq(item_id, request.data)
    return ok_response(GeoFaqItemSerializer(item).data)


@api_view(['POST'])
@permission_classes([IsAdminUser])
def faq_reorder(request):
    """POST /api/v1/seo-geo/faq/reorder/  Body: {"ids": [...]}"""
    ids = request.data.get('ids') if isinstance(request.data, dict) else None
    items = _service().reorder_faq(ids)
    return ok_response(GeoFaqItemSerializer(items, many=True).data)


# ── Answer blocks ────────────────────────────────────────────

@api_view(['GET', 'POST'])
@permission_classes([IsAdminUser])
def answer_list_create(request):
    """GET/POST /api/v1/seo-geo/answers/"""
    service = _service()
    if request.method == 'POST':
        item = service.create_answer(request.data)
        return ok_response(GeoAnswerSerializer(item).data, http_status=status.HTTP_201_CREATED)
    return ok_response(GeoAnswerSerializer(service.list_answers(), many=True).data)


@api_view(['PUT', 'DELETE'])
@permission_classes([IsAdminUser])
def answer_detail(request, item_id):
    """PUT/DELETE /api/v1/seo-geo/answers/{id}/"""
    service = _service()
    if request.method == 'DELETE':
        service.delete_answer(item_id)
        return ok_response({'id': str(item_id)}, message='Answer deleted')
    item = service.update_answer(item_id, request.data)
    return ok_response(GeoAnswerSerializer(item).data)


@api_view(['POST'])
@permission_classes([IsAdminUser])
def answer_reorder(request):
    """POST /api/v1/seo-geo/answers/reorder/  Body: {"ids": [...]}"""
    ids = request.data.get('ids') if isinstance(request.data, dict) else None
    items = _service().reorder_answers(ids)
    return ok_response(GeoAnswerSerializer(items, many=True).data)


# ── Per-page / per-product overrides ─────────────────────────

@api_view(['GET', 'PUT'])
@permission_classes([IsAdminUser])
def page_seo_detail(request, page_id):
    """GET/PUT /api/v1/seo-geo/pages/{page_id}/"""
    service = _service()
    if request.method == 'PUT':
        obj = service.save_page_seo(page_id, request.data)
        return ok_response(PageSeoSerializer(obj).data, message='Page SEO saved')
    page, override = service.get_page_seo(page_id)
    return ok_response({
        'page': {'id': str(page.id), 'name': page.name, 'route': page.route, 'status': page.status},
        'seo': PageSeoSerializer(override).data if override else None,
    })


@api_view(['GET', 'PUT'])
@permission_classes([IsAdminUser])
def product_seo_detail(request, product_id):
    """GET/PUT /api/v1/seo-geo/products/{product_id}/"""
    service = _service()
    if request.method == 'PUT':
        obj = service.save_product_seo(product_id, request.data)
        return ok_response(ProductSeoSerializer(obj).data, message='Product SEO saved')
    product, override = service.get_product_seo(product_id)
    return ok_response({
        'product': {'id': str(product.id), 'name': product.name, 'slug': product.slug},
        'seo': ProductSeoSerializer(override).data if override else None,
    })
