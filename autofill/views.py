"""
POST /api/v1/seo-geo/autofill/preview/
POST /api/v1/seo-geo/autofill/apply/

Body: {
    "include_global_seo": bool, "include_geo_identity": bool,
    "include_geo_faq": bool, "include_geo_answers": bool,
    "include_page_seo": bool?, "include_product_seo": bool?,
    "mode": "FILL_ONLY_MISSING" | "OVERWRITE", "confirm": bool?
}
"""
import logging

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAdminUser

from autofill.engine import AutofillEngine, AutofillOptions
from seogeo.errors import ok_response

logger = logging.getLogger(__name__)


@api_view(['POST'])
@permission_classes([IsAdminUser])
def autofill_preview(request):
    options = AutofillOptions.from_payload(request.data)
    return ok_response(AutofillEngine().preview(options))


@api_view(['POST'])
@permission_classes([IsAdminUser])
def autofill_apply(request):
    options = AutofillOptions.from_payload(request.data)
    result = AutofillEngine().apply(options)
    return ok_response(result, message=f"{len(result['diff'])} change(s) applied")
