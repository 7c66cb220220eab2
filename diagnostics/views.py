"""
GET /api/v1/seo-geo/diagnostics/
"""
import logging

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAdminUser

from diagnostics.engine import DiagnosticsEngine
from seogeo.errors import ok_response

logger = logging.getLogger(__name__)

_engine = None


def get_engine() -> DiagnosticsEngine:
    global _engine
    if _engine is None:
        _engine = DiagnosticsEngine()
    return _engine


@api_view(['GET'])
@permission_classes([IsAdminUser])
def diagnostics_run(request):
    """Run (or serve the cached result of) every SEO/GEO check."""
    return ok_response(get_engine().run())
