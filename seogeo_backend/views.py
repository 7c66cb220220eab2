"""
Liveness probe for the SEO/GEO service.
"""
from django.http import JsonResponse
from django.views.decorators.http import require_GET

from rendering.views import get_renderer


@require_GET
def health_check(request):
    """
    GET /api/v1/health/, unauthenticated.

    Always 200 while the process is up; ``document_shell`` tells whether the
    application template could be read, since without it every page route
    answers 503.
    """
    shell_ready = get_renderer().template_cache.load() is not None
    return JsonResponse({
        "status": "ok" if shell_ready else "degraded",
        "service": "seogeo-backend",
        "document_shell": "ready" if shell_ready else "missing",
    })
