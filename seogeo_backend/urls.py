"""
URL configuration for seogeo_backend project.
"""
from django.contrib import admin
from django.urls import path, include, re_path
from django.http import JsonResponse

from rendering.views import document_view, robots_txt, sitemap_xml


def custom_404(request, exception=None):
    """Return JSON for 404 errors instead of HTML."""
    return JsonResponse({
        'ok': False,
        'error': {'code': 'NOT_FOUND', 'message': 'The requested resource was not found.'},
    }, status=404)


def custom_500(request):
    """Return JSON for 500 errors instead of HTML."""
    return JsonResponse({
        'ok': False,
        'error': {'code': 'SERVER_ERROR', 'message': 'An unexpected error occurred.'},
    }, status=500)


urlpatterns = [
    path('django-admin/', admin.site.urls),
    path('api/v1/', include('seogeo_backend.api_urls')),
    path('robots.txt', robots_txt),
    path('sitemap.xml', sitemap_xml),
    # Everything else is a client-side route served from the SPA shell
    re_path(r'^(?!api/|django-admin/|static/).*$', document_view),
]

# Custom error handlers - return JSON instead of HTML
handler404 = custom_404
handler500 = custom_500
