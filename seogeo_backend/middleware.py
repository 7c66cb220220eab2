"""
Custom middleware for seogeo_backend.
"""
from django.middleware.common import CommonMiddleware
from django.utils.cache import add_never_cache_headers

ADMIN_API_PREFIX = '/api/v1/seo-geo/'


class APICommonMiddleware(CommonMiddleware):
    """
    CommonMiddleware tuned for the SEO/GEO API.

    No APPEND_SLASH redirects under /api/: a PUT to a slashless endpoint
    must fail instead of being replayed as a GET. Admin responses carry
    never-cache headers so an edited title is never served stale by a proxy.
    """
    def should_redirect_with_slash(self, request):
        if request.path.startswith('/api/'):
            return False
        return super().should_redirect_with_slash(request)

    def process_response(self, request, response):
        response = super().process_response(request, response)
        if request.path.startswith(ADMIN_API_PREFIX):
            add_never_cache_headers(response)
        return response
