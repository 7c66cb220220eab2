"""
API URL routing for seogeo_backend.
All API endpoints are prefixed with /api/v1/
"""
import importlib

from django.urls import path
from django.views.decorators.csrf import csrf_exempt

from seogeo_backend.views import health_check


def _lazy(module, attr):
    """
    Lazy view import to avoid AppRegistryNotReady. DRF applies its own CSRF
    policy per authentication class, so the wrapper is exempt from the
    middleware check like the wrapped view.
    """
    @csrf_exempt
    def view(*args, **kwargs):
        mod = importlib.import_module(module)
        return getattr(mod, attr)(*args, **kwargs)
    return view


urlpatterns = [
    # Health check (no auth) - GET /api/v1/health/
    path('health/', health_check),
    # --- Global settings & identity singletons ---
    path('seo-geo/settings/', _lazy('seogeo.views', 'seo_settings_detail')),
    path('seo-geo/identity/', _lazy('seogeo.views', 'geo_identity_detail')),
    # --- FAQ corpus ---
    path('seo-geo/faq/', _lazy('seogeo.views', 'faq_list_create')),
    path('seo-geo/faq/reorder/', _lazy('seogeo.views', 'faq_reorder')),
    path('seo-geo/faq/<uuid:item_id>/', _lazy('seogeo.views', 'faq_detail')),
    # --- Answer blocks ---
    path('seo-geo/answers/', _lazy('seogeo.views', 'answer_list_create')),
    path('seo-geo/answers/reorder/', _lazy('seogeo.views', 'answer_reorder')),
    path('seo-geo/answers/<uuid:item_id>/', _lazy('seogeo.views', 'answer_detail')),
    # --- Per-page / per-product overrides ---
    path('seo-geo/pages/<str:page_id>/', _lazy('seogeo.views', 'page_seo_detail')),
    path('seo-geo/products/<str:product_id>/', _lazy('seogeo.views', 'product_seo_detail')),
    # --- Diagnostics ---
    path('seo-geo/diagnostics/', _lazy('diagnostics.views', 'diagnostics_run')),
    # --- Autofill ---
    path('seo-geo/autofill/preview/', _lazy('autofill.views', 'autofill_preview')),
    path('seo-geo/autofill/apply/', _lazy('autofill.views', 'autofill_apply')),
]
