"""
SEO/GEO metadata store models.

  1. Singletons: SeoSettings (global discovery defaults), GeoIdentity (brand identity for AI answers)
  2. Ordered corpora: GeoFaqItem, GeoAnswer (dense zero-based ``order``)
  3. Overrides: PageSeo, ProductSeo (every field optional; empty means inherit)
"""

import uuid
from django.db import models
from catalog.models import CustomPage, DownloadableProduct

SINGLETON_KEY = 'global'


# ─────────────────────────────────────────────────────────────
# SINGLETONS
# ─────────────────────────────────────────────────────────────

class SeoSettings(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    singleton_key = models.CharField(max_length=32, unique=True, default=SINGLETON_KEY)
    site_name = models.CharField(max_length=180, blank=True, null=True)
    default_title = models.CharField(max_length=180, blank=True, null=True)
    default_description = models.CharField(max_length=320, blank=True, null=True)
    default_og_image_url = models.CharField(max_length=500, blank=True, null=True)
    canonical_base_url = models.CharField(max_length=500, blank=True, null=True)
    default_robots_index = models.BooleanField(default=True)
    default_robots_follow = models.BooleanField(default=True)
    robots_txt = models.TextField(max_length=5000, blank=True, null=True)
    sitemap_enabled = models.BooleanField(default=True)
    sitemap_include_pages = models.BooleanField(default=True)
    sitemap_include_products = models.BooleanField(default=True)
    sitemap_include_articles = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'seo_settings'
        verbose_name_plural = 'SEO settings'

    def __str__(self):
        return f"SEO settings ({self.site_name or 'unnamed site'})"


class GeoIdentity(models.Model):
    BRAND_TONE_CHOICES = [
        ('PEDAGOGICAL', 'Pedagogical'),
        ('PROFESSIONAL', 'Professional'),
        ('FRIENDLY', 'Friendly'),
        ('EXPERT', 'Expert'),
        ('NEUTRAL', 'Neutral'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    singleton_key = models.CharField(max_length=32, unique=True, default=SINGLETON_KEY)
    short_description = models.CharField(max_length=260, blank=True, null=True)
    long_description = models.TextField(max_length=2000, blank=True, null=True)
    target_audience = models.CharField(max_length=255, blank=True, null=True)
    positioning = models.CharField(max_length=255, blank=True, null=True)
    differentiation = models.TextField(max_length=2000, blank=True, null=True)
    brand_tone = models.CharField(max_length=20, choices=BRAND_TONE_CHOICES, blank=True, null=True)
    language = models.CharField(max_length=10, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'geo_identity'
        verbose_name_plural = 'GEO identity'

    def __str__(self):
        return 'GEO identity'


# ─────────────────────────────────────────────────────────────
# ORDERED CORPORA
# ─────────────────────────────────────────────────────────────

class GeoFaqItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    question = models.CharField(max_length=500)
    answer = models.TextField(max_length=5000)
    order = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'geo_faq_items'
        ordering = ['order', 'created_at']

    def __str__(self):
        return f"#{self.order} {self.question[:60]}"


class GeoAnswer(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    question = models.CharField(max_length=500)
    short_answer = models.TextField(max_length=1000, blank=True, null=True)
    long_answer = models.TextField(max_length=5000, blank=True, null=True)
    order = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'geo_answers'
        ordering = ['order', 'created_at']

    def __str__(self):
        return f"#{self.order} {self.question[:60]}"


# ─────────────────────────────────────────────────────────────
# OVERRIDES
# ─────────────────────────────────────────────────────────────

class MetadataOverride(models.Model):
    """Shared optional fields of page and product overrides."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=180, blank=True, null=True)
    description = models.CharField(max_length=320, blank=True, null=True)
    og_image_url = models.CharField(max_length=500, blank=True, null=True)
    canonical_url = models.CharField(max_length=500, blank=True, null=True)
    robots_index = models.BooleanField(null=True, blank=True)
    robots_follow = models.BooleanField(null=True, blank=True)
    json_ld_override = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    # Fields an admin or autofill may write; everything else is bookkeeping.
    EDITABLE_FIELDS = (
        'title', 'description', 'og_image_url', 'canonical_url',
        'robots_index', 'robots_follow', 'json_ld_override',
    )

    class Meta:
        abstract = True


class PageSeo(MetadataOverride):
    page = models.OneToOneField(CustomPage, on_delete=models.CASCADE, related_name='seo')

    class Meta:
        db_table = 'page_seo'

    def __str__(self):
        return f"SEO override for page {self.page_id}"


class ProductSeo(MetadataOverride):
    product = models.OneToOneField(DownloadableProduct, on_delete=models.CASCADE, related_name='seo_override')

    class Meta:
        db_table = 'product_seo'

    def __str__(self):
        return f"SEO override for product {self.product_id}"
