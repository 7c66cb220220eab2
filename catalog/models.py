"""
Content inventory consumed by the SEO/GEO engine.

Only the fields the metadata resolver, diagnostics and autofill read are
modelled here; page building, checkout and article editing live elsewhere.
"""

import uuid
from django.db import models


class CompanySettings(models.Model):
    """Company identity shown in structured data (logo, support contact)."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    singleton_key = models.CharField(max_length=32, unique=True, default='global')
    company_name = models.CharField(max_length=255, blank=True, null=True)
    logo_url = models.CharField(max_length=500, blank=True, null=True)
    website_url = models.CharField(max_length=500, blank=True, null=True)
    support_email = models.EmailField(blank=True, null=True)
    contact_email = models.EmailField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'company_settings'
        verbose_name_plural = 'company settings'

    def __str__(self):
        return self.company_name or 'Company settings'


class CustomPage(models.Model):
    STATUS_CHOICES = [
        ('ACTIVE', 'Active'),
        ('DRAFT', 'Draft'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    route = models.CharField(max_length=500, help_text="Public path, e.g. /pricing")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='DRAFT')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'custom_pages'
        ordering = ['created_at']
        indexes = [
            models.Index(fields=['route', 'status'], name='custom_page_route_status_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.route})"


class DownloadableProduct(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True)
    short_description = models.TextField(blank=True, null=True)
    long_description = models.TextField(blank=True, null=True)
    seo_title = models.CharField(max_length=255, blank=True, null=True)
    seo_description = models.TextField(blank=True, null=True)
    og_image_url = models.CharField(max_length=500, blank=True, null=True)
    index = models.BooleanField(null=True, blank=True, help_text="Declared robots index flag")
    follow = models.BooleanField(null=True, blank=True, help_text="Declared robots follow flag")
    price_cents = models.IntegerField(null=True, blank=True)
    currency = models.CharField(max_length=3, default='EUR')
    is_active = models.BooleanField(default=True)
    is_archived = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'downloadable_products'
        ordering = ['created_at']
        indexes = [
            models.Index(fields=['is_active', 'is_archived'], name='product_active_archived_idx'),
        ]

    def __str__(self):
        return self.name

    @property
    def is_published(self):
        return self.is_active and not self.is_archived


class Article(models.Model):
    STATUS_CHOICES = [
        ('DRAFT', 'Draft'),
        ('PUBLISHED', 'Published'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=500)
    slug = models.SlugField(max_length=255, unique=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='DRAFT')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'articles'
        ordering = ['-updated_at']

    def __str__(self):
        return self.title
