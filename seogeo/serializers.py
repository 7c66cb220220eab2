"""
Serializers for the SEO/GEO metadata store (read side of the admin API).
"""
from rest_framework import serializers

from .models import GeoAnswer, GeoFaqItem, GeoIdentity, PageSeo, ProductSeo, SeoSettings

OVERRIDE_FIELDS = (
    'id', 'title', 'description', 'og_image_url', 'canonical_url',
    'robots_index', 'robots_follow', 'json_ld_override', 'updated_at',
)


class SeoSettingsSerializer(serializers.ModelSerializer):
    class Meta:
        model = SeoSettings
        fields = (
            'id', 'site_name', 'default_title', 'default_description',
            'default_og_image_url', 'canonical_base_url',
            'default_robots_index', 'default_robots_follow', 'robots_txt',
            'sitemap_enabled', 'sitemap_include_pages',
            'sitemap_include_products', 'sitemap_include_articles',
            'updated_at',
        )
        read_only_fields = fields


class GeoIdentitySerializer(serializers.ModelSerializer):
    class Meta:
        model = GeoIdentity
        fields = (
            'id', 'short_description', 'long_description', 'target_audience',
            'positioning', 'differentiation', 'brand_tone', 'language',
            'updated_at',
        )
        read_only_fields = fields


class GeoFaqItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = GeoFaqItem
        fields = ('id', 'question', 'answer', 'order', 'created_at', 'updated_at')
        read_only_fields = fields


class GeoAnswerSerializer(serializers.ModelSerializer):
    class Meta:
        model = GeoAnswer
        fields = ('id', 'question', 'short_answer', 'long_answer', 'order', 'created_at', 'updated_at')
        read_only_fields = fields


class PageSeoSerializer(serializers.ModelSerializer):
    page_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = PageSeo
        fields = ('page_id',) + OVERRIDE_FIELDS
        read_only_fields = fields


class ProductSeoSerializer(serializers.ModelSerializer):
    product_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = ProductSeo
        fields = ('product_id',) + OVERRIDE_FIELDS
        read_only_fields = fields
