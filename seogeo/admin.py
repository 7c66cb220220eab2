from django.contrib import admin
from .models import GeoAnswer, GeoFaqItem, GeoIdentity, PageSeo, ProductSeo, SeoSettings


@admin.register(SeoSettings)
class SeoSettingsAdmin(admin.ModelAdmin):
    list_display = ('site_name', 'canonical_base_url', 'default_robots_index', 'sitemap_enabled', 'updated_at')
    readonly_fields = ('singleton_key', 'created_at', 'updated_at')


@admin.register(GeoIdentity)
class GeoIdentityAdmin(admin.ModelAdmin):
    list_display = ('short_description', 'brand_tone', 'language', 'updated_at')
    readonly_fields = ('singleton_key', 'created_at', 'updated_at')


@admin.register(GeoFaqItem)
class GeoFaqItemAdmin(admin.ModelAdmin):
    list_display = ('order', 'question', 'updated_at')
    ordering = ('order',)
    search_fields = ('question', 'answer')


@admin.register(GeoAnswer)
class GeoAnswerAdmin(admin.ModelAdmin):
    list_display = ('order', 'question', 'updated_at')
    ordering = ('order',)
    search_fields = ('question',)


@admin.register(PageSeo)
class PageSeoAdmin(admin.ModelAdmin):
    list_display = ('page', 'title', 'canonical_url', 'robots_index', 'robots_follow', 'updated_at')
    raw_id_fields = ('page',)
    search_fields = ('title', 'page__route')


@admin.register(ProductSeo)
class ProductSeoAdmin(admin.ModelAdmin):
    list_display = ('product', 'title', 'canonical_url', 'robots_index', 'robots_follow', 'updated_at')
    raw_id_fields = ('product',)
    search_fields = ('title', 'product__slug')
