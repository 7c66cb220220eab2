from django.contrib import admin
from .models import Article, CompanySettings, CustomPage, DownloadableProduct


@admin.register(CustomPage)
class CustomPageAdmin(admin.ModelAdmin):
    list_display = ('name', 'route', 'status', 'updated_at')
    list_filter = ('status',)
    search_fields = ('name', 'route')
    readonly_fields = ('created_at', 'updated_at')


@admin.register(DownloadableProduct)
class DownloadableProductAdmin(admin.ModelAdmin):
    list_display = ('name', 'slug', 'price_cents', 'currency', 'is_active', 'is_archived', 'updated_at')
    list_filter = ('is_active', 'is_archived')
    search_fields = ('name', 'slug')
    readonly_fields = ('created_at', 'updated_at')


@admin.register(Article)
class ArticleAdmin(admin.ModelAdmin):
    list_display = ('title', 'slug', 'status', 'updated_at')
    list_filter = ('status',)
    search_fields = ('title', 'slug')


@admin.register(CompanySettings)
class CompanySettingsAdmin(admin.ModelAdmin):
    list_display = ('company_name', 'website_url', 'support_email', 'updated_at')
    readonly_fields = ('singleton_key', 'created_at', 'updated_at')
