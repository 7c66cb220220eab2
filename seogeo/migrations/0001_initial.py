# Generated manually

import uuid
import django.db.models.deletion
from django.db import migrations, models


def _override_fields():
    return [
        ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
        ('title', models.CharField(blank=True, max_length=180, null=True)),
        ('description', models.CharField(blank=True, max_length=320, null=True)),
        ('og_image_url', models.CharField(blank=True, max_length=500, null=True)),
        ('canonical_url', models.CharField(blank=True, max_length=500, null=True)),
        ('robots_index', models.BooleanField(blank=True, null=True)),
        ('robots_follow', models.BooleanField(blank=True, null=True)),
        ('json_ld_override', models.JSONField(blank=True, null=True)),
        ('created_at', models.DateTimeField(auto_now_add=True)),
        ('updated_at', models.DateTimeField(auto_now=True)),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('catalog', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='SeoSettings',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('singleton_key', models.CharField(default='global', max_length=32, unique=True)),
                ('site_name', models.CharField(blank=True, max_length=180, null=True)),
                ('default_title', models.CharField(blank=True, max_length=180, null=True)),
                ('default_description', models.CharField(blank=True, max_length=320, null=True)),
                ('default_og_image_url', models.CharField(blank=True, max_length=500, null=True)),
                ('canonical_base_url', models.CharField(blank=True, max_length=500, null=True)),
                ('default_robots_index', models.BooleanField(default=True)),
                ('default_robots_follow', models.BooleanField(default=True)),
                ('robots_txt', models.TextField(blank=True, max_length=5000, null=True)),
                ('sitemap_enabled', models.BooleanField(default=True)),
                ('sitemap_include_pages', models.BooleanField(default=True)),
                ('sitemap_include_products', models.BooleanField(default=True)),
                ('sitemap_include_articles', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'seo_settings',
                'verbose_name_plural': 'SEO settings',
            },
        ),
        migrations.CreateModel(
            name='GeoIdentity',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('singleton_key', models.CharField(default='global', max_length=32, unique=True)),
                ('short_description', models.CharField(blank=True, max_length=260, null=True)),
                ('long_description', models.TextField(blank=True, max_length=2000, null=True)),
                ('target_audience', models.CharField(blank=True, max_length=255, null=True)),
                ('positioning', models.CharField(blank=True, max_length=255, null=True)),
                ('differentiation', models.TextField(blank=True, max_length=2000, null=True)),
                ('brand_tone', models.CharField(blank=True, choices=[('PEDAGOGICAL', 'Pedagogical'), ('PROFESSIONAL', 'Professional'), ('FRIENDLY', 'Friendly'), ('EXPERT', 'Expert'), ('NEUTRAL', 'Neutral')], max_length=20, null=True)),
                ('language', models.CharField(blank=True, max_length=10, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'geo_identity',
                'verbose_name_plural': 'GEO identity',
            },
        ),
        migrations.CreateModel(
            name='GeoFaqItem',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('question', models.CharField(max_length=500)),
                ('answer', models.TextField(max_length=5000)),
                ('order', models.IntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'geo_faq_items',
                'ordering': ['order', 'created_at'],
            },
        ),
        migrations.CreateModel(
            name='GeoAnswer',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('question', models.CharField(max_length=500)),
                ('short_answer', models.TextField(blank=True, max_length=1000, null=True)),
                ('long_answer', models.TextField(blank=True, max_length=5000, null=True)),
                ('order', models.IntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'geo_answers',
                'ordering': ['order', 'created_at'],
            },
        ),
        migrations.CreateModel(
            name='PageSeo',
            fields=_override_fields() + [
                ('page', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='seo', to='catalog.custompage')),
            ],
            options={
                'db_table': 'page_seo',
            },
        ),
        migrations.CreateModel(
            name='ProductSeo',
            fields=_override_fields() + [
                ('product', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='seo_override', to='catalog.downloadableproduct')),
            ],
            options={
                'db_table': 'product_seo',
            },
        ),
    ]
