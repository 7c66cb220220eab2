"""
Metadata Store: the only way the resolver, diagnostics and autofill reach
persisted SEO/GEO records.

Singletons are reached through a load-or-create accessor keyed by a fixed
constant; creation is an idempotent get_or_create on a unique key, so
concurrent first reads converge on one row.
"""
import logging

from django.db import transaction
from django.db.models import Max

from seogeo.errors import ValidationError, not_found
from seogeo.models import SINGLETON_KEY, PageSeo, ProductSeo

logger = logging.getLogger(__name__)

# override model -> name of the one-to-one key field
OVERRIDE_KEYS = {
    PageSeo: 'page_id',
    ProductSeo: 'product_id',
}


class MetadataStore:
    """ORM-backed Metadata Store."""

    # -- transactions -----------------------------------------------------

    def atomic(self):
        return transaction.atomic()

    # -- singletons -------------------------------------------------------

    def get_or_create_singleton(self, model):
        obj, created = model.objects.get_or_create(singleton_key=SINGLETON_KEY)
        if created:
            logger.info("Created %s singleton with default values", model.__name__)
        return obj

    def find_singleton(self, model):
        """Read-only lookup: returns None instead of creating the row."""
        return model.objects.filter(singleton_key=SINGLETON_KEY).first()

    def upsert_singleton(self, model, fields):
        obj, _ = model.objects.update_or_create(singleton_key=SINGLETON_KEY, defaults=fields)
        return obj

    # -- per-page / per-product overrides ---------------------------------

    def get_override(self, model, key):
        return model.objects.filter(**{OVERRIDE_KEYS[model]: key}).first()

    def list_overrides(self, model):
        return {getattr(o, OVERRIDE_KEYS[model]): o for o in model.objects.all()}

    def upsert_override(self, model, key, fields):
        obj, _ = model.objects.update_or_create(**{OVERRIDE_KEYS[model]: key}, defaults=fields)
        return obj

    # -- ordered lists (FAQ items, answer blocks) -------------------------

    def list_items(self, model):
        return list(model.objects.order_by('order', 'created_at'))

    def count_items(self, model):
        return model.objects.count()

    def create_item(self, model, fields):
        with transaction.atomic():
            current_max = model.objects.aggregate(max_order=Max('order'))['max_order']
            next_order = (current_max if current_max is not None else -1) + 1
            return model.objects.create(order=next_order, **fields)

    def update_item(self, model, item_id, fields, label='Item'):
        obj = model.objects.filter(id=item_id).first()
        if obj is None:
            raise not_found(f'{label} not found')
        for name, value in fields.items():
            setattr(obj, name, value)
        obj.save()
        return obj

    def delete_item(self, model, item_id, label='Item'):
        """Delete one item and renumber the remainder so ``order`` stays dense."""
        with transaction.atomic():
            deleted, _ = model.objects.filter(id=item_id).delete()
            if not deleted:
                raise not_found(f'{label} not found')
            self._renumber(model, [obj.id for obj in self.list_items(model)])

    def reorder(self, model, ids, label='Item'):
        """
        Full-list renumbering: ``ids`` must name every item exactly once; the
        item at position i receives order i.
        """
        if not isinstance(ids, list) or not ids:
            raise ValidationError('A non-empty list of ids is required for reordering', code='INVALID_BODY')

        normalized = [str(i) for i in ids]
        if len(set(normalized)) != len(normalized):
            raise ValidationError('Duplicate ids were provided', code='DUPLICATE_IDS')

        existing = {str(pk) for pk in model.objects.values_list('id', flat=True)}
        unknown = [i for i in normalized if i not in existing]
        if unknown:
            raise ValidationError(f'Some {label.lower()}s do not exist', code='NOT_FOUND')
        if len(normalized) != len(existing):
            raise ValidationError(f'Every {label.lower()} must be listed when reordering', code='INCOMPLETE_ORDER')

        with transaction.atomic():
            self._renumber(model, normalized)
        return self.list_items(model)

    def replace_items(self, model, rows):
        """Delete every item and recreate ``rows`` with dense zero-based order."""
        with transaction.atomic():
            model.objects.all().delete()
            return [model.objects.create(order=index, **row) for index, row in enumerate(rows)]

    def _renumber(self, model, ids):
        for index, pk in enumerate(ids):
            model.objects.filter(id=pk).update(order=index)
