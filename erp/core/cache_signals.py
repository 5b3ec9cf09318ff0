"""
Cache invalidation signals
Automatically invalidate cached reports when the underlying data changes
"""
from django.db.models.signals import post_save, post_delete
import logging

from .cache_utils import invalidate_inventory_cache, invalidate_helpdesk_cache

logger = logging.getLogger(__name__)


def _inventory_changed(sender, **kwargs):
    invalidate_inventory_cache()


def _helpdesk_changed(sender, **kwargs):
    invalidate_helpdesk_cache()


for model in ('inventory.Inventory', 'inventory.InventoryBatch'):
    post_save.connect(_inventory_changed, sender=model, dispatch_uid=f'cache-{model}-save')
    post_delete.connect(_inventory_changed, sender=model, dispatch_uid=f'cache-{model}-delete')

for model in ('helpdesk.Ticket', 'helpdesk.TicketFeedback'):
    post_save.connect(_helpdesk_changed, sender=model, dispatch_uid=f'cache-{model}-save')
    post_delete.connect(_helpdesk_changed, sender=model, dispatch_uid=f'cache-{model}-delete')
