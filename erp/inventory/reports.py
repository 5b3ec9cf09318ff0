from django.db.models import Sum, Count
from erp.core.cache_utils import cached_query, INVENTORY_SUMMARY_CACHE_TTL
from .models import Inventory


@cached_query(cache_ttl=INVENTORY_SUMMARY_CACHE_TTL, key_prefix='inventory_summary')
def inventory_summary(warehouse_id=None):
    """Stock totals per warehouse"""
    queryset = Inventory.objects.all()
    if warehouse_id:
        queryset = queryset.filter(warehouse_id=warehouse_id)
    rows = queryset.values('warehouse_id', 'warehouse__code', 'warehouse__name').annotate(
        items=Count('item', distinct=True),
        quantity=Sum('quantity'),
        committed=Sum('committed'),
        on_order=Sum('on_order'),
    ).order_by('warehouse__code')
    return [
        {
            'warehouse': row['warehouse_id'],
            'warehouse_code': row['warehouse__code'],
            'warehouse_name': row['warehouse__name'],
            'items': row['items'],
            'quantity': str(row['quantity']),
            'committed': str(row['committed']),
            'on_order': str(row['on_order']),
        }
        for row in rows
    ]
