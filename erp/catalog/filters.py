import django_filters
from django.db.models import Q
from .models import Item


class ItemFilter(django_filters.FilterSet):
    """Filter for Item lists"""
    search = django_filters.CharFilter(method='filter_search', label='Search')
    group = django_filters.NumberFilter(field_name='item_group_id', lookup_expr='exact')
    managed_by = django_filters.CharFilter(field_name='managed_by', lookup_expr='exact')
    item_type = django_filters.CharFilter(field_name='item_type', lookup_expr='exact')
    active = django_filters.BooleanFilter(field_name='is_active')

    class Meta:
        model = Item
        fields = ['search', 'group', 'managed_by', 'item_type', 'active']

    def filter_search(self, queryset, name, value):
        """Every word must appear in the code, name or description"""
        for word in value.split():
            queryset = queryset.filter(
                Q(item_code__icontains=word) |
                Q(item_name__icontains=word) |
                Q(description__icontains=word)
            )
        return queryset
