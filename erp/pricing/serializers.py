from rest_framework import serializers
from .models import PriceList, PriceListItem


class PriceListItemSerializer(serializers.ModelSerializer):
    item_code = serializers.CharField(source='item.item_code', read_only=True)
    item_name = serializers.CharField(source='item.item_name', read_only=True)

    class Meta:
        model = PriceListItem
        fields = ['id', 'price_list', 'item', 'item_code', 'item_name', 'price', 'updated_at']
        read_only_fields = ['price_list', 'updated_at']

    def validate_price(self, value):
        if value < 0:
            raise serializers.ValidationError('Price cannot be negative')
        return value


class PriceListSerializer(serializers.ModelSerializer):
    items_count = serializers.IntegerField(source='items.count', read_only=True)

    class Meta:
        model = PriceList
        fields = ['id', 'name', 'description', 'currency', 'is_active', 'valid_from', 'valid_to',
                  'items_count', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']

    def validate(self, attrs):
        valid_from = attrs.get('valid_from', getattr(self.instance, 'valid_from', None))
        valid_to = attrs.get('valid_to', getattr(self.instance, 'valid_to', None))
        if valid_from and valid_to and valid_from > valid_to:
            raise serializers.ValidationError({'valid_to': 'valid_to must be on or after valid_from'})
        return attrs


class QuoteLineSerializer(serializers.Serializer):
    item = serializers.IntegerField()
    quantity = serializers.DecimalField(max_digits=14, decimal_places=3)
    discount = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, default=0)
    gst_rate = serializers.DecimalField(max_digits=5, decimal_places=2, required=False, allow_null=True, default=None)
    igst_rate = serializers.DecimalField(max_digits=5, decimal_places=2, required=False, default=0)
    tax_option = serializers.ChoiceField(choices=['GST', 'IGST'], required=False, default='GST')

    def validate_quantity(self, value):
        if value <= 0:
            raise serializers.ValidationError('Quantity must be greater than zero')
        return value


class QuoteSerializer(serializers.Serializer):
    lines = QuoteLineSerializer(many=True, allow_empty=False)
    price_list = serializers.IntegerField(required=False, allow_null=True)
    freight = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, default=0)
    rounding = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, default=0)
