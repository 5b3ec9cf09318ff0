"""
Test suite for the pricing module
Tests: price lists, item prices, price lookup and the pricing panel quote
"""
from datetime import timedelta
from decimal import Decimal
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from erp.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from erp.pricing.models import PriceList, PriceListItem
from erp.pricing.services import resolve_price


class ResolvePriceTests(TestCase):
    """Test resolve_price"""

    def setUp(self):
        self.item = TestDataFactory.create_item(unit_price=Decimal('100.00'))
        self.price_list = PriceList.objects.create(name='Wholesale')
        PriceListItem.objects.create(price_list=self.price_list, item=self.item, price=Decimal('80.00'))

    def test_price_list_entry_wins(self):
        result = resolve_price(self.item, self.price_list)
        self.assertEqual(result['price'], Decimal('80.00'))
        self.assertEqual(result['source'], 'price_list')

    def test_falls_back_to_item_price(self):
        other = TestDataFactory.create_item(unit_price=Decimal('42.00'))
        self.assertEqual(resolve_price(other, self.price_list)['price'], Decimal('42.00'))
        self.assertEqual(resolve_price(self.item)['source'], 'item')

    def test_inactive_or_expired_list_ignored(self):
        self.price_list.valid_to = timezone.localdate() - timedelta(days=1)
        self.price_list.save()
        self.assertEqual(resolve_price(self.item, self.price_list)['source'], 'item')
        self.price_list.valid_to = None
        self.price_list.is_active = False
        self.price_list.save()
        self.assertEqual(resolve_price(self.item, self.price_list)['price'], Decimal('100.00'))


class PricingAPITests(TestCase):
    """Test pricing endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.item = TestDataFactory.create_item(unit_price=Decimal('100.00'), gst_rate=Decimal('18.00'))
        self.price_list = PriceList.objects.create(name='Retail')

    def test_price_list_window_validation(self):
        response = self.client.post('/api/v1/pricelist/', {
            'name': 'Festive', 'valid_from': '2025-11-01', 'valid_to': '2025-10-01',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('valid_to', response.data)

    def test_upsert_item_prices(self):
        url = f'/api/v1/pricelist/{self.price_list.id}/items/'
        response = self.client.post(url, {'item': self.item.id, 'price': '90.00'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        response = self.client.post(url, [{'item': self.item.id, 'price': '85.00'}], format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(PriceListItem.objects.get().price, Decimal('85.00'))

    def test_negative_price_rejected(self):
        response = self.client.post(f'/api/v1/pricelist/{self.price_list.id}/items/',
                                    {'item': self.item.id, 'price': '-1'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_check_price(self):
        PriceListItem.objects.create(price_list=self.price_list, item=self.item, price=Decimal('75.00'))
        response = self.client.get(f'/api/v1/check-price/?item={self.item.id}&price_list={self.price_list.id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['price'], Decimal('75.00'))

        response = self.client.get(f'/api/v1/check-price/?item={self.item.id}&price_list=9999')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

        response = self.client.get('/api/v1/check-price/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_quote_uses_item_gst_rate(self):
        PriceListItem.objects.create(price_list=self.price_list, item=self.item, price=Decimal('50.00'))
        response = self.client.post('/api/v1/pricing-panel/quote/', {
            'price_list': self.price_list.id,
            'freight': '10',
            'lines': [{'item': self.item.id, 'quantity': '2'}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        line = response.data['lines'][0]
        self.assertEqual(line['price_source'], 'price_list')
        self.assertEqual(line['gst_amount'], Decimal('18.00'))
        self.assertEqual(response.data['totals']['grand_total'], Decimal('128.00'))

    def test_quote_requires_lines(self):
        response = self.client.post('/api/v1/pricing-panel/quote/', {'lines': []}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
