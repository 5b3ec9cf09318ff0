"""
Test suite for items, item groups and resources
"""
from django.test import TestCase
from rest_framework import status
from erp.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from erp.catalog.models import Item


class ItemAPITests(TestCase):
    """Test item endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_item_uppercases_code(self):
        response = self.client.post('/api/v1/items/', {
            'item_code': 'itm-0001', 'item_name': 'Bolt', 'unit_price': '2.50', 'managed_by': 'batch',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Item.objects.get().item_code, 'ITM-0001')

    def test_lookup_by_exact_code(self):
        item = TestDataFactory.create_item(code='ITM-0042')
        response = self.client.get('/api/v1/items/lookup/?code=itm-0042')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['id'], item.id)
        response = self.client.get('/api/v1/items/lookup/?code=ITM-004')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_next_code(self):
        """Test the next code follows the highest existing number"""
        TestDataFactory.create_item(code='ITM-0001')
        TestDataFactory.create_item(code='ITM-0009')
        TestDataFactory.create_item(code='RAW-0100')
        response = self.client.get('/api/v1/items/next-code/?prefix=itm')
        self.assertEqual(response.data['code'], 'ITM-0010')

    def test_search_filter_matches_every_word(self):
        TestDataFactory.create_item(code='ITM-0001', name='Steel hex bolt')
        TestDataFactory.create_item(code='ITM-0002', name='Steel washer')
        response = self.client.get('/api/v1/items/?search=steel bolt')
        self.assertEqual([row['item_code'] for row in response.data], ['ITM-0001'])

    def test_paginated_list(self):
        for index in range(3):
            TestDataFactory.create_item(code=f'ITM-000{index}')
        response = self.client.get('/api/v1/items/?page=1&limit=2')
        self.assertEqual(response.data['count'], 3)
        self.assertEqual(len(response.data['results']), 2)
        self.assertEqual(response.data['total_pages'], 2)
        self.assertEqual(response.data['next'], 2)


class ResourceAPITests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_resource(self):
        response = self.client.post('/api/v1/resources/', {
            'code': 'MCH-01', 'name': 'Lathe', 'resource_type': 'machine', 'unit_price': '450',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['resource_type'], 'machine')
