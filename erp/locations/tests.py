"""
Test suite for warehouses and bin locations
"""
from django.test import TestCase
from rest_framework import status
from erp.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from erp.locations.models import Warehouse, BinLocation


class WarehouseAPITests(TestCase):
    """Test warehouse endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_warehouse_normalizes_code(self):
        """Test the warehouse code is trimmed and uppercased"""
        response = self.client.post('/api/v1/warehouse/', {
            'code': '  wh01 ', 'name': 'Main', 'state': 'Maharashtra', 'country': 'India',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['code'], 'WH01')
        self.assertEqual(Warehouse.objects.get().created_by, self.user)

    def test_create_warehouse_missing_required_fields(self):
        """Test state and country are required"""
        response = self.client.post('/api/v1/warehouse/', {'code': 'WH02', 'name': 'Second'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('state', response.data)
        self.assertIn('country', response.data)

    def test_duplicate_warehouse_code(self):
        TestDataFactory.create_warehouse(code='WH03')
        response = self.client.post('/api/v1/warehouse/', {
            'code': 'wh03', 'name': 'Dup', 'state': 'Goa', 'country': 'India',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(str(response.data['code'][0]), 'Warehouse code already exists')

    def test_list_newest_first(self):
        first = TestDataFactory.create_warehouse(code='WHA')
        second = TestDataFactory.create_warehouse(code='WHB')
        response = self.client.get('/api/v1/warehouse/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([w['id'] for w in response.data], [second.id, first.id])


class BinLocationAPITests(TestCase):
    """Test bins nested under a warehouse code"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.warehouse = TestDataFactory.create_warehouse(code='WHX')

    def test_add_bin_returns_warehouse_with_bins(self):
        """Test a blank max_capacity is stored as 0"""
        response = self.client.post('/api/v1/warehouse/whx/bins/', {
            'code': 'A1-R1-B1', 'bin': 'B1', 'max_capacity': '',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(len(response.data['bins']), 1)
        self.assertEqual(BinLocation.objects.get().max_capacity, 0)

    def test_duplicate_bin_code_in_same_warehouse(self):
        TestDataFactory.create_bin(self.warehouse, code='A1-R1-B1')
        response = self.client.post('/api/v1/warehouse/WHX/bins/', {'code': 'A1-R1-B1', 'bin': 'B1'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(str(response.data['code'][0]), "Bin code 'A1-R1-B1' already exists")

    def test_same_bin_code_in_other_warehouse(self):
        other = TestDataFactory.create_warehouse(code='WHY')
        TestDataFactory.create_bin(other, code='A1-R1-B1')
        response = self.client.post('/api/v1/warehouse/WHX/bins/', {'code': 'A1-R1-B1', 'bin': 'B1'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_bins_of_unknown_warehouse(self):
        response = self.client.get('/api/v1/warehouse/NOPE/bins/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
