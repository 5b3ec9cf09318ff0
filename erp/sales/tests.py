"""
Test suite for the sales module
Tests: sales quotations, quotation mail, sales orders and stock commitments
"""
from decimal import Decimal
from django.core import mail
from django.test import TestCase
from rest_framework import status
from erp.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from erp.inventory.models import Inventory
from erp.sales.models import SalesQuotation, SalesOrder


class SalesTestCase(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user(username='seller')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.customer = TestDataFactory.create_customer(name='Globex', email='buyer@globex.test')
        self.warehouse = TestDataFactory.create_warehouse(code='MAIN')
        self.item = TestDataFactory.create_item(code='FG-1', name='Widget')
        TestDataFactory.create_inventory(self.item, self.warehouse, 50)

    def _quotation(self, quantity='4'):
        response = self.client.post('/api/v1/sales-quotation/', {
            'customer': self.customer.id,
            'items': [{'item': self.item.id, 'warehouse': self.warehouse.id, 'quantity': quantity,
                       'unit_price': '250', 'tax_option': 'IGST', 'igst_rate': '12'}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        return SalesQuotation.objects.get(pk=response.data['id'])


class SalesQuotationTests(SalesTestCase):
    """Test sales quotation endpoints"""

    def test_create_with_igst(self):
        quotation = self._quotation()
        self.assertTrue(quotation.document_number.startswith('SQ/'))
        self.assertEqual(quotation.gst_total, Decimal('120.00'))
        self.assertEqual(quotation.grand_total, Decimal('1120.00'))

    def test_quotation_requires_items(self):
        response = self.client.post('/api/v1/sales-quotation/', {'customer': self.customer.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('items', response.data)

    def test_replace_lines_on_update(self):
        quotation = self._quotation()
        response = self.client.patch(f'/api/v1/sales-quotation/{quotation.id}/', {
            'items': [{'item': self.item.id, 'quantity': '1', 'unit_price': '100'}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['items']), 1)
        self.assertEqual(Decimal(response.data['grand_total']), Decimal('100.00'))

    def test_email_quotation(self):
        quotation = self._quotation()
        response = self.client.post(f'/api/v1/sales-quotation/{quotation.id}/email/',
                                    {'emails': 'buyer@globex.test, boss@globex.test'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ['buyer@globex.test', 'boss@globex.test'])
        self.assertIn(quotation.document_number, mail.outbox[0].subject)
        self.assertIn('Widget', mail.outbox[0].alternatives[0][0])

    def test_email_requires_recipient(self):
        quotation = self._quotation()
        response = self.client.post(f'/api/v1/sales-quotation/{quotation.id}/email/', {'emails': []}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(len(mail.outbox), 0)


class SalesOrderTests(SalesTestCase):
    """Test sales orders and committed stock"""

    def test_order_from_quotation_commits_stock(self):
        quotation = self._quotation(quantity='4')
        response = self.client.post('/api/v1/sales-order/', {
            'customer': self.customer.id, 'quotation': quotation.id,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['document_number'].startswith('SO/'))
        quotation.refresh_from_db()
        self.assertEqual(quotation.status, 'Converted')
        inventory = Inventory.objects.get(item=self.item, warehouse=self.warehouse)
        self.assertEqual(inventory.committed, Decimal('4'))
        self.assertEqual(inventory.quantity, Decimal('50'))

    def test_cancel_releases_commitment(self):
        response = self.client.post('/api/v1/sales-order/', {
            'customer': self.customer.id,
            'items': [{'item': self.item.id, 'warehouse': self.warehouse.id, 'quantity': '7', 'unit_price': '10'}],
        }, format='json')
        order_id = response.data['id']

        response = self.client.post(f'/api/v1/sales-order/{order_id}/cancel/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'Cancelled')
        self.assertEqual(Inventory.objects.get().committed, Decimal('0'))

        response = self.client.post(f'/api/v1/sales-order/{order_id}/cancel/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_releases_commitment(self):
        response = self.client.post('/api/v1/sales-order/', {
            'customer': self.customer.id,
            'items': [{'item': self.item.id, 'warehouse': self.warehouse.id, 'quantity': '3', 'unit_price': '10'}],
        }, format='json')
        self.client.delete(f"/api/v1/sales-order/{response.data['id']}/")
        self.assertFalse(SalesOrder.objects.exists())
        self.assertEqual(Inventory.objects.get().committed, Decimal('0'))

    def test_filter_by_status(self):
        self.client.post('/api/v1/sales-order/', {
            'customer': self.customer.id,
            'items': [{'item': self.item.id, 'quantity': '1', 'unit_price': '10'}],
        }, format='json')
        response = self.client.get('/api/v1/sales-order/?status=Cancelled')
        self.assertEqual(response.data['count'], 0)
        response = self.client.get('/api/v1/sales-order/?status=Open')
        self.assertEqual(response.data['count'], 1)
