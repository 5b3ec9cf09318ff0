"""
Test suite for the production module
Tests: BOM creation, production orders from a BOM, stock transfer, issue and receipt
"""
from datetime import date
from decimal import Decimal
from django.test import TestCase
from rest_framework import status
from erp.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from erp.inventory.models import Inventory, InventoryBatch, StockMovement
from erp.production.models import BOM, ProductionOrder
from erp.production.services import create_order_from_bom, prefill_transfer


class BOMAPITests(TestCase):
    """Test BOM endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.product = TestDataFactory.create_item(code='FG-1', item_type='item')
        self.component = TestDataFactory.create_item(code='RM-1')
        self.resource = TestDataFactory.create_resource(code='RES-LAB')

    def test_create_bom_computes_totals(self):
        response = self.client.post('/api/v1/bom/', {
            'product': self.product.id,
            'bom_type': 'Production',
            'items': [{'item': self.component.id, 'quantity': '2.5', 'unit_price': '10.00'}],
            'resources': [{'resource': self.resource.id, 'quantity': '1', 'unit_price': '40.00'}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Decimal(response.data['total_sum']), Decimal('65.00'))
        self.assertEqual(Decimal(response.data['items'][0]['total']), Decimal('25.00'))

    def test_bom_requires_components(self):
        response = self.client.post('/api/v1/bom/', {'product': self.product.id, 'items': []}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('items', response.data)

    def test_bom_rejects_zero_quantity(self):
        response = self.client.post('/api/v1/bom/', {
            'product': self.product.id,
            'items': [{'item': self.component.id, 'quantity': '0', 'unit_price': '10'}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class ProductionFlowTests(TestCase):
    """Test the transfer / issue / receipt flow of a production order"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.store = TestDataFactory.create_warehouse(code='STORE')
        self.floor = TestDataFactory.create_warehouse(code='FLOOR')
        self.product = TestDataFactory.create_item(code='FG-1')
        self.component = TestDataFactory.create_item(code='RM-1', managed_by='batch')
        TestDataFactory.create_inventory(self.component, self.store, 20, batches=[
            ('LATE', 12, date(2027, 1, 1)),
            ('EARLY', 8, date(2026, 3, 1)),
        ])
        self.bom = BOM.objects.create(product=self.product)
        self.bom.items.create(item=self.component, quantity=Decimal('2'), warehouse=self.store,
                              unit_price=Decimal('5'))
        self.bom.recalculate()

    def test_order_copies_bom_lines(self):
        response = self.client.post('/api/v1/production-orders/', {
            'bom': self.bom.id, 'warehouse': self.floor.id, 'quantity': '5',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['production_doc_no'].startswith('PRO/'))
        line = response.data['items'][0]
        self.assertEqual(Decimal(line['required_qty']), Decimal('10'))
        self.assertEqual(Decimal(line['total']), Decimal('50.00'))

    def test_required_quantity_is_derived(self):
        """Test a client supplied required_qty is ignored in favour of unit_qty x quantity"""
        response = self.client.post('/api/v1/production-orders/', {
            'bom': self.bom.id, 'warehouse': self.floor.id, 'quantity': '5',
            'items': [{'item': self.component.id, 'warehouse': self.store.id, 'unit_qty': '2',
                       'required_qty': '1', 'unit_price': '5'}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        line = response.data['items'][0]
        self.assertEqual(Decimal(line['required_qty']), Decimal('10'))
        self.assertEqual(Decimal(line['total']), Decimal('50.00'))

    def test_quantity_change_recalculates_lines(self):
        order = create_order_from_bom(self.bom, 5, self.floor, user=self.user)
        response = self.client.patch(f'/api/v1/production-orders/{order.id}/', {'quantity': '50'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        line = order.items.get()
        self.assertEqual(line.required_qty, Decimal('100'))
        self.assertEqual(line.total, Decimal('500.00'))
        self.assertEqual(Decimal(response.data['items'][0]['required_qty']), Decimal('100'))

    def test_bom_cannot_change_on_update(self):
        order = create_order_from_bom(self.bom, 5, self.floor, user=self.user)
        other = BOM.objects.create(product=self.product)
        response = self.client.patch(f'/api/v1/production-orders/{order.id}/', {'bom': other.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('bom', response.data)

    def test_prefill_allocates_earliest_expiry_first(self):
        order = create_order_from_bom(self.bom, 5, self.floor, user=self.user)
        row = prefill_transfer(order)[0]
        self.assertEqual(row['sourceWarehouse'], 'STORE')
        self.assertEqual([a['batchNumber'] for a in row['allocations']], ['EARLY', 'LATE'])
        self.assertEqual(row['allocations'][1]['quantity'], Decimal('2'))
        self.assertEqual(row['shortfall'], Decimal('0'))

    def test_full_flow(self):
        """Test transfer, issue and receipt update stock and order status"""
        order = create_order_from_bom(self.bom, 5, self.floor, user=self.user)

        response = self.client.post(f'/api/v1/stock-transfer/{order.id}/?qty=5', {
            'avgCostPrice': '5.00',
            'data': [
                {'itemId': self.component.id, 'sourceWarehouse': 'STORE', 'destinationWarehouse': 'FLOOR',
                 'batchNumber': 'EARLY', 'quantity': 8},
                {'itemId': self.component.id, 'sourceWarehouse': 'STORE', 'destinationWarehouse': 'FLOOR',
                 'batchNumber': 'LATE', 'quantity': 2},
            ],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['transferred'], 2)
        order.refresh_from_db()
        self.assertEqual(order.status, 'Transferred')
        self.assertEqual(Inventory.objects.get(item=self.component, warehouse=self.floor).quantity, Decimal('10'))

        response = self.client.post(f'/api/v1/issue-production/{order.id}/?qty=5', {
            'avgCostPrice': '11.50',
            'data': [{'itemId': self.component.id, 'warehouse': 'FLOOR', 'batchNumber': 'EARLY', 'quantity': 8}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        order.refresh_from_db()
        self.assertEqual(order.issued_qty, Decimal('5'))
        self.assertEqual(order.rate, Decimal('11.50'))
        self.assertEqual(order.status, 'In Progress')
        self.assertTrue(StockMovement.objects.filter(movement_type='STOCK_ISSUE', reference=order.production_doc_no).exists())

        response = self.client.post(f'/api/v1/receipt-production/{order.id}/?qty=5', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        order.refresh_from_db()
        self.assertEqual(order.status, 'Completed')
        self.assertEqual(Inventory.objects.get(item=self.product, warehouse=self.floor).quantity, Decimal('5'))

    def test_failed_transfer_leaves_order_untouched(self):
        order = create_order_from_bom(self.bom, 5, self.floor, user=self.user)
        response = self.client.post(f'/api/v1/stock-transfer/{order.id}/?qty=5', {
            'data': [
                {'itemId': self.component.id, 'sourceWarehouse': 'STORE', 'destinationWarehouse': 'FLOOR',
                 'batchNumber': 'EARLY', 'quantity': 8},
                {'itemId': self.component.id, 'sourceWarehouse': 'STORE', 'destinationWarehouse': 'FLOOR',
                 'batchNumber': 'LATE', 'quantity': 50},
            ],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])
        order.refresh_from_db()
        self.assertEqual(order.status, 'Open')
        self.assertEqual(InventoryBatch.objects.get(batch_number='EARLY', inventory__warehouse=self.store).quantity,
                         Decimal('8'))

    def test_issue_requires_batch_for_batch_managed_item(self):
        order = create_order_from_bom(self.bom, 5, self.store, user=self.user)
        response = self.client.post(f'/api/v1/issue-production/{order.id}/?qty=5', {
            'avgCostPrice': '5',
            'data': [{'itemId': self.component.id, 'warehouse': 'STORE', 'quantity': 2}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('Batch number is required', response.data['message'])

    def test_issue_requires_avg_cost_price(self):
        order = create_order_from_bom(self.bom, 5, self.store, user=self.user)
        response = self.client.post(f'/api/v1/issue-production/{order.id}/?qty=5', {
            'data': [{'itemId': self.component.id, 'warehouse': 'STORE', 'batchNumber': 'EARLY', 'quantity': 2}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_partial_receipt_keeps_order_open(self):
        order = create_order_from_bom(self.bom, 5, self.floor, user=self.user)
        self.client.post(f'/api/v1/receipt-production/{order.id}/?qty=2', {}, format='json')
        order.refresh_from_db()
        self.assertEqual(order.received_qty, Decimal('2'))
        self.assertNotEqual(order.status, 'Completed')

    def test_order_with_stock_cannot_be_deleted(self):
        order = create_order_from_bom(self.bom, 5, self.floor, user=self.user)
        self.client.post(f'/api/v1/receipt-production/{order.id}/?qty=1', {}, format='json')
        response = self.client.delete(f'/api/v1/production-orders/{order.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(ProductionOrder.objects.filter(pk=order.id).exists())
