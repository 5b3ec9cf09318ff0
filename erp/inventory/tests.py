"""
Test suite for the inventory module
Tests: receiving and issuing stock, batch handling, stock transfers, adjustments and edge cases
"""
from datetime import date
from decimal import Decimal
from django.core.cache import cache
from django.test import TestCase
from rest_framework import status
from erp.core.exceptions import BusinessRuleError, NotFoundError
from erp.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from erp.inventory.models import Inventory, InventoryBatch, StockMovement
from erp.inventory.services import (
    receive_stock, issue_stock, transfer_stock, available_batches, allocate_batches,
)


class ReceiveIssueTests(TestCase):
    """Test receive_stock and issue_stock"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.warehouse = TestDataFactory.create_warehouse()
        self.item = TestDataFactory.create_item(managed_by='batch')

    def test_receive_creates_inventory_and_merges_batches(self):
        """Test same batch numbers merge and blank batches are skipped"""
        receive_stock(self.item, self.warehouse, 15, batches=[
            {'batchNumber': 'B1', 'quantity': 10, 'expiryDate': '2026-01-31'},
            {'batch_number': 'B1', 'quantity': 5},
            {'batch_number': '', 'quantity': 3},
        ], reference='GRN/2025-26/00001', reference_type='GRN', user=self.user)

        inventory = Inventory.objects.get(item=self.item, warehouse=self.warehouse)
        self.assertEqual(inventory.quantity, Decimal('15'))
        batch = InventoryBatch.objects.get(inventory=inventory)
        self.assertEqual(batch.quantity, Decimal('15'))
        self.assertEqual(batch.expiry_date, date(2026, 1, 31))
        movement = StockMovement.objects.get()
        self.assertEqual(movement.movement_type, 'IN')
        self.assertEqual(movement.reference_type, 'GRN')

    def test_receive_reduces_on_order_but_not_below_zero(self):
        TestDataFactory.create_inventory(self.item, self.warehouse, 0, on_order=Decimal('4'))
        receive_stock(self.item, self.warehouse, 10)
        inventory = Inventory.objects.get(item=self.item, warehouse=self.warehouse)
        self.assertEqual(inventory.on_order, Decimal('0'))
        self.assertEqual(inventory.quantity, Decimal('10'))

    def test_issue_requires_inventory(self):
        with self.assertRaises(NotFoundError):
            issue_stock(self.item, self.warehouse, 1)

    def test_issue_more_than_available(self):
        TestDataFactory.create_inventory(self.item, self.warehouse, 5)
        with self.assertRaises(BusinessRuleError):
            issue_stock(self.item, self.warehouse, 6)
        self.assertEqual(Inventory.objects.get().quantity, Decimal('5'))

    def test_issue_from_batch(self):
        TestDataFactory.create_inventory(self.item, self.warehouse, 10, batches=[('B1', 6), ('B2', 4)])
        issue_stock(self.item, self.warehouse, 4, batch_number='B1', movement_type='STOCK_ISSUE')
        self.assertEqual(InventoryBatch.objects.get(batch_number='B1').quantity, Decimal('2'))
        self.assertEqual(Inventory.objects.get().quantity, Decimal('6'))
        with self.assertRaises(BusinessRuleError):
            issue_stock(self.item, self.warehouse, 5, batch_number='B2')

    def test_fefo_order_and_allocation(self):
        """Test earliest expiry comes first and undated batches last"""
        TestDataFactory.create_inventory(self.item, self.warehouse, 12, batches=[
            ('NODATE', 5),
            ('LATE', 4, date(2026, 12, 1)),
            ('EARLY', 3, date(2026, 1, 1)),
        ])
        self.assertEqual([b.batch_number for b in available_batches(self.item, self.warehouse)],
                         ['EARLY', 'LATE', 'NODATE'])
        allocations, shortfall = allocate_batches(self.item, self.warehouse, 15)
        self.assertEqual([(b.batch_number, q) for b, q in allocations],
                         [('EARLY', Decimal('3')), ('LATE', Decimal('4')), ('NODATE', Decimal('5'))])
        self.assertEqual(shortfall, Decimal('3'))


class TransferStockTests(TestCase):
    """Test the atomic stock transfer"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.source = TestDataFactory.create_warehouse(code='SRC')
        self.destination = TestDataFactory.create_warehouse(code='DST')
        self.bin = TestDataFactory.create_bin(self.destination, code='A1-R1-B1')
        self.item = TestDataFactory.create_item(managed_by='batch')
        self.plain_item = TestDataFactory.create_item()
        TestDataFactory.create_inventory(self.item, self.source, 10, batches=[('B1', 10, date(2026, 6, 30))])
        TestDataFactory.create_inventory(self.plain_item, self.source, 3)

    def test_batch_transfer_creates_destination_batch(self):
        transferred = transfer_stock([{
            'itemId': self.item.id, 'sourceWarehouse': 'SRC', 'destinationWarehouse': 'DST',
            'batchNumber': 'B1', 'quantity': 4, 'selectedBin': self.bin.id,
        }], reference='PRO/2025-26/00001', user=self.user, avg_cost_price='12.50')

        self.assertEqual(transferred, 1)
        source = Inventory.objects.get(item=self.item, warehouse=self.source)
        destination = Inventory.objects.get(item=self.item, warehouse=self.destination)
        self.assertEqual(source.quantity, Decimal('6'))
        self.assertEqual(destination.quantity, Decimal('4'))
        batch = destination.batches.get(batch_number='B1')
        self.assertEqual(batch.expiry_date, date(2026, 6, 30))
        self.assertEqual(batch.unit_price, Decimal('12.50'))
        incoming = StockMovement.objects.get(warehouse=self.destination)
        self.assertEqual(incoming.bin_location, self.bin)
        outgoing = StockMovement.objects.get(warehouse=self.source)
        self.assertEqual(outgoing.movement_type, 'OUT')
        self.assertEqual(outgoing.bin_location, self.bin)

    def test_failing_entry_rolls_back_whole_transfer(self):
        """Test a later failing entry undoes earlier ones"""
        with self.assertRaises(BusinessRuleError):
            transfer_stock([
                {'itemId': self.item.id, 'sourceWarehouse': 'SRC', 'destinationWarehouse': 'DST',
                 'batchNumber': 'B1', 'quantity': 4},
                {'itemId': self.plain_item.id, 'sourceWarehouse': 'SRC', 'destinationWarehouse': 'DST',
                 'quantity': 5},
            ])
        self.assertEqual(Inventory.objects.get(item=self.item, warehouse=self.source).quantity, Decimal('10'))
        self.assertFalse(Inventory.objects.filter(warehouse=self.destination).exists())
        self.assertFalse(StockMovement.objects.exists())

    def test_missing_fields(self):
        with self.assertRaisesMessage(BusinessRuleError, 'Missing or invalid fields in entry'):
            transfer_stock([{'itemId': self.item.id, 'sourceWarehouse': 'SRC', 'quantity': 1}])

    def test_unknown_batch(self):
        with self.assertRaisesMessage(BusinessRuleError, "Batch 'B9' not found or insufficient quantity"):
            transfer_stock([{'itemId': self.item.id, 'sourceWarehouse': 'SRC', 'destinationWarehouse': 'DST',
                             'batchNumber': 'B9', 'quantity': 2}])

    def test_insufficient_source_quantity(self):
        with self.assertRaisesMessage(BusinessRuleError, 'Insufficient quantity in source warehouse'):
            transfer_stock([{'itemId': self.item.id, 'sourceWarehouse': 'SRC', 'destinationWarehouse': 'DST',
                             'batchNumber': 'B1', 'quantity': '10.5'}])

    def test_bin_of_other_warehouse_rejected(self):
        other_bin = TestDataFactory.create_bin(self.source, code='X1')
        with self.assertRaises(BusinessRuleError):
            transfer_stock([{'itemId': self.plain_item.id, 'sourceWarehouse': 'SRC', 'destinationWarehouse': 'DST',
                             'quantity': 1, 'selectedBin': other_bin.id}])


class InventoryAPITests(TestCase):
    """Test inventory endpoints"""

    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.warehouse = TestDataFactory.create_warehouse(code='MAIN')
        self.item = TestDataFactory.create_item()

    def test_adjustment_in_and_out(self):
        response = self.client.post('/api/v1/inventory-adjustments/', {
            'item': self.item.id, 'warehouse': self.warehouse.id, 'adjustment_type': 'in',
            'quantity': '8', 'reason': 'Opening stock',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        response = self.client.post('/api/v1/inventory-adjustments/', {
            'item': self.item.id, 'warehouse': self.warehouse.id, 'adjustment_type': 'out',
            'quantity': '20', 'reason': 'Damage',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])
        self.assertEqual(Inventory.objects.get().quantity, Decimal('8'))

    def test_item_totals_across_warehouses(self):
        other = TestDataFactory.create_warehouse(code='SECOND')
        TestDataFactory.create_inventory(self.item, self.warehouse, 5)
        TestDataFactory.create_inventory(self.item, other, 7, committed=Decimal('2'))
        response = self.client.get(f'/api/v1/inventory/{self.item.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Decimal(str(response.data['total_quantity'])), Decimal('12'))
        self.assertEqual(len(response.data['warehouses']), 2)

    def test_summary_invalidated_on_stock_change(self):
        TestDataFactory.create_inventory(self.item, self.warehouse, 5)
        first = self.client.get('/api/v1/inventory/summary/').data
        self.assertEqual(Decimal(first[0]['quantity']), Decimal('5'))
        receive_stock(self.item, self.warehouse, 3)
        second = self.client.get('/api/v1/inventory/summary/').data
        self.assertEqual(Decimal(second[0]['quantity']), Decimal('8'))

    def test_movements_filtered_by_reference(self):
        receive_stock(self.item, self.warehouse, 1, reference='REF-1')
        receive_stock(self.item, self.warehouse, 1, reference='REF-2')
        response = self.client.get('/api/v1/stock-movements/?reference=REF-2')
        self.assertEqual(response.data['count'], 1)
