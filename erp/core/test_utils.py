"""
Test utilities and factories for creating test data
"""
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from erp.core.models import Company, SupportMailbox
from erp.locations.models import Warehouse, BinLocation
from erp.catalog.models import Item, ItemGroup, Resource
from erp.parties.models import Customer, Supplier
from erp.inventory.models import Inventory, InventoryBatch
from erp.helpdesk.models import Ticket, TicketMessage
from decimal import Decimal
import random
import string

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_company(name=None, code=None):
        if not name:
            name = f'Company_{TestDataFactory.random_string(6)}'
        if not code:
            code = f'CO_{TestDataFactory.random_string(6).upper()}'
        return Company.objects.create(name=name, code=code)

    @staticmethod
    def create_user(username=None, email=None, password='testpass123', role='employee', company=None,
                    is_staff=False, is_superuser=False):
        """Create a test user"""
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6)}'
        if not email:
            email = f'{username.lower()}@test.com'
        return User.objects.create_user(
            username=username,
            email=email,
            password=password,
            role=role,
            company=company,
            is_staff=is_staff,
            is_superuser=is_superuser
        )

    @staticmethod
    def create_mailbox(company, email='support@acme.test'):
        return SupportMailbox.objects.create(company=company, email=email, display_name='Support')

    @staticmethod
    def create_warehouse(code=None, name=None):
        """Create a test warehouse"""
        if not code:
            code = f'WH{TestDataFactory.random_string(5).upper()}'
        return Warehouse.objects.create(
            code=code,
            name=name or f'Warehouse {code}',
            state='Maharashtra',
            country='India'
        )

    @staticmethod
    def create_bin(warehouse, code=None):
        if not code:
            code = f'A1-R1-{TestDataFactory.random_string(3).upper()}'
        return BinLocation.objects.create(warehouse=warehouse, code=code, aisle='A1', rack='R1', bin=code)

    @staticmethod
    def create_item(code=None, name=None, unit_price=Decimal('100.00'), managed_by='none', item_type='item',
                    gst_rate=Decimal('0.00'), item_group=None):
        """Create a test item"""
        if not code:
            code = f'ITM-{TestDataFactory.random_string(6).upper()}'
        return Item.objects.create(
            item_code=code,
            item_name=name or f'Item {code}',
            unit_price=unit_price,
            gst_rate=gst_rate,
            managed_by=managed_by,
            item_type=item_type,
            item_group=item_group
        )

    @staticmethod
    def create_item_group(name=None):
        return ItemGroup.objects.create(name=name or f'Group_{TestDataFactory.random_string(6)}')

    @staticmethod
    def create_resource(code=None, unit_price=Decimal('50.00')):
        if not code:
            code = f'RES-{TestDataFactory.random_string(4).upper()}'
        return Resource.objects.create(code=code, name=f'Resource {code}', unit_price=unit_price)

    @staticmethod
    def create_customer(company=None, name=None, email=None, user=None, agents=None):
        """Create a test customer, optionally linked to a login and agents"""
        if not name:
            name = f'Customer_{TestDataFactory.random_string(6)}'
        customer = Customer.objects.create(
            company=company,
            user=user,
            customer_code=f'C-{TestDataFactory.random_string(6).upper()}',
            name=name,
            email=email if email is not None else f'{name.lower()}@test.com',
            phone=f'9{random.randint(100000000, 999999999)}'
        )
        if agents:
            customer.assigned_agents.set(agents)
        return customer

    @staticmethod
    def create_supplier(name=None, email=None):
        """Create a test supplier"""
        if not name:
            name = f'Supplier_{TestDataFactory.random_string(6)}'
        return Supplier.objects.create(
            supplier_code=f'S-{TestDataFactory.random_string(6).upper()}',
            name=name,
            email=email or f'{name.lower()}@test.com'
        )

    @staticmethod
    def create_inventory(item, warehouse, quantity, batches=None, committed=Decimal('0'), on_order=Decimal('0')):
        """
        Stock row with optional batches: list of (batch_number, quantity[, expiry_date])
        """
        inventory = Inventory.objects.create(
            item=item,
            warehouse=warehouse,
            quantity=Decimal(str(quantity)),
            committed=committed,
            on_order=on_order
        )
        for batch in batches or []:
            InventoryBatch.objects.create(
                inventory=inventory,
                batch_number=batch[0],
                quantity=Decimal(str(batch[1])),
                expiry_date=batch[2] if len(batch) > 2 else None
            )
        return inventory

    @staticmethod
    def create_ticket(company, customer=None, agent=None, status='open', priority='normal', source='email',
                      subject='Printer not working', thread_id='', customer_email=None):
        """Create a ticket with one customer message"""
        ticket = Ticket.objects.create(
            company=company,
            customer=customer,
            customer_email=customer_email if customer_email is not None else (customer.email if customer else ''),
            agent=agent,
            source=source,
            subject=subject,
            status=status,
            priority=priority,
            email_thread_id=thread_id
        )
        TicketMessage.objects.create(
            ticket=ticket,
            sender_type='customer',
            external_email=ticket.customer_email,
            from_email=ticket.customer_email,
            message='It does not print anything',
            message_id=thread_id
        )
        return ticket


class AuthenticatedAPIClient(APIClient):
    """API client that authenticates with a JWT bearer token"""

    def authenticate_user(self, user):
        """Authenticate as the given user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Drop the credentials"""
        self.credentials()
