"""
Test suite for customers and suppliers
"""
from django.test import TestCase
from rest_framework import status
from erp.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from erp.parties.models import Customer, find_customer_by_email


class CustomerTests(TestCase):
    """Test customer endpoints and lookup by email"""

    def setUp(self):
        self.company = TestDataFactory.create_company()
        self.user = TestDataFactory.create_user(role='admin', company=self.company)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_customer_defaults_company_and_lowercases_email(self):
        agent = TestDataFactory.create_user(role='agent', company=self.company)
        response = self.client.post('/api/v1/customers/', {
            'customer_code': 'CUST-0001', 'name': 'Acme', 'email': 'Buyer@Acme.COM',
            'assigned_agents': [agent.id],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        customer = Customer.objects.get()
        self.assertEqual(customer.company, self.company)
        self.assertEqual(customer.email, 'buyer@acme.com')
        self.assertEqual(customer.last_assigned_agent_index, -1)
        self.assertEqual(list(customer.assigned_agents.all()), [agent])

    def test_find_customer_by_email_is_case_insensitive(self):
        customer = TestDataFactory.create_customer(company=self.company, email='ops@client.io')
        other_company = TestDataFactory.create_company()
        self.assertEqual(find_customer_by_email(self.company, ' OPS@client.IO '), customer)
        self.assertIsNone(find_customer_by_email(other_company, 'ops@client.io'))
        self.assertIsNone(find_customer_by_email(self.company, ''))

    def test_next_customer_code(self):
        TestDataFactory.create_customer(company=self.company)
        Customer.objects.update(customer_code='CUST-0007')
        response = self.client.get('/api/v1/customers/next-code/')
        self.assertEqual(response.data['code'], 'CUST-0008')


class SupplierTests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_and_search_supplier(self):
        response = self.client.post('/api/v1/suppliers/', {
            'supplier_code': 'SUP-0001', 'name': 'Metals Ltd', 'contact_person': 'R. Shah',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        response = self.client.get('/api/v1/suppliers/?search=metals')
        self.assertEqual(len(response.data), 1)
