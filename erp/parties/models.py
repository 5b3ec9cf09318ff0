from django.conf import settings
from django.db import models


class Customer(models.Model):
    """Customers; helpdesk tickets are routed to their assigned agents"""
    company = models.ForeignKey('core.Company', on_delete=models.CASCADE, null=True, blank=True, related_name='customers')
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='customer_profile')
    customer_code = models.CharField(max_length=50, unique=True)
    name = models.CharField(max_length=200)
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=20, blank=True)
    gstin = models.CharField(max_length=20, blank=True)
    address = models.TextField(blank=True)
    assigned_agents = models.ManyToManyField(settings.AUTH_USER_MODEL, blank=True, related_name='assigned_customers')
    last_assigned_agent_index = models.IntegerField(default=-1)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def save(self, *args, **kwargs):
        self.email = (self.email or '').strip().lower()
        super().save(*args, **kwargs)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'customers'
        ordering = ['name']


class Supplier(models.Model):
    """Suppliers"""
    supplier_code = models.CharField(max_length=50, unique=True)
    name = models.CharField(max_length=200)
    contact_person = models.CharField(max_length=200, blank=True)
    phone = models.CharField(max_length=20, blank=True)
    email = models.EmailField(blank=True)
    gstin = models.CharField(max_length=20, blank=True)
    address = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'suppliers'
        ordering = ['name']


def find_customer_by_email(company, email):
    """Case-insensitive exact email match within a company"""
    email = (email or '').strip()
    if not email:
        return None
    return Customer.objects.filter(company=company, email__iexact=email, is_active=True).first()
