from django.contrib.auth.models import AbstractUser
from django.db import models


class Company(models.Model):
    """Tenant company; owns support mailboxes, customers and tickets"""
    name = models.CharField(max_length=255)
    code = models.CharField(max_length=50, unique=True)
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=20, blank=True)
    address = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'companies'
        ordering = ['name']


class SupportMailbox(models.Model):
    """Support address that inbound mail is routed through"""
    company = models.ForeignKey(Company, on_delete=models.CASCADE, related_name='support_mailboxes')
    email = models.EmailField(unique=True)
    display_name = models.CharField(max_length=255, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def save(self, *args, **kwargs):
        self.email = (self.email or '').strip().lower()
        super().save(*args, **kwargs)

    def __str__(self):
        return self.email

    class Meta:
        db_table = 'support_mailboxes'
        ordering = ['email']


class User(AbstractUser):
    """Extended user model with company, role and leave window"""
    ROLE_CHOICES = [
        ('admin', 'Admin'),
        ('agent', 'Agent'),
        ('employee', 'Employee'),
        ('customer', 'Customer'),
    ]

    phone = models.CharField(max_length=20, blank=True, null=True)
    company = models.ForeignKey(Company, on_delete=models.SET_NULL, null=True, blank=True, related_name='users')
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default='employee')
    is_active = models.BooleanField(default=True)
    leave_from = models.DateField(null=True, blank=True)
    leave_to = models.DateField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    @property
    def is_admin_role(self):
        return self.is_staff or self.is_superuser or self.role == 'admin'

    class Meta:
        db_table = 'users'


class AgentHoliday(models.Model):
    """A single day an agent is unavailable for ticket assignment"""
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='holidays')
    date = models.DateField()
    reason = models.CharField(max_length=255, blank=True)

    def __str__(self):
        return f"{self.user} - {self.date}"

    class Meta:
        db_table = 'agent_holidays'
        unique_together = [['user', 'date']]
        ordering = ['date']


class DocumentSequence(models.Model):
    """Running counter per document prefix and financial year"""
    key = models.CharField(max_length=100, unique=True)
    last_value = models.PositiveIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.key}={self.last_value}"

    class Meta:
        db_table = 'document_sequences'


class Setting(models.Model):
    """System settings"""
    key = models.CharField(max_length=100, unique=True)
    value = models.TextField()
    description = models.TextField(blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.key

    class Meta:
        db_table = 'settings'


class Notification(models.Model):
    """In-app notification shown to a user"""
    TYPE_CHOICES = [
        ('ticket-assigned', 'Ticket Assigned'),
        ('ticket-feedback', 'Ticket Feedback'),
        ('task-assigned', 'Task Assigned'),
        ('task-updated', 'Task Updated'),
        ('general', 'General'),
    ]

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='notifications')
    notification_type = models.CharField(max_length=30, choices=TYPE_CHOICES, default='general')
    message = models.TextField()
    reference = models.CharField(max_length=100, blank=True)
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.user}: {self.message[:40]}"

    class Meta:
        db_table = 'notifications'
        ordering = ['-created_at']


class AuditLog(models.Model):
    """Audit log for critical operations"""
    ACTION_CHOICES = [
        ('create', 'Create'),
        ('update', 'Update'),
        ('delete', 'Delete'),
        ('view', 'View'),
        ('stock_adjust', 'Stock Adjustment'),
        ('stock_receive', 'Stock Received'),
        ('stock_issue', 'Stock Issued'),
        ('stock_transfer', 'Stock Transfer'),
        ('production_receipt', 'Production Receipt'),
        ('price_change', 'Price Change'),
        ('ticket_create', 'Ticket Created'),
        ('ticket_reply', 'Ticket Reply'),
        ('ticket_assign', 'Ticket Assigned'),
        ('ticket_status', 'Ticket Status Changed'),
        ('ticket_reopen', 'Ticket Reopened'),
    ]

    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, related_name='audit_logs')
    action = models.CharField(max_length=50, choices=ACTION_CHOICES)
    model_name = models.CharField(max_length=100)
    object_id = models.CharField(max_length=100)
    object_name = models.CharField(max_length=255, blank=True, null=True, help_text="Human-readable name of the object (e.g., item name, ticket subject)")
    object_reference = models.CharField(max_length=255, blank=True, null=True, help_text="Reference identifier (e.g., GRN number, production order number)")
    changes = models.JSONField(default=dict, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'audit_logs'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['-created_at'], name='audit_logs_created_ccf7a3_idx'),
            models.Index(fields=['action'], name='audit_logs_action_4fd3c2_idx'),
            models.Index(fields=['model_name'], name='audit_logs_model_n_8e1f0b_idx'),
            models.Index(fields=['object_reference'], name='audit_logs_object__2b9d47_idx'),
        ]
