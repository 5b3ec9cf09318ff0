from django.conf import settings
from django.db import models
from erp.core.models import Company
from erp.parties.models import Customer


class TicketCategory(models.Model):
    company = models.ForeignKey(Company, on_delete=models.CASCADE, related_name='ticket_categories')
    name = models.CharField(max_length=100)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'ticket_categories'
        unique_together = [['company', 'name']]
        ordering = ['name']


class Ticket(models.Model):
    """Support ticket; one email thread or web conversation with a customer"""
    SOURCE_CHOICES = [
        ('web', 'Web'),
        ('email', 'Email'),
        ('whatsapp', 'WhatsApp'),
    ]
    STATUS_CHOICES = [
        ('open', 'Open'),
        ('pending', 'Pending'),
        ('in-progress', 'In Progress'),
        ('closed', 'Closed'),
    ]
    PRIORITY_CHOICES = [
        ('low', 'Low'),
        ('normal', 'Normal'),
        ('high', 'High'),
        ('urgent', 'Urgent'),
    ]
    SENTIMENT_CHOICES = [
        ('positive', 'Positive'),
        ('neutral', 'Neutral'),
        ('negative', 'Negative'),
    ]

    company = models.ForeignKey(Company, on_delete=models.CASCADE, related_name='tickets')
    customer = models.ForeignKey(Customer, on_delete=models.SET_NULL, null=True, blank=True, related_name='tickets')
    customer_email = models.EmailField(blank=True)
    agent = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='assigned_tickets')
    source = models.CharField(max_length=20, choices=SOURCE_CHOICES, default='web')
    subject = models.CharField(max_length=500)
    category = models.CharField(max_length=100, default='general')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='open')
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default='normal')
    summary = models.TextField(blank=True)
    email_thread_id = models.CharField(max_length=500, blank=True, db_index=True)
    email_alias = models.EmailField(blank=True)
    last_reply_at = models.DateTimeField(null=True, blank=True)
    last_customer_reply_at = models.DateTimeField(null=True, blank=True)
    last_agent_reply_at = models.DateTimeField(null=True, blank=True)
    closed_at = models.DateTimeField(null=True, blank=True)
    auto_closed = models.BooleanField(default=False)
    sla_due = models.DateTimeField(null=True, blank=True)
    assigned_at = models.DateTimeField(null=True, blank=True)
    assignment_source = models.CharField(max_length=30, blank=True)
    sentiment = models.CharField(max_length=10, choices=SENTIMENT_CHOICES, blank=True)
    feedback_rating = models.PositiveSmallIntegerField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"#{self.id} {self.subject}"

    class Meta:
        db_table = 'tickets'
        ordering = ['-created_at']


class TicketMessage(models.Model):
    SENDER_TYPE_CHOICES = [
        ('customer', 'Customer'),
        ('agent', 'Agent'),
        ('system', 'System'),
    ]

    ticket = models.ForeignKey(Ticket, on_delete=models.CASCADE, related_name='messages')
    sender_type = models.CharField(max_length=10, choices=SENDER_TYPE_CHOICES)
    sender = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='ticket_messages')
    external_email = models.EmailField(blank=True)
    message = models.TextField()
    message_id = models.CharField(max_length=500, blank=True, db_index=True)
    in_reply_to = models.CharField(max_length=500, blank=True)
    references = models.TextField(blank=True)
    from_email = models.EmailField(blank=True)
    to_email = models.EmailField(blank=True)
    sentiment = models.CharField(max_length=10, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'ticket_messages'
        ordering = ['created_at', 'id']


class TicketAttachment(models.Model):
    message = models.ForeignKey(TicketMessage, on_delete=models.CASCADE, related_name='attachments')
    file = models.FileField(upload_to='helpdesk/%Y/%m/')
    filename = models.CharField(max_length=255)
    content_type = models.CharField(max_length=100, blank=True)
    size = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.filename

    class Meta:
        db_table = 'ticket_attachments'
        ordering = ['id']


class SLAPolicy(models.Model):
    """Response / resolution targets; a blank priority is the company default"""
    company = models.ForeignKey(Company, on_delete=models.CASCADE, related_name='sla_policies')
    priority = models.CharField(max_length=10, choices=Ticket.PRIORITY_CHOICES, blank=True, null=True)
    response_hours = models.DecimalField(max_digits=8, decimal_places=2)
    resolution_hours = models.DecimalField(max_digits=8, decimal_places=2)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'sla_policies'
        unique_together = [['company', 'priority']]
        verbose_name_plural = 'SLA policies'


class TicketFeedback(models.Model):
    ticket = models.OneToOneField(Ticket, on_delete=models.CASCADE, related_name='feedback')
    customer_email = models.EmailField(blank=True)
    rating = models.PositiveSmallIntegerField()
    comment = models.TextField(blank=True)
    sentiment = models.CharField(max_length=10, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    @staticmethod
    def sentiment_for(rating):
        if rating >= 4:
            return 'positive'
        if rating == 3:
            return 'neutral'
        return 'negative'

    def save(self, *args, **kwargs):
        self.sentiment = self.sentiment_for(self.rating)
        super().save(*args, **kwargs)

    class Meta:
        db_table = 'ticket_feedback'
        ordering = ['-created_at']
