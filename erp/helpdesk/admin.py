from django.contrib import admin
from .models import Ticket, TicketCategory, TicketMessage, TicketAttachment, SLAPolicy, TicketFeedback


class TicketMessageInline(admin.StackedInline):
    model = TicketMessage
    extra = 0
    fields = ['sender_type', 'sender', 'from_email', 'message', 'message_id', 'created_at']
    readonly_fields = ['created_at']


@admin.register(Ticket)
class TicketAdmin(admin.ModelAdmin):
    list_display = ['id', 'subject', 'customer', 'customer_email', 'agent', 'status', 'priority', 'source', 'updated_at']
    list_filter = ['status', 'priority', 'source', 'company']
    search_fields = ['subject', 'customer_email', 'customer__name', 'email_thread_id']
    inlines = [TicketMessageInline]


@admin.register(TicketCategory)
class TicketCategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'company', 'created_at']
    list_filter = ['company']


@admin.register(TicketAttachment)
class TicketAttachmentAdmin(admin.ModelAdmin):
    list_display = ['filename', 'message', 'content_type', 'size', 'created_at']


@admin.register(SLAPolicy)
class SLAPolicyAdmin(admin.ModelAdmin):
    list_display = ['company', 'priority', 'response_hours', 'resolution_hours']
    list_filter = ['company']


@admin.register(TicketFeedback)
class TicketFeedbackAdmin(admin.ModelAdmin):
    list_display = ['ticket', 'rating', 'sentiment', 'customer_email', 'created_at']
    list_filter = ['rating', 'sentiment']
