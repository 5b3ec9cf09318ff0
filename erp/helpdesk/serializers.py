from rest_framework import serializers
from .models import Ticket, TicketMessage, TicketAttachment, TicketCategory, SLAPolicy, TicketFeedback


class TicketCategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = TicketCategory
        fields = ['id', 'company', 'name', 'description', 'created_at']
        read_only_fields = ['company', 'created_at']


class TicketAttachmentSerializer(serializers.ModelSerializer):
    url = serializers.SerializerMethodField()

    class Meta:
        model = TicketAttachment
        fields = ['id', 'filename', 'content_type', 'size', 'url', 'created_at']

    def get_url(self, obj):
        return obj.file.url if obj.file else None


class TicketMessageSerializer(serializers.ModelSerializer):
    attachments = TicketAttachmentSerializer(many=True, read_only=True)
    sender_name = serializers.SerializerMethodField()

    class Meta:
        model = TicketMessage
        fields = ['id', 'sender_type', 'sender', 'sender_name', 'external_email', 'message', 'message_id',
                  'in_reply_to', 'from_email', 'to_email', 'sentiment', 'attachments', 'created_at']

    def get_sender_name(self, obj):
        if obj.sender:
            return obj.sender.get_full_name() or obj.sender.username
        return obj.external_email or obj.from_email


class TicketSerializer(serializers.ModelSerializer):
    """List representation"""
    customer_name = serializers.CharField(source='customer.name', read_only=True)
    agent_name = serializers.CharField(source='agent.username', read_only=True)

    class Meta:
        model = Ticket
        fields = ['id', 'company', 'customer', 'customer_name', 'customer_email', 'agent', 'agent_name', 'source',
                  'subject', 'category', 'status', 'priority', 'summary', 'email_alias', 'last_reply_at',
                  'last_customer_reply_at', 'last_agent_reply_at', 'closed_at', 'auto_closed', 'sla_due',
                  'assigned_at', 'assignment_source', 'sentiment', 'feedback_rating', 'created_at', 'updated_at']
        read_only_fields = fields


class TicketDetailSerializer(TicketSerializer):
    messages = TicketMessageSerializer(many=True, read_only=True)

    class Meta(TicketSerializer.Meta):
        fields = TicketSerializer.Meta.fields + ['email_thread_id', 'messages']
        read_only_fields = fields


class SLAPolicySerializer(serializers.ModelSerializer):
    class Meta:
        model = SLAPolicy
        fields = ['id', 'company', 'priority', 'response_hours', 'resolution_hours', 'created_at']
        read_only_fields = ['company', 'created_at']

    def validate(self, attrs):
        if attrs.get('response_hours', 1) <= 0 or attrs.get('resolution_hours', 1) <= 0:
            raise serializers.ValidationError('SLA hours must be greater than zero')
        return attrs


class TicketFeedbackSerializer(serializers.ModelSerializer):
    ticket_subject = serializers.CharField(source='ticket.subject', read_only=True)
    agent_name = serializers.CharField(source='ticket.agent.username', read_only=True)

    class Meta:
        model = TicketFeedback
        fields = ['id', 'ticket', 'ticket_subject', 'agent_name', 'customer_email', 'rating', 'comment',
                  'sentiment', 'created_at']
