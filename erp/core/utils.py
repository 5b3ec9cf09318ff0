"""Shared helpers: audit logging, document numbering, agent availability, pagination"""
import logging

from django.core.paginator import Paginator
from django.db import transaction
from django.utils import timezone
from rest_framework.response import Response

from .models import AuditLog, DocumentSequence, AgentHoliday

logger = logging.getLogger(__name__)


def get_client_ip(request):
    """Extract client IP address from request"""
    if not request or not hasattr(request, 'META'):
        return None
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0].strip()
    else:
        ip = request.META.get('REMOTE_ADDR')
    return ip or None


def create_audit_log(request=None, action=None, model_name=None, object_id=None,
                     changes=None, user=None, object_name=None, object_reference=None):
    """
    Create an audit log entry

    Args:
        request: Django request object (for user and IP) - optional if user is provided
        action: Action type (create, update, stock_transfer, ticket_reply, etc.)
        model_name: Name of the model being acted upon
        object_id: ID of the object (as string)
        changes: Dictionary of changes made
        user: Optional user override (defaults to request.user if request provided)
        object_name: Human-readable name of the object
        object_reference: Reference identifier (e.g., GRN number)
    """
    try:
        audit_user = None
        if user:
            audit_user = user
        elif request and hasattr(request, 'user'):
            audit_user = request.user

        ip_address = get_client_ip(request) if request else None

        if not action or not model_name or not object_id:
            logger.warning(f"Audit log creation skipped: missing required fields (action={action}, model_name={model_name}, object_id={object_id})")
            return None

        return AuditLog.objects.create(
            user=audit_user if audit_user and audit_user.is_authenticated else None,
            action=action,
            model_name=model_name,
            object_id=str(object_id),
            object_name=object_name,
            object_reference=object_reference,
            changes=changes or {},
            ip_address=ip_address
        )
    except Exception as e:
        # Don't fail the main operation if audit logging fails
        logger.error(f"Failed to create audit log: {str(e)}")
        return None


def financial_year(on=None):
    """Financial year label starting 1 April, e.g. 2025-26"""
    on = on or timezone.localdate()
    start = on.year if on.month >= 4 else on.year - 1
    return f"{start}-{str(start + 1)[-2:]}"


def next_document_number(prefix, on=None):
    """
    Reserve the next number for a document prefix, e.g. GRN/2025-26/00001.

    The counter row is locked for the duration of the surrounding transaction
    so concurrent requests never hand out the same number.
    """
    fy = financial_year(on)
    key = f"{prefix}:{fy}"
    with transaction.atomic():
        sequence, _ = DocumentSequence.objects.select_for_update().get_or_create(key=key)
        sequence.last_value += 1
        sequence.save(update_fields=['last_value', 'updated_at'])
        value = sequence.last_value
    return f"{prefix}/{fy}/{value:05d}"


def next_code(model, field, prefix, width=4):
    """Next sequential master code such as ITM-0001 for a model/field"""
    existing = model.objects.filter(**{f'{field}__startswith': f'{prefix}-'}).values_list(field, flat=True)
    highest = 0
    for code in existing:
        try:
            highest = max(highest, int(code.rsplit('-', 1)[1]))
        except (IndexError, ValueError):
            continue
    return f"{prefix}-{highest + 1:0{width}d}"


def is_agent_available(user, on_date=None):
    """An agent is unavailable when inactive, on leave or on a holiday"""
    on_date = on_date or timezone.localdate()
    if not user.is_active:
        return False
    if user.leave_from and user.leave_to and user.leave_from <= on_date <= user.leave_to:
        return False
    return not AgentHoliday.objects.filter(user=user, date=on_date).exists()


def paginate(request, queryset, serializer_class, default_limit=15, context=None):
    """Paginated response in the shape every list endpoint uses"""
    try:
        page = int(request.query_params.get('page', 1))
        limit = int(request.query_params.get('limit', default_limit))
    except ValueError:
        page, limit = 1, default_limit
    limit = max(limit, 1)

    paginator = Paginator(queryset, limit)
    page_obj = paginator.get_page(page)

    serializer = serializer_class(page_obj, many=True, context=context or {'request': request})
    return Response({
        'results': serializer.data,
        'count': paginator.count,
        'next': page_obj.next_page_number() if page_obj.has_next() else None,
        'previous': page_obj.previous_page_number() if page_obj.has_previous() else None,
        'page': page_obj.number,
        'page_size': limit,
        'total_pages': paginator.num_pages,
    })


def wants_pagination(request):
    return 'page' in request.query_params or 'limit' in request.query_params
