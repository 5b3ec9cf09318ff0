import hmac
import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, authentication_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from django.conf import settings
from django.db.models import Q
from django.shortcuts import get_object_or_404
from django.utils.dateparse import parse_date
from .models import Ticket, TicketCategory, SLAPolicy, TicketFeedback
from .serializers import (
    TicketSerializer, TicketDetailSerializer, TicketMessageSerializer, TicketCategorySerializer,
    SLAPolicySerializer, TicketFeedbackSerializer,
)
from .inbound import parse_inbound_request
from .reports import helpdesk_report, agents_with_load
from . import services
from erp.core.exceptions import ERPError, ForbiddenError, error_response
from erp.core.permissions import IsCompanyAdmin, is_agent_or_admin
from erp.core.utils import is_agent_available, paginate

logger = logging.getLogger(__name__)


def _require_staff(user):
    if not is_agent_or_admin(user):
        raise ForbiddenError('Only agents and admins can perform this action')


def _ticket_from_body(request):
    ticket_id = request.data.get('ticketId') or request.data.get('ticket_id')
    if not ticket_id:
        return None
    return get_object_or_404(services.tickets_visible_to(request.user), pk=ticket_id)


def _uploads(request):
    return request.FILES.getlist('attachments') + request.FILES.getlist('attachments[]')


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def email_inbound(request):
    """Webhook for inbound support mail (?secret=)"""
    secret = settings.INBOUND_EMAIL_SECRET
    supplied = request.query_params.get('secret', '')
    if not secret or not hmac.compare_digest(str(supplied), str(secret)):
        return Response({'success': False, 'message': 'Unauthorized'}, status=status.HTTP_401_UNAUTHORIZED)

    try:
        parsed = parse_inbound_request(request)
        result = services.process_inbound_email(parsed)
    except ERPError as e:
        logger.warning(f"Inbound email rejected: {e.message}")
        return error_response(e)
    return Response(result, status=status.HTTP_201_CREATED if result.get('created') else status.HTTP_200_OK)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def ticket_list(request):
    """Tickets visible to the user (paginated); filters status, priority, agent, search"""
    tickets = services.tickets_visible_to(request.user).select_related('customer', 'agent')
    for param in ('status', 'priority', 'agent', 'source'):
        value = request.query_params.get(param)
        if value:
            tickets = tickets.filter(**{param: value})
    search = request.query_params.get('search')
    if search:
        tickets = tickets.filter(
            Q(subject__icontains=search) | Q(customer_email__icontains=search) | Q(customer__name__icontains=search)
        )
    return paginate(request, tickets.order_by('-updated_at', '-id'), TicketSerializer)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def ticket_detail(request, pk):
    ticket = get_object_or_404(
        services.tickets_visible_to(request.user).prefetch_related('messages__attachments', 'messages__sender'), pk=pk
    )
    return Response(TicketDetailSerializer(ticket).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def ticket_message(request, pk):
    """Reply on a ticket (JSON or multipart with attachments)"""
    ticket = get_object_or_404(services.tickets_visible_to(request.user), pk=pk)
    try:
        message, mail_sent, reopened = services.post_reply(
            ticket, request.user, request.data.get('message', ''), uploads=_uploads(request)
        )
    except ERPError as e:
        return error_response(e)
    return Response({
        'success': True,
        'message': TicketMessageSerializer(message).data,
        'mail_sent': mail_sent,
        'reopened': reopened,
    }, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def ticket_create(request):
    """Open a ticket from the web portal"""
    try:
        ticket = services.create_web_ticket(
            request.user,
            category=request.data.get('category'),
            subject=request.data.get('subject'),
            message=request.data.get('message'),
            priority=request.data.get('priority') or 'normal',
            uploads=_uploads(request),
        )
    except ERPError as e:
        return error_response(e)
    return Response({'success': True, 'ticket': TicketSerializer(ticket).data}, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def ticket_assign(request):
    """Assign an agent to a ticket {ticketId, agentId, priority?}"""
    try:
        _require_staff(request.user)
        ticket = _ticket_from_body(request)
        if ticket is None:
            return Response({'success': False, 'message': 'ticketId is required'}, status=status.HTTP_400_BAD_REQUEST)
        ticket, changed = services.assign_ticket(
            ticket, request.data.get('agentId') or request.data.get('agent_id'),
            priority=request.data.get('priority'), assigned_by=request.user,
        )
    except ERPError as e:
        return error_response(e)
    if not changed:
        return Response({'success': True, 'msg': 'Already assigned'})
    return Response({'success': True, 'ticket': TicketSerializer(ticket).data})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def ticket_update_status(request):
    """Set a ticket's status {ticketId, status}"""
    try:
        _require_staff(request.user)
        ticket = _ticket_from_body(request)
        if ticket is None:
            return Response({'success': False, 'message': 'ticketId is required'}, status=status.HTTP_400_BAD_REQUEST)
        ticket = services.update_ticket_status(ticket, request.data.get('status'), user=request.user)
    except ERPError as e:
        return error_response(e)
    return Response({'success': True, 'ticket': TicketSerializer(ticket).data})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def ticket_close(request):
    """Close a ticket and ask the customer for feedback"""
    try:
        ticket = _ticket_from_body(request)
        if ticket is None:
            return Response({'success': False, 'message': 'ticketId is required'}, status=status.HTTP_400_BAD_REQUEST)
        ticket = services.update_ticket_status(ticket, 'closed', user=request.user)
    except ERPError as e:
        return error_response(e)

    try:
        services.send_feedback_email(ticket)
    except ERPError as e:
        return Response({'success': True, 'message': f'Ticket closed; {e.message}'})
    except Exception as e:
        logger.error(f"Feedback email for ticket {ticket.id} failed: {str(e)}", exc_info=True)
        return Response({'success': True, 'message': 'Ticket closed but the feedback email could not be sent'})
    return Response({'success': True, 'message': 'Ticket closed and feedback email sent'})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def sla_check(request):
    """Response / resolution breach check for a ticket {ticketId}"""
    ticket = _ticket_from_body(request)
    if ticket is None:
        return Response({'success': False, 'message': 'ticketId is required'}, status=status.HTTP_400_BAD_REQUEST)
    result = services.check_sla(ticket)
    if result is None:
        return Response({'success': True, 'msg': 'No SLA configured'})
    return Response({'success': True, **result})


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def sla_policy_list_create(request):
    policies = SLAPolicy.objects.filter(company=request.user.company)
    if request.method == 'GET':
        return Response(SLAPolicySerializer(policies, many=True).data)
    if not request.user.is_admin_role:
        return Response({'success': False, 'message': 'Admin access required.'}, status=status.HTTP_403_FORBIDDEN)
    if request.user.company is None:
        return Response({'success': False, 'message': 'User is not linked to a company'},
                        status=status.HTTP_400_BAD_REQUEST)
    serializer = SLAPolicySerializer(data=request.data)
    if serializer.is_valid():
        priority = serializer.validated_data.get('priority') or None
        if policies.filter(priority=priority).exists():
            return Response({'success': False, 'message': 'An SLA policy already exists for this priority'},
                            status=status.HTTP_409_CONFLICT)
        serializer.save(company=request.user.company, priority=priority)
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['PUT', 'PATCH', 'DELETE'])
@permission_classes([IsCompanyAdmin])
def sla_policy_detail(request, pk):
    policy = get_object_or_404(SLAPolicy, pk=pk, company=request.user.company)
    if request.method == 'DELETE':
        policy.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
    serializer = SLAPolicySerializer(policy, data=request.data, partial=request.method == 'PATCH')
    if serializer.is_valid():
        serializer.save()
        return Response(serializer.data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def feedback_request(request):
    """(Re)send the feedback email for a ticket (?ticketId=)"""
    ticket_id = request.query_params.get('ticketId') or request.query_params.get('ticket_id')
    if not ticket_id:
        return Response({'success': False, 'message': 'ticketId is required'}, status=status.HTTP_400_BAD_REQUEST)
    ticket = get_object_or_404(services.tickets_visible_to(request.user), pk=ticket_id)
    if TicketFeedback.objects.filter(ticket=ticket).exists():
        return Response({'success': False, 'message': 'Feedback already submitted'}, status=status.HTTP_409_CONFLICT)
    try:
        services.send_feedback_email(ticket)
    except ERPError as e:
        return error_response(e)
    return Response({'success': True, 'message': 'Feedback email sent'})


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def feedback_submit(request):
    """Customer rating from the signed feedback link {token, rating, comment}"""
    try:
        feedback = services.submit_feedback(
            request.data.get('token'), request.data.get('rating'), request.data.get('comment', '')
        )
    except ERPError as e:
        return error_response(e)
    return Response({'success': True, 'feedback': TicketFeedbackSerializer(feedback).data},
                    status=status.HTTP_201_CREATED)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def category_list_create(request):
    categories = TicketCategory.objects.filter(company=request.user.company)
    if request.method == 'GET':
        return Response(TicketCategorySerializer(categories, many=True).data)
    if not request.user.is_admin_role:
        return Response({'success': False, 'message': 'Admin access required.'}, status=status.HTTP_403_FORBIDDEN)
    if request.user.company is None:
        return Response({'success': False, 'message': 'User is not linked to a company'},
                        status=status.HTTP_400_BAD_REQUEST)
    serializer = TicketCategorySerializer(data=request.data)
    if serializer.is_valid():
        if categories.filter(name__iexact=serializer.validated_data['name']).exists():
            return Response({'name': ['Category already exists']}, status=status.HTTP_400_BAD_REQUEST)
        serializer.save(company=request.user.company)
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def category_detail(request, pk):
    category = get_object_or_404(TicketCategory, pk=pk, company=request.user.company)
    if request.method == 'GET':
        return Response(TicketCategorySerializer(category).data)
    if not request.user.is_admin_role:
        return Response({'success': False, 'message': 'Admin access required.'}, status=status.HTTP_403_FORBIDDEN)
    if request.method == 'DELETE':
        category.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
    serializer = TicketCategorySerializer(category, data=request.data, partial=request.method == 'PATCH')
    if serializer.is_valid():
        serializer.save()
        return Response(serializer.data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def agent_list(request):
    """Agents of the user's company with their open ticket counts"""
    try:
        _require_staff(request.user)
    except ERPError as e:
        return error_response(e)
    agents = agents_with_load(request.user.company_id)
    return Response([
        {
            'id': agent.id,
            'username': agent.username,
            'name': agent.get_full_name() or agent.username,
            'email': agent.email,
            'role': agent.role,
            'open_tickets': agent.open_tickets,
            'on_leave': not is_agent_available(agent),
        }
        for agent in agents
    ])


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def report(request):
    try:
        _require_staff(request.user)
    except ERPError as e:
        return error_response(e)
    return Response(helpdesk_report(request.user.company_id))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def csat_list(request):
    """Submitted feedback, newest first (paginated)"""
    try:
        _require_staff(request.user)
    except ERPError as e:
        return error_response(e)
    feedback = TicketFeedback.objects.select_related('ticket', 'ticket__agent')
    if request.user.company_id:
        feedback = feedback.filter(ticket__company_id=request.user.company_id)
    if request.user.role == 'agent' and not request.user.is_admin_role:
        feedback = feedback.filter(ticket__agent=request.user)
    rating = request.query_params.get('rating')
    if rating:
        feedback = feedback.filter(rating=rating)
    return paginate(request, feedback.order_by('-created_at'), TicketFeedbackSerializer)


@api_view(['POST'])
@permission_classes([IsCompanyAdmin])
def auto_reassign(request):
    """Run agent reassignment for today (or ?date=YYYY-MM-DD)"""
    raw_date = request.query_params.get('date')
    on_date = None
    if raw_date:
        try:
            on_date = parse_date(raw_date)
        except ValueError:
            pass
        if on_date is None:
            return Response({'success': False, 'message': 'Date must be a valid YYYY-MM-DD date'},
                            status=status.HTTP_400_BAD_REQUEST)
    return Response({'success': True, **services.auto_reassign_tickets(on_date)})
