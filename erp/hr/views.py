import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from erp.core.exceptions import ERPError, error_response
from erp.core.models import AgentHoliday
from erp.core.permissions import IsCompanyAdmin
from erp.core.utils import paginate, wants_pagination, create_audit_log
from .models import Attendance, LeaveRequest
from .serializers import AttendanceSerializer, PunchSerializer, LeaveRequestSerializer, AgentHolidaySerializer
from . import services

logger = logging.getLogger('erp.hr')


def _punch(request, action, message):
    serializer = PunchSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data
    try:
        record = action(request.user, data.get('date'), data.get('latitude'), data.get('longitude'))
    except ERPError as e:
        return error_response(e)
    return Response({'success': True, 'message': message, 'data': AttendanceSerializer(record).data})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def punch_in(request):
    return _punch(request, services.punch_in, 'Punch In successful')


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def punch_out(request):
    return _punch(request, services.punch_out, 'Punch out successful')


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def attendance_list(request):
    """Admins see everyone (filters employee, date, month); others their own rows"""
    records = Attendance.objects.select_related('employee')
    if request.user.is_admin_role:
        employee = request.query_params.get('employee')
        if employee:
            records = records.filter(employee_id=employee)
    else:
        records = records.filter(employee=request.user)
    date = request.query_params.get('date')
    if date:
        records = records.filter(date=date)
    try:
        records = services.month_filter(records, request.query_params.get('month'))
    except ERPError as e:
        return error_response(e)

    if wants_pagination(request):
        return paginate(request, records, AttendanceSerializer)
    return Response(AttendanceSerializer(records, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def attendance_my_summary(request):
    try:
        summary = services.attendance_summary(request.user, request.query_params.get('month'))
    except ERPError as e:
        return error_response(e)
    return Response({'success': True, 'data': summary})


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def leave_list_create(request):
    """Company leave requests (admins) or apply for leave"""
    if request.method == 'GET':
        if not request.user.is_admin_role:
            return Response({'success': False, 'message': 'Admin access required.'}, status=status.HTTP_403_FORBIDDEN)
        leaves = LeaveRequest.objects.select_related('employee')
        if request.user.company_id:
            leaves = leaves.filter(employee__company_id=request.user.company_id)
        leave_status = request.query_params.get('status')
        if leave_status:
            leaves = leaves.filter(status=leave_status)
        date_from = request.query_params.get('from')
        date_to = request.query_params.get('to')
        if date_from:
            leaves = leaves.filter(to_date__gte=date_from)
        if date_to:
            leaves = leaves.filter(from_date__lte=date_to)
        if wants_pagination(request):
            return paginate(request, leaves, LeaveRequestSerializer)
        return Response(LeaveRequestSerializer(leaves, many=True).data)

    serializer = LeaveRequestSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data
    try:
        leave = services.apply_leave(
            request.user, data.get('leave_type'), data.get('from_date'), data.get('to_date'), data.get('reason')
        )
    except ERPError as e:
        return error_response(e)
    logger.info(f"{request.user.username} applied for leave {leave.from_date} - {leave.to_date}")
    return Response({'message': 'Leave applied successfully', 'data': LeaveRequestSerializer(leave).data},
                    status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def leave_my(request):
    leaves = LeaveRequest.objects.filter(employee=request.user)
    return Response(LeaveRequestSerializer(leaves, many=True).data)


@api_view(['GET', 'DELETE'])
@permission_classes([IsAuthenticated])
def leave_detail(request, pk):
    leave = get_object_or_404(LeaveRequest, pk=pk)
    if leave.employee_id != request.user.id and not request.user.is_admin_role:
        return Response({'success': False, 'message': 'Not allowed'}, status=status.HTTP_403_FORBIDDEN)

    if request.method == 'GET':
        return Response(LeaveRequestSerializer(leave).data)
    if leave.status != 'Pending':
        return Response({'success': False, 'message': 'Only pending leave requests can be withdrawn'},
                        status=status.HTTP_400_BAD_REQUEST)
    leave.delete()
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['PATCH'])
@permission_classes([IsCompanyAdmin])
def leave_status(request, pk):
    """Approve or reject a leave request {status}"""
    leave = get_object_or_404(LeaveRequest.objects.select_related('employee'), pk=pk)
    try:
        leave = services.set_leave_status(leave, request.data.get('status'), request.user)
    except ERPError as e:
        return error_response(e)
    create_audit_log(
        request=request,
        action='update',
        model_name='LeaveRequest',
        object_id=str(leave.id),
        object_name=leave.employee.username,
        changes={'status': leave.status},
    )
    return Response({'data': LeaveRequestSerializer(leave).data})


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def holiday_list_create(request):
    if request.method == 'GET':
        holidays = AgentHoliday.objects.select_related('user')
        if not request.user.is_admin_role:
            holidays = holidays.filter(user=request.user)
        elif request.query_params.get('user'):
            holidays = holidays.filter(user_id=request.query_params['user'])
        return Response(AgentHolidaySerializer(holidays, many=True).data)

    if not request.user.is_admin_role:
        return Response({'success': False, 'message': 'Admin access required.'}, status=status.HTTP_403_FORBIDDEN)
    serializer = AgentHolidaySerializer(data=request.data)
    if serializer.is_valid():
        serializer.save()
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsCompanyAdmin])
def holiday_detail(request, pk):
    holiday = get_object_or_404(AgentHoliday, pk=pk)
    if request.method == 'GET':
        return Response(AgentHolidaySerializer(holiday).data)
    if request.method == 'DELETE':
        holiday.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
    serializer = AgentHolidaySerializer(holiday, data=request.data, partial=request.method == 'PATCH')
    if serializer.is_valid():
        serializer.save()
        return Response(serializer.data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
