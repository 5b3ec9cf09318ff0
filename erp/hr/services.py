"""Attendance punching and leave approval"""
import logging
from decimal import Decimal, ROUND_HALF_UP
from django.conf import settings
from django.core.mail import send_mail
from django.db import transaction
from django.db.models import Sum, Count
from django.utils import timezone
from erp.core.exceptions import BusinessRuleError
from .models import Attendance, LeaveRequest

logger = logging.getLogger(__name__)

PRESENT_HOURS = 8
HALF_DAY_HOURS = 4


def attendance_status(hours):
    if hours >= PRESENT_HOURS:
        return 'Present'
    if hours >= HALF_DAY_HOURS:
        return 'Half Day'
    return 'Absent'


def _require_location(on_date, latitude, longitude):
    if not on_date or latitude in (None, '') or longitude in (None, ''):
        raise BusinessRuleError('Date and location are required')


def punch_in(user, on_date, latitude, longitude, now=None):
    _require_location(on_date, latitude, longitude)
    with transaction.atomic():
        record, _ = Attendance.objects.select_for_update().get_or_create(employee=user, date=on_date)
        if record.punch_in_at:
            raise BusinessRuleError('Already punched in today')
        record.punch_in_at = now or timezone.now()
        record.punch_in_latitude = latitude
        record.punch_in_longitude = longitude
        record.status = 'Working'
        record.save()
    logger.info(f"{user.username} punched in for {on_date}")
    return record


def punch_out(user, on_date, latitude, longitude, now=None):
    _require_location(on_date, latitude, longitude)
    with transaction.atomic():
        record = Attendance.objects.select_for_update().filter(employee=user, date=on_date).first()
        if record is None or not record.punch_in_at:
            raise BusinessRuleError('Please punch in first')
        if record.punch_out_at:
            raise BusinessRuleError('Already punched out')
        record.punch_out_at = now or timezone.now()
        record.punch_out_latitude = latitude
        record.punch_out_longitude = longitude
        seconds = max((record.punch_out_at - record.punch_in_at).total_seconds(), 0)
        record.total_hours = (Decimal(seconds) / Decimal(3600)).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
        record.status = attendance_status(record.total_hours)
        record.save()
    logger.info(f"{user.username} punched out for {on_date} after {record.total_hours}h ({record.status})")
    return record


def month_filter(queryset, month):
    """Restrict to a YYYY-MM month; an unparsable month is rejected"""
    if not month:
        return queryset
    try:
        year, number = (int(part) for part in month.split('-'))
    except ValueError:
        raise BusinessRuleError('Month must be in YYYY-MM format')
    return queryset.filter(date__year=year, date__month=number)


def attendance_summary(user, month=None):
    records = month_filter(Attendance.objects.filter(employee=user), month)
    counts = dict(records.order_by().values_list('status').annotate(total=Count('id')))
    total_hours = records.aggregate(total=Sum('total_hours'))['total'] or Decimal('0')
    return {
        'present': counts.get('Present', 0),
        'halfDay': counts.get('Half Day', 0),
        'absent': counts.get('Absent', 0),
        'working': counts.get('Working', 0),
        'totalDays': records.count(),
        'totalHours': f"{total_hours:.2f}",
    }


def apply_leave(user, leave_type, from_date, to_date, reason):
    if not from_date or not to_date or not leave_type or not reason:
        raise BusinessRuleError('All fields are required')
    if from_date > to_date:
        raise BusinessRuleError('From date cannot be greater than To date')
    overlapping = LeaveRequest.objects.filter(
        employee=user, from_date__lte=to_date, to_date__gte=from_date
    ).exclude(status='Rejected')
    if overlapping.exists():
        raise BusinessRuleError('Leave already applied for overlapping dates')
    return LeaveRequest.objects.create(
        employee=user, leave_type=leave_type, from_date=from_date, to_date=to_date, reason=reason
    )


def set_leave_status(leave, new_status, approved_by):
    """
    Approve or reject a leave request. An approved leave becomes the
    employee's unavailability window used by ticket assignment.
    """
    if new_status not in dict(LeaveRequest.STATUS_CHOICES):
        raise BusinessRuleError('Invalid status')
    with transaction.atomic():
        leave.status = new_status
        leave.approved_by = approved_by
        leave.save(update_fields=['status', 'approved_by', 'updated_at'])
        employee = leave.employee
        if new_status == 'Approved':
            employee.leave_from = leave.from_date
            employee.leave_to = leave.to_date
            employee.save(update_fields=['leave_from', 'leave_to'])
        elif employee.leave_from == leave.from_date and employee.leave_to == leave.to_date:
            employee.leave_from = employee.leave_to = None
            employee.save(update_fields=['leave_from', 'leave_to'])

    if leave.employee.email:
        try:
            send_mail(
                f'Leave request {new_status}',
                f'Hi {employee.get_full_name() or employee.username}, your {leave.leave_type} leave from '
                f'{leave.from_date} to {leave.to_date} is {new_status}.',
                settings.DEFAULT_FROM_EMAIL,
                [employee.email],
            )
        except Exception as e:
            logger.error(f"Leave status mail to {employee.email} failed: {str(e)}")
    return leave
