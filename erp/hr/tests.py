"""
Test suite for the HR module
Tests: attendance punching and summaries, leave requests and approval, agent holidays
"""
from datetime import date, timedelta
from decimal import Decimal
from django.core import mail
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from erp.core.exceptions import BusinessRuleError
from erp.core.models import AgentHoliday
from erp.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from erp.core.utils import is_agent_available
from erp.hr.models import Attendance, LeaveRequest
from erp.hr.services import punch_in, punch_out, attendance_status, attendance_summary


class AttendanceServiceTests(TestCase):
    """Test punch_in / punch_out and status derivation"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.day = date(2025, 7, 14)

    def test_status_thresholds(self):
        self.assertEqual(attendance_status(Decimal('8')), 'Present')
        self.assertEqual(attendance_status(Decimal('7.99')), 'Half Day')
        self.assertEqual(attendance_status(Decimal('4')), 'Half Day')
        self.assertEqual(attendance_status(Decimal('3.5')), 'Absent')

    def test_full_day(self):
        start = timezone.now() - timedelta(hours=9)
        record = punch_in(self.user, self.day, '19.07', '72.87', now=start)
        self.assertEqual(record.status, 'Working')
        record = punch_out(self.user, self.day, '19.07', '72.87', now=start + timedelta(hours=8, minutes=30))
        self.assertEqual(record.total_hours, Decimal('8.50'))
        self.assertEqual(record.status, 'Present')

    def test_half_day(self):
        start = timezone.now() - timedelta(hours=6)
        punch_in(self.user, self.day, '1', '1', now=start)
        record = punch_out(self.user, self.day, '1', '1', now=start + timedelta(hours=5))
        self.assertEqual(record.status, 'Half Day')

    def test_double_punch(self):
        punch_in(self.user, self.day, '1', '1')
        with self.assertRaisesMessage(BusinessRuleError, 'Already punched in today'):
            punch_in(self.user, self.day, '1', '1')
        punch_out(self.user, self.day, '1', '1')
        with self.assertRaisesMessage(BusinessRuleError, 'Already punched out'):
            punch_out(self.user, self.day, '1', '1')

    def test_punch_out_without_punch_in(self):
        with self.assertRaisesMessage(BusinessRuleError, 'Please punch in first'):
            punch_out(self.user, self.day, '1', '1')

    def test_location_required(self):
        with self.assertRaisesMessage(BusinessRuleError, 'Date and location are required'):
            punch_in(self.user, self.day, None, '1')

    def test_monthly_summary(self):
        Attendance.objects.create(employee=self.user, date=date(2025, 7, 1), status='Present',
                                  total_hours=Decimal('8.25'))
        Attendance.objects.create(employee=self.user, date=date(2025, 7, 2), status='Half Day',
                                  total_hours=Decimal('4.50'))
        Attendance.objects.create(employee=self.user, date=date(2025, 8, 1), status='Present',
                                  total_hours=Decimal('9.00'))
        summary = attendance_summary(self.user, '2025-07')
        self.assertEqual(summary['present'], 1)
        self.assertEqual(summary['halfDay'], 1)
        self.assertEqual(summary['totalDays'], 2)
        self.assertEqual(summary['totalHours'], '12.75')


class AttendanceAPITests(TestCase):
    """Test attendance endpoints"""

    def setUp(self):
        self.company = TestDataFactory.create_company()
        self.admin = TestDataFactory.create_user(role='admin', company=self.company)
        self.employee = TestDataFactory.create_user(company=self.company)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.employee)

    def test_punch_in_endpoint(self):
        response = self.client.post('/api/v1/hr/attendance/punch-in/', {
            'date': '2025-07-14', 'latitude': '19.076090', 'longitude': '72.877426',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Punch In successful')
        self.assertEqual(response.data['data']['status'], 'Working')

    def test_punch_in_without_location(self):
        response = self.client.post('/api/v1/hr/attendance/punch-in/', {'date': '2025-07-14'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Date and location are required')

    def test_employee_sees_only_own_rows(self):
        other = TestDataFactory.create_user(company=self.company)
        Attendance.objects.create(employee=self.employee, date=date(2025, 7, 1))
        Attendance.objects.create(employee=other, date=date(2025, 7, 1))
        response = self.client.get('/api/v1/hr/attendance/')
        self.assertEqual(len(response.data), 1)

        self.client.authenticate_user(self.admin)
        response = self.client.get(f'/api/v1/hr/attendance/?employee={other.id}')
        self.assertEqual(len(response.data), 1)
        response = self.client.get('/api/v1/hr/attendance/')
        self.assertEqual(len(response.data), 2)

    def test_invalid_month(self):
        response = self.client.get('/api/v1/hr/attendance/my-summary/?month=July')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Month must be in YYYY-MM format')


class LeaveTests(TestCase):
    """Test leave requests and approval"""

    def setUp(self):
        self.company = TestDataFactory.create_company()
        self.admin = TestDataFactory.create_user(role='admin', company=self.company)
        self.agent = TestDataFactory.create_user(role='agent', company=self.company)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.agent)

    def _apply(self, from_date='2025-08-11', to_date='2025-08-13'):
        return self.client.post('/api/v1/hr/leaves/', {
            'leave_type': 'Casual', 'from_date': from_date, 'to_date': to_date, 'reason': 'Family function',
        }, format='json')

    def test_apply(self):
        response = self._apply()
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['message'], 'Leave applied successfully')
        self.assertEqual(response.data['data']['days'], 3)
        self.assertEqual(response.data['data']['status'], 'Pending')

    def test_missing_fields(self):
        response = self.client.post('/api/v1/hr/leaves/', {'leave_type': 'Casual'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'All fields are required')

    def test_reversed_dates(self):
        response = self._apply(from_date='2025-08-13', to_date='2025-08-11')
        self.assertEqual(response.data['message'], 'From date cannot be greater than To date')

    def test_overlap_rejected_unless_previous_rejected(self):
        self._apply()
        response = self._apply(from_date='2025-08-13', to_date='2025-08-15')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        LeaveRequest.objects.update(status='Rejected')
        response = self._apply(from_date='2025-08-13', to_date='2025-08-15')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_only_admin_lists_company_leaves(self):
        self._apply()
        response = self.client.get('/api/v1/hr/leaves/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        response = self.client.get('/api/v1/hr/leaves/my/')
        self.assertEqual(len(response.data), 1)

    def test_approval_blocks_agent_availability(self):
        leave_id = self._apply().data['data']['id']
        self.client.authenticate_user(self.admin)
        response = self.client.patch(f'/api/v1/hr/leaves/{leave_id}/status/', {'status': 'Approved'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.agent.refresh_from_db()
        self.assertEqual(self.agent.leave_from, date(2025, 8, 11))
        self.assertFalse(is_agent_available(self.agent, date(2025, 8, 12)))
        self.assertEqual(mail.outbox[0].to, [self.agent.email])

        response = self.client.patch(f'/api/v1/hr/leaves/{leave_id}/status/', {'status': 'Rejected'}, format='json')
        self.agent.refresh_from_db()
        self.assertIsNone(self.agent.leave_from)
        self.assertTrue(is_agent_available(self.agent, date(2025, 8, 12)))

    def test_invalid_status(self):
        leave_id = self._apply().data['data']['id']
        self.client.authenticate_user(self.admin)
        response = self.client.patch(f'/api/v1/hr/leaves/{leave_id}/status/', {'status': 'Maybe'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_employee_cannot_approve(self):
        leave_id = self._apply().data['data']['id']
        response = self.client.patch(f'/api/v1/hr/leaves/{leave_id}/status/', {'status': 'Approved'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_withdraw_pending_only(self):
        leave_id = self._apply().data['data']['id']
        LeaveRequest.objects.filter(pk=leave_id).update(status='Approved')
        response = self.client.delete(f'/api/v1/hr/leaves/{leave_id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        LeaveRequest.objects.filter(pk=leave_id).update(status='Pending')
        response = self.client.delete(f'/api/v1/hr/leaves/{leave_id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)


class HolidayTests(TestCase):
    """Test agent holidays"""

    def setUp(self):
        self.company = TestDataFactory.create_company()
        self.admin = TestDataFactory.create_user(role='admin', company=self.company)
        self.agent = TestDataFactory.create_user(role='agent', company=self.company)
        self.client = AuthenticatedAPIClient()

    def test_admin_adds_holiday(self):
        self.client.authenticate_user(self.admin)
        response = self.client.post('/api/v1/hr/holidays/', {'user': self.agent.id, 'date': '2025-08-15',
                                                             'reason': 'Independence Day'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertFalse(is_agent_available(self.agent, date(2025, 8, 15)))

    def test_agent_sees_own_holidays_and_cannot_add(self):
        AgentHoliday.objects.create(user=self.agent, date=date(2025, 8, 15))
        AgentHoliday.objects.create(user=self.admin, date=date(2025, 8, 15))
        self.client.authenticate_user(self.agent)
        response = self.client.get('/api/v1/hr/holidays/')
        self.assertEqual(len(response.data), 1)
        response = self.client.post('/api/v1/hr/holidays/', {'user': self.agent.id, 'date': '2025-08-16'},
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
