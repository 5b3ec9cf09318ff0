from django.contrib import admin
from .models import Attendance, LeaveRequest


@admin.register(Attendance)
class AttendanceAdmin(admin.ModelAdmin):
    list_display = ['employee', 'date', 'punch_in_at', 'punch_out_at', 'total_hours', 'status']
    list_filter = ['status', 'date']
    search_fields = ['employee__username']


@admin.register(LeaveRequest)
class LeaveRequestAdmin(admin.ModelAdmin):
    list_display = ['employee', 'leave_type', 'from_date', 'to_date', 'status', 'approved_by']
    list_filter = ['status', 'leave_type']
    search_fields = ['employee__username']
