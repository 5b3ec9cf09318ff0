from rest_framework import serializers
from erp.core.models import AgentHoliday
from .models import Attendance, LeaveRequest


class AttendanceSerializer(serializers.ModelSerializer):
    employee_name = serializers.SerializerMethodField()

    class Meta:
        model = Attendance
        fields = ['id', 'employee', 'employee_name', 'date', 'punch_in_at', 'punch_in_latitude',
                  'punch_in_longitude', 'punch_out_at', 'punch_out_latitude', 'punch_out_longitude',
                  'total_hours', 'status', 'created_at', 'updated_at']
        read_only_fields = fields

    def get_employee_name(self, obj):
        return obj.employee.get_full_name() or obj.employee.username


class PunchSerializer(serializers.Serializer):
    date = serializers.DateField(required=False, allow_null=True)
    latitude = serializers.DecimalField(max_digits=9, decimal_places=6, required=False, allow_null=True)
    longitude = serializers.DecimalField(max_digits=9, decimal_places=6, required=False, allow_null=True)


class LeaveRequestSerializer(serializers.ModelSerializer):
    employee_name = serializers.SerializerMethodField()
    days = serializers.IntegerField(read_only=True)

    class Meta:
        model = LeaveRequest
        fields = ['id', 'employee', 'employee_name', 'leave_type', 'from_date', 'to_date', 'days', 'reason',
                  'status', 'approved_by', 'created_at', 'updated_at']
        read_only_fields = ['employee', 'status', 'approved_by', 'created_at', 'updated_at']
        extra_kwargs = {'reason': {'required': False, 'allow_blank': True},
                        'from_date': {'required': False}, 'to_date': {'required': False},
                        'leave_type': {'required': False}}

    def get_employee_name(self, obj):
        return obj.employee.get_full_name() or obj.employee.username


class AgentHolidaySerializer(serializers.ModelSerializer):
    username = serializers.CharField(source='user.username', read_only=True)

    class Meta:
        model = AgentHoliday
        fields = ['id', 'user', 'username', 'date', 'reason']
