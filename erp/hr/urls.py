from django.urls import path
from .views import (
    punch_in, punch_out, attendance_list, attendance_my_summary, leave_list_create, leave_my,
    leave_detail, leave_status, holiday_list_create, holiday_detail,
)

urlpatterns = [
    path('hr/attendance/', attendance_list, name='hr-attendance-list'),
    path('hr/attendance/punch-in/', punch_in, name='hr-punch-in'),
    path('hr/attendance/punch-out/', punch_out, name='hr-punch-out'),
    path('hr/attendance/my-summary/', attendance_my_summary, name='hr-attendance-my-summary'),
    path('hr/leaves/', leave_list_create, name='hr-leave-list-create'),
    path('hr/leaves/my/', leave_my, name='hr-leave-my'),
    path('hr/leaves/<int:pk>/', leave_detail, name='hr-leave-detail'),
    path('hr/leaves/<int:pk>/status/', leave_status, name='hr-leave-status'),
    path('hr/holidays/', holiday_list_create, name='hr-holiday-list-create'),
    path('hr/holidays/<int:pk>/', holiday_detail, name='hr-holiday-detail'),
]
