from django.urls import path
from .views import (
    CustomTokenObtainPairView, CustomTokenRefreshView, register, user_me,
    user_list_create, user_detail,
    company_list_create, company_detail,
    support_mailbox_list_create, support_mailbox_delete,
    notification_list, notification_mark_read,
    setting_list_create, setting_detail,
    audit_log_list, audit_log_detail,
)

urlpatterns = [
    # Auth endpoints
    path('auth/register/', register, name='register'),
    path('auth/login/', CustomTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('auth/refresh/', CustomTokenRefreshView.as_view(), name='token_refresh'),
    path('auth/me/', user_me, name='user-me'),

    # User endpoints
    path('users/', user_list_create, name='user-list-create'),
    path('users/<int:pk>/', user_detail, name='user-detail'),

    # Company endpoints
    path('company/', company_list_create, name='company-list-create'),
    path('company/<int:pk>/', company_detail, name='company-detail'),
    path('company/support-emails/', support_mailbox_list_create, name='support-mailbox-list-create'),
    path('company/support-emails/<int:pk>/', support_mailbox_delete, name='support-mailbox-delete'),

    # Notification endpoints
    path('notifications/', notification_list, name='notification-list'),
    path('notifications/<int:pk>/read/', notification_mark_read, name='notification-mark-read'),

    # Setting endpoints
    path('settings/', setting_list_create, name='setting-list-create'),
    path('settings/<int:pk>/', setting_detail, name='setting-detail'),

    # AuditLog endpoints
    path('audit-logs/', audit_log_list, name='audit-log-list'),
    path('audit-logs/<int:pk>/', audit_log_detail, name='audit-log-detail'),
]
