from django.urls import path
from .views import (
    email_inbound, ticket_list, ticket_detail, ticket_message, ticket_create, ticket_assign,
    ticket_update_status, ticket_close, sla_check, sla_policy_list_create, sla_policy_detail,
    feedback_request, feedback_submit, category_list_create, category_detail, agent_list, report,
    csat_list, auto_reassign,
)

urlpatterns = [
    path('helpdesk/email-inbound/', email_inbound, name='helpdesk-email-inbound'),
    path('helpdesk/list/', ticket_list, name='helpdesk-ticket-list'),
    path('helpdesk/create/', ticket_create, name='helpdesk-ticket-create'),
    path('helpdesk/tickets/<int:pk>/', ticket_detail, name='helpdesk-ticket-detail'),
    path('helpdesk/tickets/<int:pk>/message/', ticket_message, name='helpdesk-ticket-message'),
    path('helpdesk/assign/', ticket_assign, name='helpdesk-ticket-assign'),
    path('helpdesk/update-status/', ticket_update_status, name='helpdesk-ticket-update-status'),
    path('helpdesk/close/', ticket_close, name='helpdesk-ticket-close'),
    path('helpdesk/sla/check/', sla_check, name='helpdesk-sla-check'),
    path('helpdesk/sla-policies/', sla_policy_list_create, name='helpdesk-sla-policy-list-create'),
    path('helpdesk/sla-policies/<int:pk>/', sla_policy_detail, name='helpdesk-sla-policy-detail'),
    path('helpdesk/feedback/', feedback_request, name='helpdesk-feedback-request'),
    path('helpdesk/feedback/submit/', feedback_submit, name='helpdesk-feedback-submit'),
    path('helpdesk/categories/', category_list_create, name='helpdesk-category-list-create'),
    path('helpdesk/categories/<int:pk>/', category_detail, name='helpdesk-category-detail'),
    path('helpdesk/agents/', agent_list, name='helpdesk-agent-list'),
    path('helpdesk/report/', report, name='helpdesk-report'),
    path('helpdesk/csat/list/', csat_list, name='helpdesk-csat-list'),
    path('helpdesk/auto-reassign/', auto_reassign, name='helpdesk-auto-reassign'),
]
