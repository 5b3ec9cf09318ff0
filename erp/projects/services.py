import logging
from erp.core.models import Notification

logger = logging.getLogger(__name__)


def notify_users(users, notification_type, message, reference='', exclude=None):
    """One notification per user, skipping the user who caused it"""
    notifications = [
        Notification(user=user, notification_type=notification_type, message=message, reference=reference)
        for user in users
        if exclude is None or user.pk != exclude.pk
    ]
    if notifications:
        Notification.objects.bulk_create(notifications)
    logger.debug(f"{len(notifications)} {notification_type} notifications created for {reference}")
    return len(notifications)


def notify_task_assigned(task, users, actor=None):
    return notify_users(
        users, 'task-assigned', f'You have been assigned a new task: "{task.title}"', f'task:{task.id}', exclude=actor
    )


def notify_task_updated(task, users, actor):
    return notify_users(
        users, 'task-updated', f'Task "{task.title}" was updated', f'task:{task.id}', exclude=actor
    )


def tasks_visible_to(user, queryset):
    """Employees only see tasks assigned to them"""
    if user.company_id:
        queryset = queryset.filter(project__company_id=user.company_id)
    if user.role == 'employee' and not user.is_admin_role:
        queryset = queryset.filter(assignees=user)
    return queryset
