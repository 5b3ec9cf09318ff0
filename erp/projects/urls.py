from django.urls import path
from .views import (
    workspace_list_create, workspace_detail, project_list_create, project_detail, task_list_create,
    task_detail, subtask_list_create, subtask_detail, comment_list_create, comment_detail,
)

urlpatterns = [
    path('workspaces/', workspace_list_create, name='workspace-list-create'),
    path('workspaces/<int:pk>/', workspace_detail, name='workspace-detail'),
    path('projects/', project_list_create, name='project-list-create'),
    path('projects/<int:pk>/', project_detail, name='project-detail'),
    path('tasks/', task_list_create, name='task-list-create'),
    path('tasks/<int:pk>/', task_detail, name='task-detail'),
    path('tasks/<int:task_pk>/subtasks/', subtask_list_create, name='subtask-list-create'),
    path('tasks/<int:task_pk>/subtasks/<int:pk>/', subtask_detail, name='subtask-detail'),
    path('tasks/<int:task_pk>/comments/', comment_list_create, name='task-comment-list-create'),
    path('tasks/<int:task_pk>/comments/<int:pk>/', comment_detail, name='task-comment-detail'),
]
