import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import transaction
from django.shortcuts import get_object_or_404
from .models import Workspace, Project, Task, SubTask, TaskComment
from .serializers import (
    WorkspaceSerializer, ProjectSerializer, TaskSerializer, SubTaskSerializer, TaskCommentSerializer,
)
from .services import notify_task_assigned, notify_task_updated, tasks_visible_to

logger = logging.getLogger('erp.projects')


def _company_scoped(queryset, user):
    if user.company_id:
        return queryset.filter(company_id=user.company_id)
    return queryset


def _task_queryset(request):
    tasks = Task.objects.select_related('project').prefetch_related('assignees', 'subtasks')
    return tasks_visible_to(request.user, tasks)


# Workspaces
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def workspace_list_create(request):
    if request.method == 'GET':
        workspaces = _company_scoped(Workspace.objects.prefetch_related('members'), request.user)
        return Response(WorkspaceSerializer(workspaces, many=True).data)
    serializer = WorkspaceSerializer(data=request.data)
    if serializer.is_valid():
        serializer.save(company=request.user.company, created_by=request.user)
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def workspace_detail(request, pk):
    workspace = get_object_or_404(_company_scoped(Workspace.objects.all(), request.user), pk=pk)
    if request.method == 'GET':
        return Response(WorkspaceSerializer(workspace).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = WorkspaceSerializer(workspace, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:
        workspace.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


# Projects
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def project_list_create(request):
    """List projects (filters workspace, status) or create one owned by the user"""
    if request.method == 'GET':
        projects = _company_scoped(Project.objects.select_related('workspace').prefetch_related('members'),
                                   request.user)
        for param in ('workspace', 'status'):
            value = request.query_params.get(param)
            if value:
                projects = projects.filter(**{param: value})
        return Response(ProjectSerializer(projects, many=True).data)
    serializer = ProjectSerializer(data=request.data)
    if serializer.is_valid():
        project = serializer.save(company=request.user.company, owner=request.user)
        logger.info(f"Project {project.name} created by {request.user.username}")
        return Response(ProjectSerializer(project).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def project_detail(request, pk):
    project = get_object_or_404(_company_scoped(Project.objects.all(), request.user), pk=pk)
    if request.method == 'GET':
        return Response(ProjectSerializer(project).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = ProjectSerializer(project, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:
        if project.owner_id != request.user.id and not request.user.is_admin_role:
            return Response({'success': False, 'message': 'Only the project owner can delete it'},
                            status=status.HTTP_403_FORBIDDEN)
        project.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


# Tasks
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def task_list_create(request):
    """Tasks newest first (filters project, status); creating notifies the assignees"""
    if request.method == 'GET':
        tasks = _task_queryset(request)
        for param in ('project', 'status', 'priority'):
            value = request.query_params.get(param)
            if value:
                tasks = tasks.filter(**{param: value})
        return Response(TaskSerializer(tasks.distinct(), many=True).data)

    serializer = TaskSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    project = serializer.validated_data['project']
    if request.user.company_id and project.company_id not in (None, request.user.company_id):
        return Response({'project': ['Invalid project']}, status=status.HTTP_400_BAD_REQUEST)
    with transaction.atomic():
        task = serializer.save(created_by=request.user)
        notified = notify_task_assigned(task, task.assignees.all())
    logger.info(f"Task {task.id} created by {request.user.username}, {notified} assignees notified")
    return Response(TaskSerializer(task).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def task_detail(request, pk):
    """Retrieve, update (board moves use PATCH {status}) or delete a task"""
    task = _task_queryset(request).filter(pk=pk).first()
    if task is None:
        return Response({'success': False, 'message': 'Not authorized or task not found'},
                        status=status.HTTP_404_NOT_FOUND)

    if request.method == 'GET':
        return Response(TaskSerializer(task).data)
    elif request.method in ('PUT', 'PATCH'):
        previous = set(task.assignees.values_list('id', flat=True))
        serializer = TaskSerializer(task, data=request.data, partial=request.method == 'PATCH')
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        with transaction.atomic():
            task = serializer.save()
            added = task.assignees.exclude(id__in=previous)
            notify_task_assigned(task, added, request.user)
            notify_task_updated(task, task.assignees.filter(id__in=previous), request.user)
        task = Task.objects.prefetch_related('assignees', 'subtasks').get(pk=task.pk)
        return Response(TaskSerializer(task).data)
    else:
        if request.user.role == 'employee' and not request.user.is_admin_role:
            return Response({'success': False, 'message': 'Employees cannot delete tasks'},
                            status=status.HTTP_403_FORBIDDEN)
        task.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def subtask_list_create(request, task_pk):
    task = get_object_or_404(_task_queryset(request), pk=task_pk)
    if request.method == 'GET':
        return Response(SubTaskSerializer(task.subtasks.all(), many=True).data)
    serializer = SubTaskSerializer(data=request.data)
    if serializer.is_valid():
        serializer.save(task=task)
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def subtask_detail(request, task_pk, pk):
    task = get_object_or_404(_task_queryset(request), pk=task_pk)
    subtask = get_object_or_404(SubTask, pk=pk, task=task)
    if request.method == 'DELETE':
        subtask.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
    serializer = SubTaskSerializer(subtask, data=request.data, partial=request.method == 'PATCH')
    if serializer.is_valid():
        serializer.save()
        return Response(serializer.data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def comment_list_create(request, task_pk):
    task = get_object_or_404(_task_queryset(request), pk=task_pk)
    if request.method == 'GET':
        comments = task.comments.select_related('author')
        return Response(TaskCommentSerializer(comments, many=True).data)
    serializer = TaskCommentSerializer(data=request.data)
    if serializer.is_valid():
        serializer.save(task=task, author=request.user)
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def comment_detail(request, task_pk, pk):
    """Comments can only be edited or removed by their author"""
    task = get_object_or_404(_task_queryset(request), pk=task_pk)
    comment = get_object_or_404(TaskComment, pk=pk, task=task)
    if comment.author_id != request.user.id:
        return Response({'success': False, 'message': 'You can only change your own comments'},
                        status=status.HTTP_403_FORBIDDEN)
    if request.method == 'DELETE':
        comment.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
    serializer = TaskCommentSerializer(comment, data=request.data, partial=request.method == 'PATCH')
    if serializer.is_valid():
        serializer.save()
        return Response(serializer.data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
