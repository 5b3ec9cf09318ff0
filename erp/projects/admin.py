from django.contrib import admin
from .models import Workspace, Project, Task, SubTask, TaskComment


class SubTaskInline(admin.TabularInline):
    model = SubTask
    extra = 0


@admin.register(Workspace)
class WorkspaceAdmin(admin.ModelAdmin):
    list_display = ['name', 'company', 'created_by', 'created_at']


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ['name', 'workspace', 'status', 'owner', 'start_date', 'due_date']
    list_filter = ['status']
    search_fields = ['name']


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    list_display = ['title', 'project', 'status', 'priority', 'due_date', 'created_by']
    list_filter = ['status', 'priority']
    search_fields = ['title', 'project__name']
    inlines = [SubTaskInline]


@admin.register(TaskComment)
class TaskCommentAdmin(admin.ModelAdmin):
    list_display = ['task', 'author', 'created_at']
