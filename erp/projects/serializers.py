from django.contrib.auth import get_user_model
from rest_framework import serializers
from .models import Workspace, Project, Task, SubTask, TaskComment

User = get_user_model()


class MemberSerializer(serializers.ModelSerializer):
    name = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'username', 'name', 'email']

    def get_name(self, obj):
        return obj.get_full_name() or obj.username


class WorkspaceSerializer(serializers.ModelSerializer):
    member_details = MemberSerializer(source='members', many=True, read_only=True)

    class Meta:
        model = Workspace
        fields = ['id', 'name', 'description', 'members', 'member_details', 'created_by', 'created_at']
        read_only_fields = ['created_by', 'created_at']
        extra_kwargs = {'members': {'required': False}}


class ProjectSerializer(serializers.ModelSerializer):
    workspace_name = serializers.CharField(source='workspace.name', read_only=True)
    member_details = MemberSerializer(source='members', many=True, read_only=True)
    task_count = serializers.IntegerField(source='tasks.count', read_only=True)

    class Meta:
        model = Project
        fields = ['id', 'workspace', 'workspace_name', 'name', 'description', 'status', 'owner', 'members',
                  'member_details', 'start_date', 'due_date', 'task_count', 'created_at', 'updated_at']
        read_only_fields = ['owner', 'created_at', 'updated_at']
        extra_kwargs = {'members': {'required': False}}

    def validate(self, attrs):
        start = attrs.get('start_date', getattr(self.instance, 'start_date', None))
        due = attrs.get('due_date', getattr(self.instance, 'due_date', None))
        if start and due and due < start:
            raise serializers.ValidationError({'due_date': 'Due date cannot be before the start date'})
        return attrs


class SubTaskSerializer(serializers.ModelSerializer):
    class Meta:
        model = SubTask
        fields = ['id', 'task', 'title', 'done', 'assignees', 'created_at']
        read_only_fields = ['task', 'created_at']
        extra_kwargs = {'assignees': {'required': False}}


class TaskCommentSerializer(serializers.ModelSerializer):
    author_name = serializers.SerializerMethodField()

    class Meta:
        model = TaskComment
        fields = ['id', 'task', 'author', 'author_name', 'body', 'created_at', 'updated_at']
        read_only_fields = ['task', 'author', 'created_at', 'updated_at']

    def get_author_name(self, obj):
        return obj.author.get_full_name() or obj.author.username


class TaskSerializer(serializers.ModelSerializer):
    project_name = serializers.CharField(source='project.name', read_only=True)
    assignee_details = MemberSerializer(source='assignees', many=True, read_only=True)
    subtasks = SubTaskSerializer(many=True, read_only=True)
    progress = serializers.IntegerField(read_only=True)

    class Meta:
        model = Task
        fields = ['id', 'project', 'project_name', 'title', 'description', 'status', 'priority', 'due_date',
                  'assignees', 'assignee_details', 'subtasks', 'progress', 'created_by', 'created_at', 'updated_at']
        read_only_fields = ['created_by', 'created_at', 'updated_at']
        extra_kwargs = {'assignees': {'required': False}}
