"""
Test suite for the projects module
Tests: workspaces, projects, task visibility and notifications, subtasks and comments
"""
from django.test import TestCase
from rest_framework import status
from erp.core.models import Notification
from erp.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from erp.projects.models import Workspace, Project, Task, SubTask, TaskComment


class ProjectsTestCase(TestCase):

    def setUp(self):
        self.company = TestDataFactory.create_company()
        self.admin = TestDataFactory.create_user(role='admin', company=self.company)
        self.alice = TestDataFactory.create_user(username='alice', company=self.company)
        self.bob = TestDataFactory.create_user(username='bob', company=self.company)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)
        self.project = Project.objects.create(company=self.company, name='Website', owner=self.admin)

    def _task(self, *assignees, title='Design landing page'):
        task = Task.objects.create(project=self.project, title=title, created_by=self.admin)
        task.assignees.set(assignees)
        return task


class WorkspaceProjectTests(ProjectsTestCase):
    """Test workspace and project endpoints"""

    def test_create_workspace(self):
        response = self.client.post('/api/v1/workspaces/', {'name': 'Marketing', 'members': [self.alice.id]},
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        workspace = Workspace.objects.get()
        self.assertEqual(workspace.company, self.company)
        self.assertEqual(workspace.created_by, self.admin)

    def test_workspaces_scoped_to_company(self):
        Workspace.objects.create(company=self.company, name='Ours')
        Workspace.objects.create(company=TestDataFactory.create_company(), name='Theirs')
        response = self.client.get('/api/v1/workspaces/')
        self.assertEqual([row['name'] for row in response.data], ['Ours'])

    def test_create_project_sets_owner(self):
        self.client.authenticate_user(self.alice)
        response = self.client.post('/api/v1/projects/', {'name': 'Mobile app', 'start_date': '2025-07-01',
                                                          'due_date': '2025-09-30'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['owner'], self.alice.id)
        self.assertEqual(response.data['task_count'], 0)

    def test_due_date_before_start(self):
        response = self.client.post('/api/v1/projects/', {'name': 'Backwards', 'start_date': '2025-07-10',
                                                          'due_date': '2025-07-01'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('due_date', response.data)

    def test_only_owner_or_admin_deletes_project(self):
        self.client.authenticate_user(self.alice)
        response = self.client.delete(f'/api/v1/projects/{self.project.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['message'], 'Only the project owner can delete it')

        self.client.authenticate_user(self.admin)
        response = self.client.delete(f'/api/v1/projects/{self.project.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Project.objects.exists())


class TaskTests(ProjectsTestCase):
    """Test task visibility and assignment notifications"""

    def test_create_notifies_assignees(self):
        response = self.client.post('/api/v1/tasks/', {
            'project': self.project.id, 'title': 'Write copy', 'assignees': [self.alice.id, self.bob.id],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        notifications = Notification.objects.filter(notification_type='task-assigned')
        self.assertEqual(notifications.count(), 2)
        notification = notifications.get(user=self.alice)
        self.assertEqual(notification.message, 'You have been assigned a new task: "Write copy"')
        self.assertEqual(notification.reference, f"task:{response.data['id']}")

    def test_employee_sees_only_assigned_tasks(self):
        mine = self._task(self.alice, title='Mine')
        other = self._task(self.bob, title='Other')
        self.client.authenticate_user(self.alice)

        response = self.client.get('/api/v1/tasks/')
        self.assertEqual([row['id'] for row in response.data], [mine.id])

        response = self.client.get(f'/api/v1/tasks/{other.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Not authorized or task not found')

    def test_admin_sees_all_tasks(self):
        self._task(self.alice)
        self._task(self.bob)
        response = self.client.get('/api/v1/tasks/')
        self.assertEqual(len(response.data), 2)

    def test_update_notifies_added_and_existing_assignees(self):
        """Test new assignees get task-assigned and existing ones task-updated, except the editor"""
        task = self._task(self.alice)
        self.client.authenticate_user(self.alice)
        response = self.client.patch(f'/api/v1/tasks/{task.id}/', {
            'status': 'in_progress', 'assignees': [self.alice.id, self.bob.id],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['assignee_details']), 2)

        self.assertTrue(Notification.objects.filter(user=self.bob, notification_type='task-assigned').exists())
        self.assertFalse(Notification.objects.filter(user=self.alice).exists())

        self.client.authenticate_user(self.admin)
        self.client.patch(f'/api/v1/tasks/{task.id}/', {'priority': 'high'}, format='json')
        updated = Notification.objects.filter(notification_type='task-updated')
        self.assertEqual(sorted(updated.values_list('user__username', flat=True)), ['alice', 'bob'])

    def test_editor_adding_themselves_is_not_notified(self):
        task = self._task(self.alice)
        response = self.client.patch(f'/api/v1/tasks/{task.id}/', {
            'assignees': [self.alice.id, self.admin.id],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Notification.objects.filter(user=self.admin).exists())
        self.assertTrue(Notification.objects.filter(user=self.alice, notification_type='task-updated').exists())

    def test_employee_cannot_delete_task(self):
        task = self._task(self.alice)
        self.client.authenticate_user(self.alice)
        response = self.client.delete(f'/api/v1/tasks/{task.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(Task.objects.filter(pk=task.pk).exists())


class SubTaskCommentTests(ProjectsTestCase):
    """Test subtasks, progress and comments"""

    def test_progress_follows_subtasks(self):
        task = self._task(self.alice)
        self.assertEqual(task.progress, 0)
        url = f'/api/v1/tasks/{task.id}/subtasks/'
        ids = [self.client.post(url, {'title': title}, format='json').data['id'] for title in ('a', 'b', 'c')]
        response = self.client.patch(f'{url}{ids[0]}/', {'done': True}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        response = self.client.get(f'/api/v1/tasks/{task.id}/')
        self.assertEqual(response.data['progress'], 33)
        SubTask.objects.filter(task=task).update(done=True)
        self.assertEqual(Task.objects.get(pk=task.pk).progress, 100)

    def test_only_author_changes_comment(self):
        task = self._task(self.alice)
        response = self.client.post(f'/api/v1/tasks/{task.id}/comments/', {'body': 'Please review'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        comment_url = f"/api/v1/tasks/{task.id}/comments/{response.data['id']}/"

        self.client.authenticate_user(self.alice)
        response = self.client.patch(comment_url, {'body': 'Edited'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['message'], 'You can only change your own comments')

        self.client.authenticate_user(self.admin)
        response = self.client.patch(comment_url, {'body': 'Edited'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(TaskComment.objects.get().body, 'Edited')
