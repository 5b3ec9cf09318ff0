from django.core.management.base import BaseCommand
from django.contrib.auth.models import Group, Permission


class Command(BaseCommand):
    help = 'Create Django user groups for the application roles: Admin, Agent, Employee, Customer'

    GROUPS = {
        'Admin': ['*'],
        'Agent': ['helpdesk', 'parties'],
        'Employee': ['hr', 'projects', 'inventory', 'production', 'purchasing', 'sales', 'catalog', 'locations', 'pricing'],
        'Customer': [],
    }

    def add_arguments(self, parser):
        parser.add_argument('--sync-users', action='store_true', help='Add every user to the group matching their role')

    def handle(self, *args, **options):
        for name, apps in self.GROUPS.items():
            group, created = Group.objects.get_or_create(name=name)
            if apps == ['*']:
                permissions = Permission.objects.all()
            else:
                permissions = Permission.objects.filter(content_type__app_label__in=apps)
            group.permissions.set(permissions)
            verb = 'Created' if created else 'Updated'
            self.stdout.write(self.style.SUCCESS(f'{verb} group {name} with {permissions.count()} permissions'))

        if options['sync_users']:
            from django.contrib.auth import get_user_model
            User = get_user_model()
            synced = 0
            for user in User.objects.all():
                group = Group.objects.get(name=user.role.capitalize())
                user.groups.add(group)
                synced += 1
            self.stdout.write(self.style.SUCCESS(f'Synced {synced} users to role groups'))
