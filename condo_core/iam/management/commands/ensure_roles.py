# condo_core/iam/management/commands/ensure_roles.py
from django.contrib.auth.models import Group
from django.core.management.base import BaseCommand

from condo_core.iam.models import UserRole


class Command(BaseCommand):
    help = "Create one auth group per role so roles can be granted through Django admin."

    def handle(self, *args, **options):
        created = [role for role in UserRole.values if Group.objects.get_or_create(name=role)[1]]
        if not created:
            self.stdout.write("Role groups already present.")
            return
        self.stdout.write(self.style.SUCCESS(f"Created role groups: {', '.join(created)}"))
