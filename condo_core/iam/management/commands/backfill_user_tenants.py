# condo_core/iam/management/commands/backfill_user_tenants.py
from __future__ import annotations

from django.core.management.base import BaseCommand
from django.db import transaction

from condo_core.iam.models import UserProfile, UserTenant


class Command(BaseCommand):
    help = "Copy the legacy profile tenant into user_tenants. Only inserts missing memberships."

    def add_arguments(self, parser):
        parser.add_argument("--dry-run", action="store_true", help="Print counts only; do not write.")
        parser.add_argument("--tenant-id", type=str, default=None, help="Optional tenant UUID filter.")

    def handle(self, *args, **opts):
        dry = opts["dry_run"]

        qs = UserProfile.objects.filter(tenant__isnull=False).order_by("created_at")
        if opts["tenant_id"]:
            qs = qs.filter(tenant_id=opts["tenant_id"])

        examined = 0
        created_count = 0

        with transaction.atomic():
            for profile in qs.iterator():
                examined += 1

                if dry:
                    exists = UserTenant.objects.filter(user_id=profile.user_id, tenant_id=profile.tenant_id).exists()
                    if not exists:
                        created_count += 1
                    continue

                _, created = UserTenant.objects.get_or_create(
                    user_id=profile.user_id,
                    tenant_id=profile.tenant_id,
                )
                if created:
                    created_count += 1

        verb = "Would create" if dry else "Created"
        self.stdout.write(self.style.SUCCESS(f"Profiles examined: {examined}. {verb} memberships: {created_count}"))
