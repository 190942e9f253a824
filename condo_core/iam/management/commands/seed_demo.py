# condo_core/iam/management/commands/seed_demo.py
from django.contrib.auth.models import Group
from django.core.management.base import BaseCommand
from django.db import transaction

from condo_core.iam.models import UserRole
from condo_core.iam.services.users import UserService
from condo_core.tenants.models import Tenant
from condo_core.units.models import Unit

DEMO_SLUG = "condominio-dev"
DEMO_NAME = "Development Condominium"
DEMO_UNITS = (("A", "101"), ("A", "102"), ("B", "201"))
DEMO_USERS = (
    ("admin@condo.local", "Platform Admin", UserRole.SAAS_ADMIN),
    ("syndic@condo.local", "Demo Syndic", UserRole.SYNDIC),
    ("doorman@condo.local", "Demo Doorman", UserRole.DOORMAN),
    ("resident@condo.local", "Demo Resident", UserRole.RESIDENT),
)


class Command(BaseCommand):
    help = "Create a development condominium with one user per role. Safe to run repeatedly."

    def add_arguments(self, parser):
        parser.add_argument("--password", default="demo12345", help="Password for newly created demo users.")

    @transaction.atomic
    def handle(self, *args, **options):
        for role in UserRole.values:
            Group.objects.get_or_create(name=role)

        tenant, tenant_created = Tenant.objects.get_or_create(slug=DEMO_SLUG, defaults={"name": DEMO_NAME})

        units_created = 0
        for block, number in DEMO_UNITS:
            identifier = f"{block}-{number}"
            _, created = Unit.objects.get_or_create(
                tenant=tenant,
                identifier=identifier,
                defaults={"block": block, "number": number},
            )
            units_created += created

        for email, name, role in DEMO_USERS:
            # the platform admin is not a member of any condominium
            tenant_id = None if role == UserRole.SAAS_ADMIN else tenant.id
            UserService.create_or_update(
                email=email,
                name=name,
                role=role,
                tenant_id=tenant_id,
                password=options["password"],
            )

        if not tenant_created and not units_created:
            self.stdout.write(f"Demo condominium already present ({tenant.id}).")
            return
        self.stdout.write(
            self.style.SUCCESS(f"Seeded demo condominium {tenant.slug} ({tenant.id}) with {units_created} units.")
        )
