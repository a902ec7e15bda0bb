"""Seed the default CRM roles and, optionally, a super-admin user."""

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from access_control.defaults import DEFAULT_ROLES, SUPER_ADMIN_ROLE
from access_control.models import Role
from access_control.services import RoleService, normalize_permissions


def create_seed_roles() -> dict[str, Role]:
    """Create any missing default role and return a name -> Role map.

    Existing roles are left untouched so administrators' edits survive a
    re-seed.
    """
    roles: dict[str, Role] = {}
    for definition in DEFAULT_ROLES:
        existing = Role.objects.filter(name=definition["name"]).first()
        if existing is not None:
            roles[existing.name] = existing
            continue
        roles[definition["name"]] = RoleService.create_role(
            name=definition["name"],
            description=definition["description"],
            permissions=normalize_permissions(definition["permissions"]),
            category=definition["category"],
            level=definition["level"],
            is_system=definition.get("is_system", False),
        )
    return roles


def create_seed_super_admin(email: str, password: str, role: Role | None = None):
    """Create the super-admin user if no user with ``email`` exists yet."""
    User = get_user_model()
    user = User.objects.filter(email=email).first()
    if user is not None:
        return user, False
    return User.objects.create_super_admin(email=email, password=password, role=role), True


class Command(BaseCommand):
    """Management command to seed the default role catalog."""

    help = (
        "Seed the default CRM roles. Use --reset to remove non-system default roles "
        "nobody is assigned to first, and --admin-email/--admin-password to create "
        "a super-admin user."
    )

    def add_arguments(self, parser):
        parser.add_argument(
            "--reset",
            action="store_true",
            help="Delete unassigned, non-system default roles before seeding.",
        )
        parser.add_argument("--admin-email", help="Email of a super-admin user to create.")
        parser.add_argument("--admin-password", help="Password for --admin-email.")

    def handle(self, *args, **options):
        if options.get("reset"):
            self._reset_seeded_roles()

        self.stdout.write("Seeding default roles...")
        with transaction.atomic():
            roles = create_seed_roles()
        self.stdout.write(f"{len(roles)} default roles present.")

        email = options.get("admin_email")
        if email:
            password = options.get("admin_password")
            if not password:
                raise CommandError("--admin-password is required with --admin-email")
            _, created = create_seed_super_admin(email, password, roles.get(SUPER_ADMIN_ROLE))
            status = "created" if created else "already exists"
            self.stdout.write(f"Super admin {email} {status}.")

        self.stdout.write(self.style.SUCCESS("RBAC seed completed."))

    def _reset_seeded_roles(self) -> None:
        """Remove default roles that are safe to delete.

        System roles and roles still assigned to users are skipped, following
        the same rules as the delete endpoint.
        """
        names = [definition["name"] for definition in DEFAULT_ROLES]
        for role in Role.objects.filter(name__in=names, is_system=False, users__isnull=True):
            RoleService.delete_role(role.pk)
        self.stdout.write(self.style.WARNING("Unassigned default roles cleared."))
