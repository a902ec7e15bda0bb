"""Role catalog and custom grant management invariants."""

from __future__ import annotations

from datetime import timedelta
from unittest import mock

from django.db.models import ProtectedError
from django.test import TestCase
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from access_control.exceptions import Conflict
from access_control.models import CustomGrant, Role, RolePermission
from access_control.services import CustomGrantService, RoleService, normalize_permissions
from tests.utils import create_role, create_user


class RoleCatalogTests(TestCase):
    """Create, update, and delete roles while guarding system and in-use roles."""

    @classmethod
    def setUpTestData(cls):
        cls.system_role = create_role(
            "Super Admin",
            [{"resource": "roles", "actions": ["read", "update"]}],
            category=Role.Category.SYSTEM,
            level=5,
            is_system=True,
        )
        cls.sales_role = create_role("Sales", [{"resource": "contacts", "actions": ["read", "create"]}])

    def test_create_role_stores_permissions(self):
        role = RoleService.create_role(
            name="  Support  ",
            description="Handles tickets",
            permissions=[{"resource": "customers", "actions": ["read", "update"]}],
            category=Role.Category.SUPPORT,
            level=2,
        )

        self.assertEqual(role.name, "Support")
        self.assertEqual(role.category, "support")
        self.assertEqual(role.permission_entries(), [{"resource": "customers", "actions": ["read", "update"]}])
        self.assertFalse(role.is_system)
        self.assertTrue(role.is_active)

    def test_create_role_merges_duplicate_resources_and_actions(self):
        entries = normalize_permissions(
            [
                {"resource": "tasks", "actions": ["read", "read"]},
                {"resource": "tasks", "actions": ["update", "read"]},
            ]
        )
        self.assertEqual(entries, [{"resource": "tasks", "actions": ["read", "update"]}])

    def test_create_role_rejects_duplicate_name(self):
        with self.assertRaises(ValidationError):
            create_role("Sales", [])

    def test_create_role_requires_name_and_description(self):
        with self.assertRaises(ValidationError):
            RoleService.create_role(name=" ", description="x", permissions=[])
        with self.assertRaises(ValidationError):
            RoleService.create_role(name="Nameless", description="", permissions=[])

    def test_create_role_rejects_malformed_or_unknown_permissions(self):
        invalid_payloads = [
            "contacts:read",
            [{"resource": "contacts"}],
            [{"resource": "contacts", "actions": []}],
            [{"actions": ["read"]}],
            [{"resource": "contacts", "actions": ["raed"]}],
            [{"resource": "Contacts", "actions": ["read"]}],
        ]
        for permissions in invalid_payloads:
            with self.subTest(permissions=permissions), self.assertRaises(ValidationError):
                create_role("Broken", permissions)
        self.assertFalse(Role.objects.filter(name="Broken").exists())

    def test_update_role_replaces_permission_set(self):
        role = RoleService.update_role(
            self.sales_role.pk,
            description="Sales team",
            permissions=[{"resource": "leads", "actions": ["read"]}],
        )

        self.assertEqual(role.description, "Sales team")
        self.assertEqual(role.permission_entries(), [{"resource": "leads", "actions": ["read"]}])
        self.assertFalse(RolePermission.objects.filter(role=role, resource="contacts").exists())

    def test_update_role_without_permissions_keeps_them(self):
        role = RoleService.update_role(self.sales_role.pk, level=3)
        self.assertEqual(role.level, 3)
        self.assertEqual(role.permission_entries(), [{"resource": "contacts", "actions": ["read", "create"]}])

    def test_create_role_rejects_out_of_range_level_and_unknown_category(self):
        for extra in ({"level": 99}, {"level": 0}, {"level": "3"}, {"level": True}, {"category": "bogus"}):
            with self.subTest(**extra), self.assertRaises(ValidationError):
                create_role("Out Of Range", [{"resource": "tasks", "actions": ["read"]}], **extra)
        self.assertFalse(Role.objects.filter(name="Out Of Range").exists())

    def test_update_role_rejects_out_of_range_level_and_unknown_category(self):
        with self.assertRaises(ValidationError):
            RoleService.update_role(self.sales_role.pk, level=6)
        with self.assertRaises(ValidationError):
            RoleService.update_role(self.sales_role.pk, category="executive")
        self.sales_role.refresh_from_db()
        self.assertEqual((self.sales_role.level, self.sales_role.category), (1, "sales"))

    def test_update_role_rejects_name_taken_by_another_role(self):
        with self.assertRaises(ValidationError):
            RoleService.update_role(self.sales_role.pk, name="Super Admin")

    def test_update_role_rejects_unknown_fields(self):
        with self.assertRaises(ValidationError):
            RoleService.update_role(self.sales_role.pk, is_system=True)

    def test_system_role_cannot_be_updated(self):
        with self.assertRaises(Conflict):
            RoleService.update_role(self.system_role.pk, description="changed")
        with self.assertRaises(Conflict):
            RoleService.update_role(self.system_role.pk, permissions=[])
        self.system_role.refresh_from_db()
        self.assertEqual(self.system_role.permission_entries(), [{"resource": "roles", "actions": ["read", "update"]}])

    def test_system_role_cannot_be_deleted(self):
        with self.assertRaises(Conflict):
            RoleService.delete_role(self.system_role.pk)
        self.assertTrue(Role.objects.filter(pk=self.system_role.pk).exists())

    def test_role_in_use_cannot_be_deleted(self):
        create_user("holder@test.com", role=self.sales_role)

        with self.assertRaises(Conflict) as ctx:
            RoleService.delete_role(self.sales_role.pk)
        self.assertIn("1 user(s)", str(ctx.exception.detail))
        self.assertTrue(Role.objects.filter(pk=self.sales_role.pk).exists())

    def test_unreferenced_role_is_deleted_with_its_permissions(self):
        RoleService.delete_role(self.sales_role.pk)

        self.assertFalse(Role.objects.filter(pk=self.sales_role.pk).exists())
        self.assertFalse(RolePermission.objects.filter(role_id=self.sales_role.pk).exists())

    def test_protected_foreign_key_race_maps_to_conflict(self):
        with mock.patch.object(Role, "delete", side_effect=ProtectedError("in use", set())):
            with self.assertRaises(Conflict):
                RoleService.delete_role(self.sales_role.pk)

    def test_missing_role_is_not_found(self):
        for role_id in (999999, "not-a-number"):
            with self.assertRaises(NotFound):
                RoleService.get_role(role_id)
            with self.assertRaises(NotFound):
                RoleService.delete_role(role_id)
            with self.assertRaises(NotFound):
                RoleService.update_role(role_id, description="x")

    def test_assign_and_clear_role(self):
        user = create_user("assignee@test.com")

        RoleService.assign_role(user.pk, self.sales_role.pk)
        user.refresh_from_db()
        self.assertEqual(user.role_id, self.sales_role.pk)

        RoleService.assign_role(user.pk, None)
        user.refresh_from_db()
        self.assertIsNone(user.role_id)

    def test_inactive_role_cannot_be_assigned(self):
        dormant = create_role("Dormant", [], is_active=False)
        user = create_user("dormant@test.com")
        with self.assertRaises(ValidationError):
            RoleService.assign_role(user.pk, dormant.pk)

    def test_assign_role_to_missing_user_or_role(self):
        user = create_user("lonely@test.com")
        with self.assertRaises(NotFound):
            RoleService.assign_role("00000000-0000-0000-0000-000000000000", self.sales_role.pk)
        with self.assertRaises(NotFound):
            RoleService.assign_role(user.pk, 999999)

    def test_set_super_admin_toggles_and_sets(self):
        user = create_user("toggle@test.com")

        self.assertTrue(RoleService.set_super_admin(user.pk).is_super_admin)
        self.assertFalse(RoleService.set_super_admin(user.pk).is_super_admin)
        self.assertTrue(RoleService.set_super_admin(user.pk, enabled=True).is_super_admin)
        self.assertTrue(RoleService.set_super_admin(user.pk, enabled=True).is_super_admin)

    def test_role_stats_counts_users(self):
        create_user("a@test.com", role=self.sales_role)
        create_user("b@test.com", role=self.sales_role)

        stats = RoleService.role_stats()

        self.assertEqual(stats["total_roles"], 2)
        counts = {entry["name"]: entry["user_count"] for entry in stats["roles"]}
        self.assertEqual(counts, {"Sales": 2, "Super Admin": 0})


class CustomGrantServiceTests(TestCase):
    """Upsert, revoke, remove, and list custom grants."""

    @classmethod
    def setUpTestData(cls):
        cls.admin = create_user("granter@test.com", is_super_admin=True)
        cls.other_admin = create_user("granter2@test.com", is_super_admin=True)
        cls.user = create_user("grantee@test.com")

    def test_assign_creates_active_grant(self):
        grant = CustomGrantService.assign_custom_permissions(
            self.user.pk, "contacts", ["read", "create", "read"], granted_by=self.admin
        )

        self.assertTrue(grant.is_active)
        self.assertIsNone(grant.expires_at)
        self.assertEqual(grant.actions, ["read", "create"])
        self.assertEqual(grant.granted_by, self.admin)

    def test_reassign_replaces_actions_expiry_and_granter(self):
        first_expiry = timezone.now() + timedelta(days=1)
        CustomGrantService.assign_custom_permissions(
            self.user.pk, "tasks", ["read"], expires_at=first_expiry, granted_by=self.admin
        )
        grant = CustomGrantService.assign_custom_permissions(
            self.user.pk, "tasks", ["update"], granted_by=self.other_admin
        )

        self.assertEqual(CustomGrant.objects.filter(user=self.user, resource="tasks").count(), 1)
        grant.refresh_from_db()
        self.assertEqual(grant.actions, ["update"])
        self.assertIsNone(grant.expires_at)
        self.assertEqual(grant.granted_by, self.other_admin)

    def test_reassign_reactivates_revoked_grant(self):
        CustomGrantService.assign_custom_permissions(self.user.pk, "tasks", ["read"])
        CustomGrantService.revoke_custom_permissions(self.user.pk, "tasks")

        grant = CustomGrantService.assign_custom_permissions(self.user.pk, "tasks", ["read"])
        self.assertTrue(grant.is_active)

    def test_assign_validates_input(self):
        invalid_calls = [
            (None, "tasks", ["read"]),
            (self.user.pk, "", ["read"]),
            (self.user.pk, "tasks", []),
            (self.user.pk, "tasks", None),
            (self.user.pk, "tasks", "read"),
            (self.user.pk, "tasks", ["obliterate"]),
            (self.user.pk, "spaceships", ["read"]),
        ]
        for user_id, resource, actions in invalid_calls:
            with self.subTest(resource=resource, actions=actions), self.assertRaises(ValidationError):
                CustomGrantService.assign_custom_permissions(user_id, resource, actions)
        self.assertFalse(CustomGrant.objects.exists())

    def test_assign_to_missing_user_is_not_found(self):
        with self.assertRaises(NotFound):
            CustomGrantService.assign_custom_permissions(
                "00000000-0000-0000-0000-000000000000", "tasks", ["read"]
            )

    def test_remove_deletes_grant(self):
        CustomGrantService.assign_custom_permissions(self.user.pk, "notes", ["read"])
        CustomGrantService.remove_custom_permissions(self.user.pk, "notes")
        self.assertFalse(CustomGrant.objects.filter(user=self.user, resource="notes").exists())

    def test_remove_missing_grant_is_not_found(self):
        with self.assertRaises(NotFound):
            CustomGrantService.remove_custom_permissions(self.user.pk, "notes")
        with self.assertRaises(NotFound):
            CustomGrantService.remove_custom_permissions("bogus", "notes")

    def test_revoke_keeps_record_inactive(self):
        CustomGrantService.assign_custom_permissions(self.user.pk, "notes", ["read"])
        grant = CustomGrantService.revoke_custom_permissions(self.user.pk, "notes")

        self.assertFalse(grant.is_active)
        self.assertEqual(grant.actions, ["read"])

    def test_revoke_missing_grant_is_not_found(self):
        with self.assertRaises(NotFound):
            CustomGrantService.revoke_custom_permissions(self.user.pk, "notes")

    def test_list_returns_effective_grants_unless_inactive_requested(self):
        CustomGrantService.assign_custom_permissions(self.user.pk, "contacts", ["read"])
        CustomGrantService.assign_custom_permissions(
            self.user.pk, "leads", ["read"], expires_at=timezone.now() - timedelta(seconds=1)
        )
        CustomGrantService.assign_custom_permissions(self.user.pk, "notes", ["read"])
        CustomGrantService.revoke_custom_permissions(self.user.pk, "notes")

        effective = CustomGrantService.list_custom_permissions(self.user.pk)
        everything = CustomGrantService.list_custom_permissions(self.user.pk, include_inactive=True)

        self.assertEqual([grant.resource for grant in effective], ["contacts"])
        self.assertEqual([grant.resource for grant in everything], ["contacts", "leads", "notes"])

    def test_grants_for_different_users_are_independent(self):
        CustomGrantService.assign_custom_permissions(self.user.pk, "tasks", ["read"])
        CustomGrantService.assign_custom_permissions(self.admin.pk, "tasks", ["delete"])

        self.assertEqual(CustomGrant.objects.get(user=self.user, resource="tasks").actions, ["read"])
        self.assertEqual(CustomGrant.objects.get(user=self.admin, resource="tasks").actions, ["delete"])
