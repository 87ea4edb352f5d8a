"""
Unit Tests for the admin permission resolver
"""
import pytest

from edupro.core.exceptions import InvalidInputError
from edupro.core.permissions import (
    ACTIONS,
    RESOURCES,
    default_permissions,
    has_permission,
    merge_permissions,
    require_permission,
)
from edupro.models import Admin, AdminRole


class TestHasPermission:

    def test_super_admin_ignores_table(self):
        assert has_permission("super_admin", default_permissions(granted=False), "students", "delete")

    def test_super_admin_enum(self):
        assert has_permission(AdminRole.SUPER_ADMIN, None, "library", "edit")

    def test_moderator_denied_when_false(self):
        permissions = default_permissions()
        permissions["students"]["delete"] = False

        assert not has_permission("moderator", permissions, "students", "delete")
        assert has_permission("moderator", permissions, "students", "view")

    def test_missing_resource_is_denial(self):
        assert not has_permission("admin", {"courses": {"view": True}}, "students", "view")

    def test_missing_action_is_denial(self):
        assert not has_permission("admin", {"students": {"view": True}}, "students", "edit")

    @pytest.mark.parametrize("permissions", [None, [], "students", {"students": True}])
    def test_malformed_table_is_denial(self, permissions):
        assert not has_permission("principal", permissions, "students", "view")

    def test_truthy_values_coerced(self):
        assert has_permission("admin", {"students": {"view": 1}}, "students", "view") is True


class TestDefaultPermissions:

    def test_all_true(self):
        table = default_permissions()

        assert set(table) == set(RESOURCES)
        assert all(table[r][a] is True for r in RESOURCES for a in ACTIONS)

    def test_fresh_copy_each_call(self):
        first = default_permissions()
        first["students"]["delete"] = False

        assert default_permissions()["students"]["delete"] is True


class TestMergePermissions:

    def test_partial_update(self):
        merged = merge_permissions(default_permissions(), {"students": {"delete": False}})

        assert merged["students"]["delete"] is False
        assert merged["students"]["view"] is True
        assert merged["coaches"]["delete"] is True

    def test_missing_entries_in_current_become_denials(self):
        merged = merge_permissions({"students": {"view": True}}, {"courses": {"view": True}})

        assert merged["students"]["view"] is True
        assert merged["courses"]["view"] is True
        assert merged["library"]["view"] is False

    def test_unknown_resource_rejected(self):
        with pytest.raises(InvalidInputError):
            merge_permissions(default_permissions(), {"teachers": {"view": True}})

    def test_unknown_action_rejected(self):
        with pytest.raises(InvalidInputError):
            merge_permissions(default_permissions(), {"students": {"approve": True}})

    def test_does_not_mutate_current(self):
        current = default_permissions()
        merge_permissions(current, {"students": {"delete": False}})

        assert current["students"]["delete"] is True


class TestAdminHasPermission:

    def test_delegates_to_resolver(self):
        permissions = default_permissions()
        permissions["results"]["edit"] = False
        admin = Admin(role=AdminRole.PRINCIPAL, permissions=permissions)

        assert not admin.has_permission("results", "edit")
        assert admin.has_permission("results", "view")

    def test_super_admin_model(self):
        admin = Admin(role=AdminRole.SUPER_ADMIN, permissions={})
        assert admin.has_permission("attendance", "delete")


class TestRequirePermission:

    def test_unknown_pair_rejected_at_definition(self):
        with pytest.raises(ValueError):
            require_permission("teachers", "view")

    def test_returns_dependency(self):
        assert callable(require_permission("students", "delete"))
