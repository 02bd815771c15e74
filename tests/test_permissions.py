"""
Unit tests for the role hierarchy
"""

import pytest

from app.auth.permissions import (
    Role, ROLE_LEVELS, has_permission, parse_role, is_admin, is_sub_admin, is_soporte
)

class TestHasPermission:
    """Test cases for hierarchical permission checks"""

    def test_sub_admin_requirement(self):
        """admin and sub-admin satisfy sub-admin, soporte does not"""
        assert has_permission("admin", "sub-admin") is True
        assert has_permission("sub-admin", "sub-admin") is True
        assert has_permission("soporte", "sub-admin") is False

    @pytest.mark.parametrize("caller", list(Role))
    @pytest.mark.parametrize("required", list(Role))
    def test_matches_level_ordering(self, caller, required):
        """Every pair follows the numeric levels"""
        assert has_permission(caller, required) == (ROLE_LEVELS[caller] >= ROLE_LEVELS[required])

    def test_accepts_enum_members_and_strings(self):
        assert has_permission(Role.ADMIN, "soporte") is True
        assert has_permission("soporte", Role.ADMIN) is False

    def test_missing_caller_fails_closed(self):
        """No authenticated caller means no permissions"""
        for required in Role:
            assert has_permission(None, required) is False

    def test_unknown_roles_fail_closed(self):
        assert has_permission("superuser", "soporte") is False
        assert has_permission("ADMIN", "soporte") is False
        assert has_permission("admin", "owner") is False
        assert has_permission("admin", None) is False

class TestRoleHelpers:
    """Test cases for exact-role predicates"""

    def test_parse_role(self):
        assert parse_role("sub-admin") is Role.SUB_ADMIN
        assert parse_role(Role.SOPORTE) is Role.SOPORTE
        assert parse_role("sub_admin") is None
        assert parse_role(None) is None

    def test_exact_role_checks(self):
        assert is_admin("admin") and not is_admin("sub-admin")
        assert is_sub_admin("sub-admin") and not is_sub_admin("admin")
        assert is_soporte("soporte") and not is_soporte(None)
