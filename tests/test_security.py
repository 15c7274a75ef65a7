"""Tests for warbler.security — role-based route authorization."""

import pytest

from warbler.security import Authorizer, RoleAuthorizer, normalize_roles


class TestNormalizeRoles:
    def test_string(self) -> None:
        assert normalize_roles("admin") == frozenset({"admin"})

    def test_strips_and_drops_blank(self) -> None:
        assert normalize_roles([" admin ", "", "  "]) == frozenset({"admin"})


class TestRoleAuthorizer:
    def test_is_authorizer(self) -> None:
        assert isinstance(RoleAuthorizer(), Authorizer)

    def test_any_role_suffices(self) -> None:
        auth = RoleAuthorizer(["editor"])
        assert auth.is_authorized(["admin", "editor"])

    def test_no_overlap(self) -> None:
        auth = RoleAuthorizer("viewer")
        assert not auth.is_authorized("admin")

    def test_no_roles_granted(self) -> None:
        assert not RoleAuthorizer().is_authorized("admin")

    def test_grant_and_revoke(self) -> None:
        auth = RoleAuthorizer()
        auth.grant("admin", "editor")
        assert auth.roles == frozenset({"admin", "editor"})
        assert auth.is_authorized("admin")

        auth.revoke()
        assert auth.roles == frozenset()
        assert not auth.is_authorized("admin")

    @pytest.mark.parametrize("roles", ["", [], ["  "]])
    def test_empty_requirement_raises(self, roles: object) -> None:
        with pytest.raises(ValueError, match="At least one role"):
            RoleAuthorizer("admin").is_authorized(roles)  # type: ignore[arg-type]
