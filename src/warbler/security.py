"""Route authorization.

A route may declare a ``security`` requirement: one role name or several.
The dispatcher hands that requirement to an ``Authorizer``, which answers
whether the current user holds at least one of the roles.

Warbler does not store users or sessions. Plug in any object with an
``is_authorized(roles)`` method; ``RoleAuthorizer`` covers the common case
of a fixed or per-request set of granted roles::

    auth = RoleAuthorizer()
    auth.grant("editor")
    app = App(authorizer=auth)
"""

from collections.abc import Iterable
from typing import Protocol, runtime_checkable


@runtime_checkable
class Authorizer(Protocol):
    """Decides whether the current user may access a secured route."""

    def is_authorized(self, roles: str | Iterable[str]) -> bool: ...


def normalize_roles(roles: str | Iterable[str]) -> frozenset[str]:
    """Return *roles* as a frozenset of non-blank role names."""
    if isinstance(roles, str):
        roles = (roles,)
    return frozenset(r.strip() for r in roles if r and r.strip())


class RoleAuthorizer:
    """Grants access when the user holds any of the required roles."""

    __slots__ = ("_granted",)

    def __init__(self, roles: str | Iterable[str] = ()) -> None:
        self._granted: frozenset[str] = normalize_roles(roles)

    @property
    def roles(self) -> frozenset[str]:
        return self._granted

    def grant(self, *roles: str) -> None:
        """Add *roles* to the granted set."""
        self._granted = self._granted | normalize_roles(roles)

    def revoke(self) -> None:
        """Drop every granted role."""
        self._granted = frozenset()

    def is_authorized(self, roles: str | Iterable[str]) -> bool:
        """True if at least one of *roles* has been granted.

        Raises ``ValueError`` for an empty requirement; a route that needs
        no role should not declare ``security`` at all.
        """
        required = normalize_roles(roles)
        if not required:
            msg = "At least one role is required for authorization."
            raise ValueError(msg)
        return bool(required & self._granted)
