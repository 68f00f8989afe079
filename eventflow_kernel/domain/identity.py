"""
Authentication collaborator interface (``eventflow_kernel.domain.identity``).

The engine never authenticates anyone.  Callers resolve a username to a
role through an ``Authenticator`` and pass that role into workflow
operations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from eventflow_kernel.domain.roles import Role


@dataclass(frozen=True)
class UserIdentity:
    """An authenticated user as supplied by the collaborator."""

    id: int
    username: str
    role: Role
    name: str


class Authenticator(Protocol):
    """Pluggable interface for the login collaborator."""

    def authenticate(self, username: str, password: str) -> UserIdentity | None:
        """Return the identity for valid credentials, else None."""
        ...
