"""
Organizational roles (``eventflow_kernel.domain.roles``).

Roles gate which transitions an actor may invoke.  The engine trusts the
caller-supplied role; identity verification belongs to the authentication
collaborator (see ``eventflow_kernel.domain.identity``).
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class Role(str, Enum):
    """Acting party's organizational identifier."""

    CS = "CS"
    SCS = "SCS"
    FM = "FM"
    AM = "AM"
    PM = "PM"
    SM = "SM"
    HR = "HR"

    @classmethod
    def parse(cls, value: Any) -> Role | None:
        """Return the matching Role, or None for anything else.

        Sub-team member names flow through the same ``actor`` parameter as
        roles, so an unknown string is not an error here.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                return None
        return None

    @property
    def display_name(self) -> str:
        return ROLE_DISPLAY_NAMES[self]


ROLE_DISPLAY_NAMES: dict[Role, str] = {
    Role.CS: "Customer Service",
    Role.SCS: "Senior Customer Service",
    Role.FM: "Financial Manager",
    Role.AM: "Administration Manager",
    Role.PM: "Production Manager",
    Role.SM: "Service Manager",
    Role.HR: "Human Resources",
}
