"""
Principal

The authenticated identity behind a request. It is resolved by the
authentication gate (``apps.users``) and trusted as-is by the domains
that consume it.
"""

from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    USER = 'User'
    ADMIN = 'Admin'


@dataclass(frozen=True)
class Principal:
    user_id: int
    role: Role = Role.USER

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @classmethod
    def from_user(cls, user) -> 'Principal':
        """Build a principal from an authenticated Django user."""
        if getattr(user, 'is_superuser', False):
            return cls(user_id=user.pk, role=Role.ADMIN)
        return cls(user_id=user.pk, role=Role(user.role))
