"""
Request Context
Identity of the caller, passed explicitly into every business operation.
"""

from dataclasses import dataclass
from typing import Optional

from fieldservice.data.core.user_info.user import ROLE_ADMIN


@dataclass(frozen=True)
class RequestContext:
    user_id: Optional[int]
    username: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @classmethod
    def from_user(cls, user) -> 'RequestContext':
        return cls(user_id=user.id, username=user.username, role=user.role)

    @classmethod
    def from_current_user(cls) -> 'RequestContext':
        """Build the context for the logged-in Flask-Login user"""
        from flask_login import current_user

        if not current_user.is_authenticated:
            return cls.anonymous()
        return cls.from_user(current_user)

    @classmethod
    def system(cls) -> 'RequestContext':
        """Context for CLI and build tasks"""
        return cls(user_id=None, username='system', role=ROLE_ADMIN)

    @classmethod
    def anonymous(cls) -> 'RequestContext':
        return cls(user_id=None, username='anonymous', role='anonymous')

    def __str__(self):
        return f"{self.username} ({self.role})"
