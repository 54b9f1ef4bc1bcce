"""
Access context for registry operations.

Roles arrive with each request and are passed explicitly to the operations
that check them; nothing here is module-level state.
"""

from enum import Enum
from typing import FrozenSet

from pydantic import BaseModel, ConfigDict

from .exceptions import PermissionDeniedError
from .models import ReportRecord


class Role(str, Enum):
    ADMIN = "admin"
    COMMANDER = "commander"
    LEADER = "leader"
    CADET = "cadet"


class AccessContext(BaseModel):
    """Who is calling and with which roles."""
    model_config = ConfigDict(frozen=True)

    user_id: str
    roles: FrozenSet[Role] = frozenset()

    @property
    def is_command(self) -> bool:
        return bool(self.roles & {Role.ADMIN, Role.COMMANDER})

    def can_consolidate(self) -> bool:
        """Only command oversight generates consolidated briefings and weekly summaries."""
        return self.is_command

    def can_edit(self, record: ReportRecord) -> bool:
        if self.roles & {Role.ADMIN, Role.COMMANDER, Role.LEADER}:
            return True
        return bool(self.user_id) and record.owner_id == self.user_id

    def can_manage_magazine(self) -> bool:
        return self.is_command


def require(allowed: bool, action: str) -> None:
    """
    Raises:
        PermissionDeniedError: If `allowed` is false
    """
    if not allowed:
        raise PermissionDeniedError(f"Not permitted to {action}")
