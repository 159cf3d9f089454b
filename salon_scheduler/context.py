from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Role(str, Enum):
    admin = "admin"
    professional = "professional"


@dataclass(frozen=True)
class RequestContext:
    """Who is acting on the current request.

    Passed explicitly to the services that scope their output by user, in
    place of any process-wide "current user" state.
    """

    role: Role = Role.admin
    professional_id: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role is Role.admin

    def can_see(self, professional_id: str) -> bool:
        return self.is_admin or professional_id == self.professional_id


ADMIN_CONTEXT = RequestContext()
