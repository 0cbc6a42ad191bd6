from dataclasses import dataclass
from typing import Optional

from pta.schemas.enums import UserRole


@dataclass(frozen=True)
class RequestContext:
    """Identity of the caller, passed explicitly into every service call."""
    user_id: str
    role: UserRole
    school_id: Optional[int] = None

    @classmethod
    def build(cls, user_id: str, role, school_id: Optional[int] = None) -> "RequestContext":
        return cls(user_id=str(user_id), role=UserRole.parse(role), school_id=school_id)

    @property
    def is_known(self) -> bool:
        return self.role is not UserRole.UNKNOWN
