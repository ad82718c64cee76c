"""Party domain model: the purchasing actor, read-only to sales."""
from dataclasses import dataclass

from src.bk_common.enums import UserRole


@dataclass
class Party:
    id: str
    name: str
    email: str
    role: str  # admin / employee / client
    is_active: bool = True

    @property
    def is_client(self) -> bool:
        return self.role == UserRole.CLIENT

    @property
    def is_staff(self) -> bool:
        return self.role in (UserRole.ADMIN, UserRole.EMPLOYEE)
