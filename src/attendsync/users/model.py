from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: an account (admin, teacher or student login).

    Plain data; no database access here.
    """

    user_id: int
    name: str
    email: str
    password_hash: str
    role: Role
    phone: Optional[str] = None
    is_active: bool = True

    def public_view(self) -> dict:
        return {
            "user_id": self.user_id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "phone": self.phone,
            "is_active": self.is_active,
        }
