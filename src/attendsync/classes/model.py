from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional


@dataclass(frozen=True)
class SchoolClass:
    """Domain entity: a class taught by one teacher."""

    class_id: int
    name: str
    subject: str
    section: Optional[str] = None
    teacher_id: Optional[int] = None

    def to_dict(self) -> dict:
        return asdict(self)
