from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional


@dataclass(frozen=True)
class Student:
    """Domain entity: a student enrolled in exactly one class.

    ``address`` already includes DOB/gender, see ``format_address_with_info``.
    """

    student_id: int
    roll_no: str
    class_id: int
    user_id: Optional[int] = None
    name: Optional[str] = None
    address: Optional[str] = None
    is_active: bool = True

    def to_dict(self) -> dict:
        return asdict(self)
