from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import SchoolClass


class ClassRepository(Protocol):
    def get_by_id(self, class_id: int) -> Optional[SchoolClass]:
        raise NotImplementedError

    def find_duplicate(self, *, name: str, subject: str, teacher_id: Optional[int]) -> Optional[SchoolClass]:
        raise NotImplementedError

    def create_class(self, *, name: str, section: Optional[str], subject: str, teacher_id: Optional[int]) -> int:
        raise NotImplementedError

    def list_all(self, *, teacher_id: Optional[int] = None) -> Sequence[SchoolClass]:
        raise NotImplementedError

    def count_all(self) -> int:
        raise NotImplementedError
