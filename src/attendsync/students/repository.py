from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Student


class StudentRepository(Protocol):
    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def get_by_user_id(self, user_id: int) -> Optional[Student]:
        """The student record linked to a login account, if any."""

        raise NotImplementedError

    def find_by_roll_and_class(self, roll_no: str, class_id: int) -> Optional[Student]:
        raise NotImplementedError

    def create_student(self, *, user_id: Optional[int], roll_no: str, class_id: int, address: str) -> int:
        """Insert a student.

        Raises ValidationError when the (roll_no, class_id) pair is already taken,
        or when ``user_id`` is already linked to another student.
        """

        raise NotImplementedError

    def list_by_class(
        self,
        *,
        class_id: int,
        offset: int,
        limit: int,
        search: Optional[str] = None,
    ) -> tuple[Sequence[Student], int]:
        """Return one page of active students ordered by roll number, plus the total count."""

        raise NotImplementedError

    def list_all(self) -> Sequence[Student]:
        raise NotImplementedError

    def count_all(self) -> int:
        raise NotImplementedError
