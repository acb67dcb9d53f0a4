"""Guards run before a student record is created.

The checks are advisory: they read, then the caller writes. Concurrent requests
can both pass, so the ``UNIQUE (roll_no, class_id)`` key on ``students`` stays the
final authority (the MySQL repository maps its violation to the same error).
"""

from __future__ import annotations

from ..classes.repository import ClassRepository
from ..core.exceptions import ValidationError
from .repository import StudentRepository


def validate_student_data(roll_no, class_id, *, classes: ClassRepository, students: StudentRepository) -> None:
    # Only absent or empty values count as missing; "  " reaches the lookups.
    if not roll_no or not class_id:
        raise ValidationError("Roll number and class ID are required for students", 400)

    if not classes.get_by_id(class_id):
        raise ValidationError("Invalid class ID", 400)

    if students.find_by_roll_and_class(roll_no, class_id):
        raise ValidationError("Roll number already exists in this class", 400)
