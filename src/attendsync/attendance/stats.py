from __future__ import annotations

from ..core.constants import LOW_ATTENDANCE_THRESHOLD, NEEDS_IMPROVEMENT_THRESHOLD
from ..core.enums import AttendanceStatus


def attendance_percentage(present: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return round(present / total * 100, 2)


def attendance_standing(percentage: float) -> str:
    if percentage >= LOW_ATTENDANCE_THRESHOLD:
        return "SATISFACTORY"
    if percentage >= NEEDS_IMPROVEMENT_THRESHOLD:
        return "NEEDS IMPROVEMENT"
    return "CRITICAL"


def summarize(records) -> dict:
    """Totals, percentage and standing for a list of attendance records."""
    total = len(records)
    present = sum(1 for r in records if r.status == AttendanceStatus.PRESENT)
    percentage = attendance_percentage(present, total)
    return {
        "total_classes": total,
        "total_present": present,
        "total_absent": total - present,
        "attendance_percentage": percentage,
        "standing": attendance_standing(percentage),
    }
