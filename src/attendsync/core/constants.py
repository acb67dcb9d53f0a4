"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

MIN_PASSWORD_LENGTH = 8
DEFAULT_PAGE_SIZE = 10
LOW_ATTENDANCE_THRESHOLD = 75
NEEDS_IMPROVEMENT_THRESHOLD = 60
