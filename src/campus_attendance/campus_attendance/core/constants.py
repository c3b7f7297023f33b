"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

PERIODS_COLLECTION = "attendance_periods"
STUDENTS_COLLECTION = "students"

DEFAULT_LOW_ATTENDANCE_THRESHOLD = 75
DEFAULT_RECENT_SUBMISSIONS = 5
DEFAULT_SECTION = "A"

DEFAULT_BRANCHES = ("CSE", "ECE", "EEE", "MECH", "CIVIL", "IT", "AIDS")
