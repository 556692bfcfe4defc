"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7
DEFAULT_LATE_GRACE_MINUTES = 15
MIN_PASSWORD_LENGTH = 6
MYSQL_DUPLICATE_KEY_ERRNO = 1062
SUBJECT_STUDENTS_CACHE_KEY = "subjects/{subject_id}/students"
