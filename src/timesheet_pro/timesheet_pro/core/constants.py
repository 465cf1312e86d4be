"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_IN_TIME = "09:00"
DEFAULT_OUT_TIME = "17:00"
DUE_SOON_DAYS = 1
RECENT_ACTIVITY_LIMIT = 5
FULL_DAY_WEIGHT = 1.0
HALF_DAY_WEIGHT = 0.5
DEFAULT_DATA_FILE = "data/timesheet_pro.json"
PROJECT_OVERVIEW_LIMIT = 4
