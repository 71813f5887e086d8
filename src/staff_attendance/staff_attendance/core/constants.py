"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

LOCAL_TIMEZONE = "Asia/Kolkata"

# Leave days are stored as a work-done note starting with this marker,
# optionally followed by ": <reason>".
LEAVE_MARKER = "ON_LEAVE"

DEFAULT_DAILY_HOURS = 8

DAY_NAMES = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)
