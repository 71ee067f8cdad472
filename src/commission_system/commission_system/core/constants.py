"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 200
DEFAULT_TOKEN_HOURS = 24

# Stored scope value that grants every employee.
SCOPE_ALL_EMPLOYEES = "0"

DATE_FORMAT = "%Y-%m-%d"
