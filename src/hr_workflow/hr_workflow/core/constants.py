"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_APP_TIMEZONE = "Asia/Jakarta"
DEFAULT_SHIFT_START_HOUR = 9
DEFAULT_SHIFT_END_HOUR = 18
DEFAULT_TOLERANCE_MINUTES = 1
DEFAULT_HISTORY_LIMIT = 14

# Hours past shift end after which a forgotten check-out is closed automatically.
AUTO_CHECKOUT_GRACE_HOURS = 1

# Reported as "remaining" for leave types without a yearly quota.
UNLIMITED_BALANCE_SENTINEL = 999

LEAVE_REQUEST_ENTITY = "leave_request"
PAYSLIP_ENTITY = "payslip"
ANNOUNCEMENT_ENTITY = "announcement"

# Allowed distance from the office for a GPS check-in.
DEFAULT_CHECK_IN_RADIUS_METERS = 50
