"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

UNKNOWN = "Unknown"

PERIOD_FORMAT = "%Y-%m"
DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"

DEFAULT_BONUS_RATE = Decimal("0.10")
DEFAULT_TAX_RATE = Decimal("0.075")
DEFAULT_PENSION_RATE = Decimal("0.08")

MAX_NOTES_LENGTH = 500

# Money columns are DECIMAL(18, 6): amount digits plus rate digits must fit in six.
MAX_AMOUNT_DECIMALS = 3
MAX_RATE_DECIMALS = 3
