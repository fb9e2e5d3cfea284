"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

DEFAULT_WORK_DAYS = 30
DEFAULT_DAILY_WORK_HOURS = 8
DEFAULT_OVERTIME_MULTIPLIER = Decimal("1.5")
DEFAULT_ADVANCE_LIMIT_RATIO = Decimal("0.5")

DEFAULT_HOURS_WORKED = 8
MAX_HOURS_PER_DAY = 24
MAX_WORK_DAYS = 31

MONEY_QUANT = Decimal("0.01")
