# habit_analytics/utils/constants.py
"""
Central constants file for the analytics engine.
Use these constants instead of hardcoded strings and magic numbers.
"""

# ============================================
# HABIT CATEGORIES
# ============================================
CATEGORY_HEALTH = "health"
CATEGORY_FITNESS = "fitness"
CATEGORY_PRODUCTIVITY = "productivity"
CATEGORY_LEARNING = "learning"
CATEGORY_SOCIAL = "social"
CATEGORY_SPIRITUAL = "spiritual"
CATEGORY_CREATIVE = "creative"
CATEGORY_OTHER = "other"

CATEGORY_CHOICES = [
    CATEGORY_HEALTH,
    CATEGORY_FITNESS,
    CATEGORY_PRODUCTIVITY,
    CATEGORY_LEARNING,
    CATEGORY_SOCIAL,
    CATEGORY_SPIRITUAL,
    CATEGORY_CREATIVE,
    CATEGORY_OTHER,
]

DEFAULT_CATEGORY = CATEGORY_OTHER

# ============================================
# HABIT DEFAULTS
# ============================================
DEFAULT_COLOR = "#3B82F6"
DEFAULT_STREAK_TARGET = 7

FREQUENCY_DAILY = "daily"
FREQUENCY_WEEKLY = "weekly"
FREQUENCY_MONTHLY = "monthly"

FREQUENCY_CHOICES = [
    FREQUENCY_DAILY,
    FREQUENCY_WEEKLY,
    FREQUENCY_MONTHLY,
]

WEEKDAY_NAMES = [
    'monday', 'tuesday', 'wednesday', 'thursday',
    'friday', 'saturday', 'sunday',
]

# ============================================
# RECORD RATING SCALES
# ============================================
RATING_MIN = 1
RATING_MAX = 5

# ============================================
# ANALYTICS WINDOWS
# ============================================
DEFAULT_WINDOW_DAYS = 30

PERIOD_WEEK = "week"
PERIOD_MONTH = "month"
PERIOD_QUARTER = "quarter"
PERIOD_YEAR = "year"

PERIOD_DAYS = {
    PERIOD_WEEK: 7,
    PERIOD_MONTH: 30,
    PERIOD_QUARTER: 90,
    PERIOD_YEAR: 365,
}

DEFAULT_PERIOD = PERIOD_MONTH

# ============================================
# TREND GROUPING (fixed-size buckets, not calendar aligned)
# ============================================
GROUP_DAY = "day"
GROUP_WEEK = "week"
GROUP_MONTH = "month"

GROUP_SIZES = {
    GROUP_DAY: 1,
    GROUP_WEEK: 7,
    GROUP_MONTH: 30,
}

DEFAULT_GROUP_BY = GROUP_WEEK
FALLBACK_GROUP_BY = GROUP_MONTH

# Days shown in the overview's trailing trend strip
OVERVIEW_TREND_DAYS = 7

# ============================================
# INSIGHT RULES
# ============================================
RATE_SUCCESS_THRESHOLD = 80
RATE_WARNING_THRESHOLD = 60
RATE_DANGER_THRESHOLD = 40

STREAK_SUCCESS_THRESHOLD = 7

RECENT_RECORDS_COUNT = 7
RECENT_CONSISTENCY_RATIO = 0.8

STREAK_MILESTONES = [7, 14, 21, 30, 60, 90, 180, 365]
