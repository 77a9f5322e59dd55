"""Constants and defaults."""

DEFAULT_TIMEZONE = "Asia/Bangkok"

WEEKLY_WINDOW_DAYS = 7
MONTHLY_WINDOW_DAYS = 30
MAX_STREAK_DAYS = 30

HIGH_RISK_WEEKLY_NEGATIVES = 3
CONSECUTIVE_BAD_DAYS_ALERT = 3

# Sentiment thresholds
POSITIVE_LABEL_THRESHOLD = 0.25
NEGATIVE_LABEL_THRESHOLD = -0.25
HIGH_RISK_SCORE = -0.5
HIGH_RISK_MAGNITUDE = 2.0

DEFAULT_HISTORY_LIMIT = 30
DEFAULT_PAGE_SIZE = 20
DEFAULT_NOTIFICATION_RETENTION_DAYS = 30
MIN_PASSWORD_LENGTH = 6

UNKNOWN_IP = "unknown"
MAX_IP_LENGTH = 45
UNKNOWN_LANGUAGE = "unknown"
