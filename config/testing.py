import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "emotion_checkin_test"),
}

DEBUG = False
TESTING = True

APP_TIMEZONE = "Asia/Bangkok"

# No key: sentiment analysis falls back to NEUTRAL
GOOGLE_NLP_API_KEY = ""
GOOGLE_NLP_ENDPOINT = "https://language.googleapis.com/v1/documents:analyzeSentiment"
NLP_TIMEOUT_SECONDS = 1.0

NOTIFICATION_RETENTION_DAYS = 30

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
