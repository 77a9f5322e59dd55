import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "emotion_checkin_db"),
}

DEBUG = True

# Business dates and timestamps are computed in this zone
APP_TIMEZONE = os.getenv("APP_TIMEZONE", "Asia/Bangkok")

# Google Cloud Natural Language (documents:analyzeSentiment)
GOOGLE_NLP_API_KEY = os.getenv("GOOGLE_NLP_API_KEY", "")
GOOGLE_NLP_ENDPOINT = os.getenv(
    "GOOGLE_NLP_ENDPOINT", "https://language.googleapis.com/v1/documents:analyzeSentiment"
)
NLP_TIMEOUT_SECONDS = float(os.getenv("NLP_TIMEOUT_SECONDS", "10"))

NOTIFICATION_RETENTION_DAYS = int(os.getenv("NOTIFICATION_RETENTION_DAYS", "30"))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed the emotion catalog and demo users on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
