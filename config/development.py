import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# json | mysql | memory
STORE_BACKEND = os.getenv("STORE_BACKEND", "json")
DATA_FILE = os.getenv("DATA_FILE", "data/timesheet_pro.json")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timesheet_pro"),
}

DEBUG = True

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_JSON = bool(int(os.getenv("LOG_JSON", "0")))

# Create the MySQL database/table on startup (idempotent)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Load the demo company when the store has no users
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "1")))
