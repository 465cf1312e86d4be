import os

SECRET_KEY = "test-secret"

STORE_BACKEND = "memory"
DATA_FILE = os.getenv("DATA_FILE", "data/timesheet_pro_test.json")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timesheet_pro_test"),
}

DEBUG = False
TESTING = True

LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")
LOG_JSON = False

AUTO_INIT_DB = False
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
