import os

SECRET_KEY = "test-secret"

STORAGE_BACKEND = "memory"
DATA_FILE = ""

BACKEND = "local"
REMOTE_URL = ""

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hrms_test"),
}

IP_WHITELIST = ["203.0.113.10"]
ALLOW_PRIVATE_NETWORKS = False

OFFICE_START_TIME = "09:00"
LATE_GRACE_MINUTES = 15

SEED_SAMPLE_DATA = True
SESSION_DAYS = 7

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
