import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# json | mysql | memory
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "json")
DATA_FILE = os.getenv("DATA_FILE", "instance/hrms_data.json")

# local: functions run in process; remote: call the functions service at REMOTE_URL
BACKEND = os.getenv("BACKEND", "local")
REMOTE_URL = os.getenv("REMOTE_URL", "")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hrms_db"),
}

# Office network for attendance check-in/out (comma separated)
IP_WHITELIST = [ip.strip() for ip in os.getenv("IP_WHITELIST", "").split(",") if ip.strip()]
# Loopback, 192.168.x.x and 10.x.x.x count as the office network
ALLOW_PRIVATE_NETWORKS = bool(int(os.getenv("ALLOW_PRIVATE_NETWORKS", "1")))

# HH:MM; empty disables late detection
OFFICE_START_TIME = os.getenv("OFFICE_START_TIME", "")
LATE_GRACE_MINUTES = int(os.getenv("LATE_GRACE_MINUTES", "15"))

SEED_SAMPLE_DATA = bool(int(os.getenv("SEED_SAMPLE_DATA", "1")))
SESSION_DAYS = int(os.getenv("SESSION_DAYS", "7"))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
