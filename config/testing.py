import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "campus_attendance_test"),
}

STORE_BACKEND = os.getenv("STORE_BACKEND", "memory")

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

LOW_ATTENDANCE_THRESHOLD = 75

BRANCHES = ["CSE", "ECE", "EEE", "MECH", "CIVIL", "IT", "AIDS", "AID", "CSM", "IOT"]

DEPARTMENT_MAP = {"AIDS": ["AID", "CSM", "IOT"]}

AUTO_INIT_DB = False
AUTO_SEED_DB = False
