import os

from config import env_list, env_map

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "campus_attendance"),
}

STORE_BACKEND = os.getenv("STORE_BACKEND", "mysql")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

LOW_ATTENDANCE_THRESHOLD = int(os.getenv("LOW_ATTENDANCE_THRESHOLD", "75"))

BRANCHES = env_list("BRANCHES", "CSE,ECE,EEE,MECH,CIVIL,IT,AIDS")
# Department -> branches a coordinator of that department oversees.
DEPARTMENT_MAP = env_map("DEPARTMENT_MAP", "")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
