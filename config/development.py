import os

from .config import Config, env_flag

SECRET_KEY = Config.SECRET_KEY
DB_CONFIG = Config.db_config()

APP_TIMEZONE = Config.APP_TIMEZONE
SHIFT_TOLERANCE_MINUTES = Config.SHIFT_TOLERANCE_MINUTES
CHECK_IN_GEOFENCE = Config.CHECK_IN_GEOFENCE

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Applies database/schema.sql on startup (idempotent: CREATE TABLE IF NOT EXISTS)
AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "1")
# Optional: also load leave types and demo employees
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", "0")
