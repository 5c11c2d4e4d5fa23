import os

from .config import Config, env_flag

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")
DB_CONFIG = Config.db_config()

APP_TIMEZONE = Config.APP_TIMEZONE
SHIFT_TOLERANCE_MINUTES = Config.SHIFT_TOLERANCE_MINUTES
CHECK_IN_GEOFENCE = Config.CHECK_IN_GEOFENCE

DEBUG = False
LOG_LEVEL = Config.LOG_LEVEL

AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "0")
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", "0")
