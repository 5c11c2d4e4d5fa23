from .config import Config

SECRET_KEY = "test-secret"
DB_CONFIG = {**Config.db_config(), "database": "hr_workflow_test"}

APP_TIMEZONE = "Asia/Jakarta"
SHIFT_TOLERANCE_MINUTES = 1
CHECK_IN_GEOFENCE = False

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
AUTO_SEED_DB = False
