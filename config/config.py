import os


def env_flag(name: str, default: str = "0") -> bool:
    return bool(int(os.getenv(name, default)))


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY") or "hr-workflow-dev-key"

    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", "hr_workflow")

    # One IANA zone for the whole deployment; every calendar day is taken in it.
    APP_TIMEZONE = os.environ.get("APP_TIMEZONE", "Asia/Jakarta")
    SHIFT_TOLERANCE_MINUTES = int(os.environ.get("SHIFT_TOLERANCE_MINUTES", "1"))
    # Require GPS check-ins within the primary office radius.
    CHECK_IN_GEOFENCE = env_flag("CHECK_IN_GEOFENCE", "0")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    @classmethod
    def db_config(cls) -> dict:
        return {
            "host": cls.DB_HOST,
            "port": cls.DB_PORT,
            "user": cls.DB_USER,
            "password": cls.DB_PASSWORD,
            "database": cls.DB_NAME,
        }
