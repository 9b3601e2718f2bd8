import os

from config.config import Config, env_flag

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = Config.db_config()
DB_POOL_SIZE = Config.DB_POOL_SIZE

JWT_SECRET = os.getenv("JWT_SECRET", "dev-jwt-secret")
JWT_ALGORITHM = Config.JWT_ALGORITHM
JWT_EXPIRES_HOURS = Config.JWT_EXPIRES_HOURS

API_PREFIX = Config.API_PREFIX
DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "1")
# Optional: also seed default permissions, roles and the admin account
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", "0")

ADMIN_EMAIL = Config.ADMIN_EMAIL
ADMIN_PASSWORD = Config.ADMIN_PASSWORD
