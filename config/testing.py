from config.config import Config

SECRET_KEY = "test-secret"

DB_CONFIG = Config.db_config()
DB_POOL_SIZE = 1

JWT_SECRET = "test-jwt-secret"
JWT_ALGORITHM = "HS256"
JWT_EXPIRES_HOURS = 24

API_PREFIX = "/api"
DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
AUTO_SEED_DB = False

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "Admin123"
