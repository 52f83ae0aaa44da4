from .config import db_config_from_env

SECRET_KEY = "test-secret"

DB_CONFIG = db_config_from_env()

DEBUG = False
TESTING = True

LEAVE_STORE = "memory"
REGISTRY_BACKEND = "static"
AUDIT_BACKEND = "memory"
DEMO_USERS = True

ENFORCE_LEAVE_DATE_ORDER = True
REJECT_OVERLAPPING_LEAVES = False

LOG_LEVEL = "WARNING"
LOG_JSON = False

AUTO_INIT_DB = False
AUTO_SEED_DB = False
