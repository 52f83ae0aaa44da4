import os

from .config import db_config_from_env, env_flag

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = db_config_from_env()

DEBUG = True

# Storage backends: memory | json | mysql (leaves), static | mysql (registry), memory | mysql (audit)
LEAVE_STORE = os.getenv("LEAVE_STORE", "json")
LEAVE_STORE_PATH = os.getenv("LEAVE_STORE_PATH", "instance/leaves.json")
REGISTRY_BACKEND = os.getenv("REGISTRY_BACKEND", "static")
AUDIT_BACKEND = os.getenv("AUDIT_BACKEND", "memory")
DEMO_USERS = env_flag("DEMO_USERS", "1")

ENFORCE_LEAVE_DATE_ORDER = env_flag("ENFORCE_LEAVE_DATE_ORDER", "1")
REJECT_OVERLAPPING_LEAVES = env_flag("REJECT_OVERLAPPING_LEAVES", "0")

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_JSON = env_flag("LOG_JSON", "0")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "0")
# Optional: also seed registry/demo data on startup
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", "0")
