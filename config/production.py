import os

from .config import db_config_from_env, env_flag

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = db_config_from_env()

DEBUG = False

LEAVE_STORE = os.getenv("LEAVE_STORE", "mysql")
LEAVE_STORE_PATH = os.getenv("LEAVE_STORE_PATH", "instance/leaves.json")
REGISTRY_BACKEND = os.getenv("REGISTRY_BACKEND", "mysql")
AUDIT_BACKEND = os.getenv("AUDIT_BACKEND", "mysql")
DEMO_USERS = env_flag("DEMO_USERS", "0")

ENFORCE_LEAVE_DATE_ORDER = env_flag("ENFORCE_LEAVE_DATE_ORDER", "1")
REJECT_OVERLAPPING_LEAVES = env_flag("REJECT_OVERLAPPING_LEAVES", "0")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_JSON = env_flag("LOG_JSON", "1")

AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "0")
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", "0")
