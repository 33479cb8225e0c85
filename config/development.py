import os

from config.config import *  # noqa: F401,F403
from config.config import _flag

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG").upper()

# If enabled, app will apply database/schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = _flag("AUTO_INIT_DB", "1")
# Optional: also seed the demo organization/boundary on startup
AUTO_SEED_DB = _flag("AUTO_SEED_DB", "0")
