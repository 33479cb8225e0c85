from config.config import *  # noqa: F401,F403

SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
AUTO_SEED_DB = False

TRACKING_INTERVAL_SECONDS = 1
SYNC_INTERVAL_SECONDS = 1
SUBMIT_TIMEOUT_SECONDS = 1.0
OFFLINE_QUEUE_PATH = ":memory:"
