from config.config import *  # noqa: F401,F403

SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
AUTO_SEED_DB = False
SWEEP_ENABLED = False
INDEX_RETRY_DELAY_SECONDS = 0.0
