import os

from config.config import *  # noqa: F401,F403

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DEBUG = False
SWEEP_ENABLED = bool(int(os.getenv("SWEEP_ENABLED", "1")))
