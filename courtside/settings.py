"""
Django settings for courtside.

The standings apps keep no data; settings are kept to what Django needs
to load the apps and run management commands.
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get("COURTSIDE_SECRET_KEY", "courtside-dev-key")

DEBUG = os.environ.get("COURTSIDE_DEBUG", "") == "1"

ALLOWED_HOSTS = []

INSTALLED_APPS = [
    "courtside.standings_core",
    "courtside.standings",
]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

USE_TZ = True

# Standings
STANDINGS_TIEBREAKERS = ["wins", "head_to_head", "point_differential", "points_scored"]
STANDINGS_ADVANCEMENT_RULE = "top_2"
STANDINGS_ADVANCEMENT_COUNT = None

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "%(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "simple"},
    },
    "loggers": {
        "courtside": {
            "handlers": ["console"],
            "level": os.environ.get("COURTSIDE_LOG_LEVEL", "INFO"),
        },
    },
}
