import os

_ENV_MODULES = {
    "prod": "config.production",
    "production": "config.production",
    "test": "config.testing",
    "testing": "config.testing",
}


def get_settings_module() -> str:
    """Settings module for ``APP_ENV``; unknown or unset means development."""
    return _ENV_MODULES.get(os.getenv("APP_ENV", "development").strip().lower(), "config.development")
