"""API configuration adapter.

Bridges the centralized authgate_config settings with the API layer.
"""

from authgate_config.settings import Settings, get_settings


def get_api_settings() -> Settings:
    """Get settings from centralized configuration.

    Kept as a separate dependency so tests can override it.
    """
    return get_settings()
