# Initializes config package (imports Settings instance)

from .config import API_URLS, Settings, get_env, settings

__all__ = ["API_URLS", "Settings", "settings", "get_env"]
