"""
Centralised config for the metrics client.

This module loads API, retry and logging settings from environment variables
(and an optional ``.env`` file) and exposes them through a typed, validated
singleton `settings` object.
"""

import os
from pathlib import Path
from typing import Any, Callable, Dict, Optional, TypeVar

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

CONFIG_FILE = Path(__file__).resolve()


def _discover_project_root(config_file: Path) -> tuple[Path, Path]:
    """Return a project root and env file path without assuming ``.env`` exists.

    Walks the parents looking for a ``.env`` file and falls back to the
    repository root (detected via common project markers) when it is missing.
    """

    parents = list(config_file.parents)

    for parent in parents:
        env_file = parent / ".env"
        if env_file.exists():
            return parent, env_file

    for marker in ("pyproject.toml", ".git"):
        for parent in parents:
            if (parent / marker).exists():
                return parent, parent / ".env"

    fallback_root = parents[1] if len(parents) > 1 else parents[0]
    return fallback_root, fallback_root / ".env"


PROJECT_ROOT, ENV_FILE_PATH = _discover_project_root(CONFIG_FILE)

API_URLS: Dict[str, str] = {
    "production": "https://huginn.health",
    "staging": "https://staging.huginn.health",
    "development": "https://dev.huginn.health:3000",
}


T = TypeVar("T")


class Settings(BaseSettings):
    """
    Centralised and validated application settings.
    """
    model_config = SettingsConfigDict(
        env_file=ENV_FILE_PATH, env_file_encoding="utf-8", extra="ignore", case_sensitive=False
    )

    # --- CORE APP SETTINGS ---
    ENVIRONMENT: str = "production"

    # --- HUGINN API ---
    HUGINN_API_BASE_URL: Optional[str] = None
    HUGINN_AUTH_TOKEN: Optional[SecretStr] = None
    HUGINN_TIMEOUT: float = 10.0
    HUGINN_MAX_RETRIES: int = 3
    HUGINN_BACKOFF_BASE: float = 0.5
    HUGINN_DEBUG_API: bool = False

    # --- LOGGING ---
    HUGINN_LOG_LEVEL: str = "INFO"
    HUGINN_LOG_TO_CONSOLE: bool = True
    HUGINN_LOG_DIR: Optional[Path] = None

    @field_validator("ENVIRONMENT")
    @classmethod
    def _known_environment(cls, value: str) -> str:
        normalized = (value or "").strip().lower()
        if normalized not in API_URLS:
            raise ValueError(
                f"ENVIRONMENT must be one of {sorted(API_URLS)}, got '{value}'"
            )
        return normalized

    @property
    def api_base_url(self) -> str:
        """Base URL for the remote API, honouring an explicit override."""
        if self.HUGINN_API_BASE_URL:
            return self.HUGINN_API_BASE_URL.rstrip("/")
        return API_URLS[self.ENVIRONMENT]

    # --- DYNAMIC FILE PATHS ---
    @property
    def log_path(self) -> Path:
        """
        Path for the main application log file.

        Uses ``HUGINN_LOG_DIR`` when it is writable and otherwise falls back to
        a directory under the user's home. Never raises.
        """
        candidate = self.HUGINN_LOG_DIR
        if candidate is not None:
            try:
                candidate.mkdir(parents=True, exist_ok=True)
                if os.access(candidate, os.W_OK):
                    return candidate / "huginn_history.log"
            except OSError as exc:
                print(f"[huginn] Falling back to home log directory due to: {exc}")

        fallback_dir = Path.home() / "huginn_logs"
        try:
            fallback_dir.mkdir(parents=True, exist_ok=True)
        except OSError:
            pass
        return fallback_dir / "huginn_history.log"


# Create a single, importable instance of the settings for the entire application.
settings = Settings()


def _coerce_secret(value: Any) -> Any:
    if isinstance(value, SecretStr):
        return value.get_secret_value()
    return value


def _to_bool(raw: str) -> bool:
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _coerce_type(raw: str, template: Any) -> Any:
    if isinstance(template, bool):
        return _to_bool(raw)
    if isinstance(template, int) and not isinstance(template, bool):
        return int(raw)
    if isinstance(template, float):
        return float(raw)
    if isinstance(template, Path):
        return Path(raw)
    return raw


def get_env(
    name: str,
    default: T | None = None,
    *,
    parser: Callable[[str], T] | None = None,
) -> T | Any | None:
    """Return a configuration value resolving environment overrides consistently.

    The resolution order is:

    1. Explicit environment variable overrides at runtime.
    2. Typed values provided by the Pydantic ``settings`` object.
    3. The supplied ``default`` value.

    When an override is read directly from :mod:`os.environ`, ``parser`` (or the
    inferred type from ``settings``) is used to coerce the string into the
    expected type.
    """

    if name in os.environ:
        raw_value = os.environ[name]
        if parser is not None:
            return parser(raw_value)
        if hasattr(settings, name):
            template = _coerce_secret(getattr(settings, name))
            try:
                return _coerce_type(raw_value, template)
            except (TypeError, ValueError):
                return template
        return raw_value

    if hasattr(settings, name):
        value = _coerce_secret(getattr(settings, name))
        return default if value is None else value

    return default
