"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ─────────────────────────────────────────────────
#
# pydantic-settings reads each field from (highest priority first):
#
#   1. Environment variables, e.g. ADMIN_PASSWORD=s3cret
#   2. The .env file in the working directory
#   3. The defaults below
#
# Field ``admin_password`` maps to env var ``ADMIN_PASSWORD`` and so on.
#
# The provider table itself is NOT an environment setting: it lives in the
# YAML file named by ``providers_config_path`` and is loaded once at startup
# by src/config/loader.py.
# ──────────────────────────────────────────────────────────────────────
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Dracin gateway settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === Admin ===
    # Empty = admin surface rejects every request.
    admin_password: str = ""

    # === Upstream providers ===
    providers_config_path: str = "config/providers.yaml"
    upstream_user_agent: str = "CTRXL-DRACIN/1.0"
    http_timeout: float = 30.0

    # === Cache ===
    cache_enabled: bool = True
    cache_max_size: int = 1000

    # === Service description (served at /) ===
    service_name: str = "CTRXL DRACIN API"
    service_version: str = "1.0.0"

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"
    log_level: str = "INFO"
