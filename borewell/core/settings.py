# borewell/core/settings.py
import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # === General ===
    app_env: str = "local"  # local | development | production

    # === Logging ===
    log_level: str = "INFO"
    log_json: bool = True

    # === Rate tables ===
    rates_file: Optional[Path] = Field(
        None, description="YAML/JSON rate table; unset = built-in telescopic table"
    )
    profiles_file: Path = Field(
        Path("./.borewell/rate_profiles.json"), description="Named rate profiles (JSON)"
    )

    # === Invoice defaults (remembered per installation) ===
    default_casing_rate_7: float = 400.0
    default_casing_rate_10: float = 700.0
    default_bata: float = 2000.0
    default_transport_charges: float = 0.0
    default_flushing_rate: float = 0.0
    default_drilling_buffer: float = 0.0  # 0 = disabled
    enabled_drilling_buffer: float = 10.0  # used when the buffer is switched on

    invoice_number_prefix: str = "INV"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Singleton Settings instance with simple environment overrides."""
    s = Settings()

    env = os.getenv("ENVIRONMENT", s.app_env).lower()
    if env == "production":
        s.log_level = "WARNING"
    elif env == "development":
        s.log_level = "DEBUG"
        s.log_json = False

    return s
