import logging
from functools import lru_cache
from typing import Annotated, Optional, Tuple

from pydantic import Field, SecretStr, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4.1-mini"
DEFAULT_EXPIRY_DATE = "2026-04-30"
API_STYLES = ("chat", "responses")


class Settings(BaseSettings):
    """Process-wide configuration, read once at startup and never mutated."""

    # 从 .env 和进程环境变量加载，字段名即环境变量名（不区分大小写）
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
    )

    openai_api_key: Optional[SecretStr] = None
    openai_api_base_url: str = DEFAULT_API_BASE_URL
    openai_api_style: str = "chat"
    openai_model: str = DEFAULT_MODEL
    openai_max_tokens: int = 1200
    openai_temperature: float = 0.8

    expiry_date: str = DEFAULT_EXPIRY_DATE
    sign_off_html: Optional[str] = None

    cors_allow_origins: Annotated[Tuple[str, ...], NoDecode] = Field(default=("*",))
    log_level: str = "INFO"
    monitor_log_file: Optional[str] = None
    host: str = "0.0.0.0"
    port: int = 8000

    @field_validator("openai_api_key", "sign_off_html", "monitor_log_file", mode="before")
    @classmethod
    def blank_is_unset(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("openai_api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("openai_api_style", mode="before")
    @classmethod
    def known_api_style(cls, v):
        style = str(v).strip().lower()
        if style not in API_STYLES:
            logger.warning(f"Unknown OPENAI_API_STYLE {v!r}, falling back to 'chat'")
            return "chat"
        return style

    @field_validator("openai_max_tokens", "port", mode="before")
    @classmethod
    def int_or_default(cls, v, info: ValidationInfo):
        default = cls.model_fields[info.field_name].default
        try:
            return int(v)
        except (TypeError, ValueError):
            logger.warning(f"{info.field_name.upper()}={v!r} is not an integer, using {default}")
            return default

    @field_validator("openai_temperature", mode="before")
    @classmethod
    def float_or_default(cls, v, info: ValidationInfo):
        default = cls.model_fields[info.field_name].default
        try:
            return float(v)
        except (TypeError, ValueError):
            logger.warning(f"{info.field_name.upper()}={v!r} is not a number, using {default}")
            return default

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def split_origins(cls, v):
        if isinstance(v, str):
            v = [origin.strip() for origin in v.split(",") if origin.strip()]
        return tuple(v) or ("*",)

    @field_validator("log_level")
    @classmethod
    def upper_log_level(cls, v: str) -> str:
        return v.upper()


@lru_cache()
def get_settings() -> Settings:
    return Settings()
