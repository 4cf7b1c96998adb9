# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import sys
from datetime import timedelta
from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

_SECTION_CONFIG = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    extra="ignore",
    validate_by_name=True,
)


class DatabaseConfig(BaseSettings):
    url: str = Field("sqlite:///tasktracker.db", alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")

    model_config = _SECTION_CONFIG

    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")


class SecurityConfig(BaseSettings):
    # Cookie security
    cookie_secure: bool = Field(False, alias="COOKIE_SECURE")
    cookie_samesite: str = Field("Strict", alias="COOKIE_SAMESITE")

    # CORS
    allowed_origins: Annotated[list[str], NoDecode] = Field(
        ["http://localhost:3000"], alias="ALLOWED_ORIGINS"
    )

    # Rate limiting
    enable_rate_limit: bool = Field(True, alias="ENABLE_RATE_LIMIT")
    rate_limit_requests: int = Field(10, alias="RL_LIMIT")
    rate_limit_window: float = Field(60.0, alias="RL_WINDOW")

    # Reverse proxies in front of the app; X-Forwarded-For is ignored when 0
    trusted_proxy_count: int = Field(0, ge=0, alias="TRUSTED_PROXY_COUNT")

    # HSTS
    enable_hsts: bool = Field(False, alias="ENABLE_HSTS")

    model_config = _SECTION_CONFIG

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _parse_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("cookie_secure", "enable_rate_limit", "enable_hsts", mode="before")
    @classmethod
    def _parse_bool(cls, value: str | bool) -> bool:
        if isinstance(value, str):
            return value.lower() in ("1", "true", "yes")
        return bool(value)


class SessionConfig(BaseSettings):
    cookie_name: str = Field("jwt", alias="SESSION_COOKIE_NAME")
    lifetime_seconds: int = Field(60 * 60 * 24, ge=60, alias="SESSION_LIFETIME")
    salt: str = Field("tasktracker.session.v1", alias="SESSION_SALT")

    model_config = _SECTION_CONFIG

    @property
    def lifetime(self) -> timedelta:
        return timedelta(seconds=self.lifetime_seconds)


class ResetConfig(BaseSettings):
    lifetime_seconds: int = Field(10 * 60, ge=60, alias="RESET_TOKEN_LIFETIME")
    frontend_base: str = Field("http://localhost:3000", alias="CLIENT_URL")

    model_config = _SECTION_CONFIG

    @property
    def lifetime(self) -> timedelta:
        return timedelta(seconds=self.lifetime_seconds)


class MailConfig(BaseSettings):
    host: str = Field("localhost", alias="EMAIL_HOST")
    port: int = Field(587, ge=1, le=65535, alias="EMAIL_PORT")
    username: str | None = Field(None, alias="EMAIL_USERNAME")
    password: str | None = Field(None, alias="EMAIL_PASSWORD")
    from_name: str = Field("TaskTracker", alias="EMAIL_FROM_NAME")
    from_address: str = Field("noreply@tasktracker.com", alias="EMAIL_FROM_ADDRESS")
    use_tls: bool = Field(True, alias="EMAIL_USE_TLS")
    timeout: float = Field(10.0, ge=0.1, alias="EMAIL_TIMEOUT")

    model_config = _SECTION_CONFIG

    @property
    def sender(self) -> str:
        return f"{self.from_name} <{self.from_address}>"


def _database_config_factory() -> DatabaseConfig:
    return DatabaseConfig()  # type: ignore[call-arg]


def _security_config_factory() -> SecurityConfig:
    return SecurityConfig()  # type: ignore[call-arg]


def _session_config_factory() -> SessionConfig:
    return SessionConfig()  # type: ignore[call-arg]


def _reset_config_factory() -> ResetConfig:
    return ResetConfig()  # type: ignore[call-arg]


def _mail_config_factory() -> MailConfig:
    return MailConfig()  # type: ignore[call-arg]


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    secret_key: str = Field("dev", alias="SECRET_KEY")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_file: str = Field("instance/tasktracker.log", alias="LOG_FILE")

    database: DatabaseConfig = Field(default_factory=_database_config_factory)
    security: SecurityConfig = Field(default_factory=_security_config_factory)
    session: SessionConfig = Field(default_factory=_session_config_factory)
    reset: ResetConfig = Field(default_factory=_reset_config_factory)
    mail: MailConfig = Field(default_factory=_mail_config_factory)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_assignment=True,
        validate_by_name=True,
    )

    @field_validator("debug_logging", mode="before")
    @classmethod
    def _parse_debug_logging(cls, value: str | bool) -> bool:
        if isinstance(value, str):
            return value.lower() in ("1", "true", "yes")
        return bool(value)

    @model_validator(mode="after")
    def _validate_production_settings(self) -> "AppConfig":
        if not self.is_production():
            return self

        if self.secret_key in ("dev", "development", "test", "") or len(self.secret_key) < 32:
            print(
                "\n❌ CRITICAL SECURITY ERROR: Insecure SECRET_KEY detected in production!\n"
                "   SECRET_KEY signs every session token and must be a long random value.\n"
                "   Generate one with: python -c \"import secrets; print(secrets.token_hex(64))\"\n",
                file=sys.stderr,
            )
            sys.exit(1)

        warnings = []
        if "*" in self.security.allowed_origins:
            warnings.append("⚠️  CORS allows wildcard (*) origins")
        if not self.security.enable_hsts:
            warnings.append("⚠️  HSTS is DISABLED (recommended for HTTPS)")
        if not self.mail.username:
            warnings.append("⚠️  EMAIL_USERNAME is not set, password reset mails may be rejected")

        if warnings:
            print("\n⚠️  PRODUCTION SECURITY WARNINGS:", file=sys.stderr)
            for warning in warnings:
                print(f"   {warning}", file=sys.stderr)
            print(
                "   Consider enabling these security features in production.\n",
                file=sys.stderr,
            )

        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")

    def cookie_secure(self) -> bool:
        return self.security.cookie_secure or self.is_production()


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()  # type: ignore[call-arg]


__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "MailConfig",
    "ResetConfig",
    "SecurityConfig",
    "SessionConfig",
    "load_config",
]
