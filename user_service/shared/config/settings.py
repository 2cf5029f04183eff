# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import sys
from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_INSECURE_SECRETS = ("dev", "development", "test", "change-me", "")


def _parse_bool(value: str | bool) -> bool:
    if isinstance(value, str):
        return value.lower() in ("1", "true", "yes")
    return bool(value)


class _EnvSection(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_by_name=True,
    )


class DatabaseConfig(_EnvSection):
    url: str = Field("sqlite:///user_service.db", alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")


class TokenConfig(_EnvSection):
    secret: str = Field("dev", alias="TOKEN_SECRET")
    # Falls back to ``secret`` when unset.
    refresh_secret: str | None = Field(None, alias="REFRESH_TOKEN_SECRET")
    algorithm: str = Field("HS256", alias="TOKEN_ALGORITHM")
    access_ttl_minutes: int = Field(30, ge=1, alias="ACCESS_TOKEN_TTL")
    refresh_ttl_days: int = Field(14, ge=1, alias="REFRESH_TOKEN_TTL")
    leeway_seconds: int = Field(0, ge=0, alias="TOKEN_LEEWAY_SECONDS")

    @field_validator("algorithm", mode="after")
    @classmethod
    def _hmac_only(cls, value: str) -> str:
        if value not in ("HS256", "HS384", "HS512"):
            raise ValueError("TOKEN_ALGORITHM must be one of HS256, HS384, HS512")
        return value

    def resolved_refresh_secret(self) -> str:
        return self.refresh_secret or self.secret


class PasswordConfig(_EnvSection):
    hash_method: str = Field("scrypt", alias="PASSWORD_HASH_METHOD")
    salt_length: int = Field(16, ge=8, alias="PASSWORD_SALT_LENGTH")


class EventsConfig(_EnvSection):
    enabled: bool = Field(True, alias="EVENTS_ENABLED")
    url: str | None = Field(None, alias="EVENTS_URL")
    topic: str = Field("userinfo", alias="EVENTS_TOPIC")
    queue_size: int = Field(1000, ge=1, alias="EVENTS_QUEUE_SIZE")
    timeout: float = Field(5.0, ge=0.1, alias="EVENTS_TIMEOUT")
    max_retries: int = Field(3, ge=0, alias="EVENTS_RETRIES")
    backoff_base: float = Field(0.5, ge=0.0, alias="EVENTS_BACKOFF_BASE")
    backoff_cap: float = Field(8.0, ge=0.1, alias="EVENTS_BACKOFF_CAP")
    circuit_fail_threshold: int = Field(5, ge=1, alias="EVENTS_CIRCUIT_THRESHOLD")
    circuit_reset_timeout: float = Field(60.0, ge=1.0, alias="EVENTS_CIRCUIT_RESET")

    @field_validator("enabled", mode="before")
    @classmethod
    def _parse_enabled(cls, value: str | bool) -> bool:
        return _parse_bool(value)


class ObservabilityConfig(_EnvSection):
    metrics_enabled: bool = Field(True, alias="METRICS_ENABLED")
    service_name: str = Field("user-service", alias="SERVICE_NAME")

    @field_validator("metrics_enabled", mode="before")
    @classmethod
    def _parse_metrics(cls, value: str | bool) -> bool:
        return _parse_bool(value)


class SecurityConfig(_EnvSection):
    default_device_class: str = Field("WEB", alias="DEFAULT_DEVICE_CLASS")
    opaque_login_errors: bool = Field(False, alias="OPAQUE_LOGIN_ERRORS")

    # Rate limiting
    enable_rate_limit: bool = Field(True, alias="ENABLE_RATE_LIMIT")
    rate_limit_requests: int = Field(10, alias="RL_LIMIT")
    rate_limit_window: float = Field(60.0, alias="RL_WINDOW")

    @field_validator("opaque_login_errors", "enable_rate_limit", mode="before")
    @classmethod
    def _parse_flags(cls, value: str | bool) -> bool:
        return _parse_bool(value)


def _database_config_factory() -> DatabaseConfig:
    return DatabaseConfig()  # type: ignore[call-arg]


def _token_config_factory() -> TokenConfig:
    return TokenConfig()  # type: ignore[call-arg]


def _password_config_factory() -> PasswordConfig:
    return PasswordConfig()  # type: ignore[call-arg]


def _events_config_factory() -> EventsConfig:
    return EventsConfig()  # type: ignore[call-arg]


def _observability_config_factory() -> ObservabilityConfig:
    return ObservabilityConfig()  # type: ignore[call-arg]


def _security_config_factory() -> SecurityConfig:
    return SecurityConfig()  # type: ignore[call-arg]


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")

    database: DatabaseConfig = Field(default_factory=_database_config_factory)
    tokens: TokenConfig = Field(default_factory=_token_config_factory)
    passwords: PasswordConfig = Field(default_factory=_password_config_factory)
    events: EventsConfig = Field(default_factory=_events_config_factory)
    observability: ObservabilityConfig = Field(default_factory=_observability_config_factory)
    security: SecurityConfig = Field(default_factory=_security_config_factory)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_assignment=True,
    )

    @field_validator("debug_logging", mode="before")
    @classmethod
    def _parse_debug_logging(cls, value: str | bool) -> bool:
        return _parse_bool(value)

    @model_validator(mode="after")
    def _validate_production_settings(self) -> "AppConfig":
        if not self.is_production():
            return self

        if self.tokens.secret in _INSECURE_SECRETS:
            print(
                "\n❌ CRITICAL SECURITY ERROR: Insecure TOKEN_SECRET detected in production!\n"
                "   TOKEN_SECRET must be a strong random value in production.\n"
                "   Generate one with: python -c \"import secrets; print(secrets.token_urlsafe(32))\"\n",
                file=sys.stderr,
            )
            sys.exit(1)

        warnings = []
        if self.tokens.refresh_secret is None:
            warnings.append("⚠️  Refresh tokens share the access token secret")
        if not self.security.opaque_login_errors:
            warnings.append("⚠️  Login errors reveal whether a user id exists")
        if self.events.enabled and not self.events.url:
            warnings.append("⚠️  EVENTS_URL is unset, account events are only logged")

        if warnings:
            print("\n⚠️  PRODUCTION SECURITY WARNINGS:", file=sys.stderr)
            for warning in warnings:
                print(f"   {warning}", file=sys.stderr)

        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()


__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "EventsConfig",
    "ObservabilityConfig",
    "PasswordConfig",
    "SecurityConfig",
    "TokenConfig",
    "load_config",
]
