# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import timedelta
from functools import cached_property

from user_service.application.services.password_hashing import WerkzeugPasswordHasher
from user_service.application.services.token_codec import JoseTokenCodec
from user_service.application.use_cases.accounts import (
    GetProfileUseCase,
    LoginUseCase,
    RefreshAccessTokenUseCase,
    RegisterAccountUseCase,
    RevokeRefreshTokenUseCase,
)
from user_service.domain.accounts.repositories import EventPublisher
from user_service.infrastructure.db import SessionLocal
from user_service.infrastructure.events import (
    BackgroundEventPublisher,
    DisabledEventPublisher,
    EventTransport,
    HttpEventTransport,
    LoggingEventTransport,
)
from user_service.infrastructure.repositories.accounts import (
    SqlAlchemyAccountRepository,
    SqlAlchemyRevokedTokenRepository,
)
from user_service.infrastructure.resilience import CircuitBreaker
from user_service.interfaces.http.controllers.auth_controller import AuthController
from user_service.interfaces.http.controllers.probe_controller import ProbeController
from user_service.interfaces.http.controllers.profile_controller import ProfileController
from user_service.shared.config import AppConfig, load_config


class Container:
    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config or load_config()

    @cached_property
    def password_hasher(self) -> WerkzeugPasswordHasher:
        return WerkzeugPasswordHasher(
            method=self.config.passwords.hash_method,
            salt_length=self.config.passwords.salt_length,
        )

    @cached_property
    def token_codec(self) -> JoseTokenCodec:
        tokens = self.config.tokens
        return JoseTokenCodec(
            secret=tokens.secret,
            refresh_secret=tokens.resolved_refresh_secret(),
            algorithm=tokens.algorithm,
            access_ttl=timedelta(minutes=tokens.access_ttl_minutes),
            refresh_ttl=timedelta(days=tokens.refresh_ttl_days),
            leeway=timedelta(seconds=tokens.leeway_seconds),
        )

    @cached_property
    def account_repository(self) -> SqlAlchemyAccountRepository:
        return SqlAlchemyAccountRepository(SessionLocal)

    @cached_property
    def revoked_token_repository(self) -> SqlAlchemyRevokedTokenRepository:
        return SqlAlchemyRevokedTokenRepository(SessionLocal)

    # Events

    @cached_property
    def event_transport(self) -> EventTransport:
        events = self.config.events
        if events.enabled and events.url:
            return HttpEventTransport(events.url, timeout=events.timeout)
        return LoggingEventTransport()

    @cached_property
    def background_event_publisher(self) -> BackgroundEventPublisher:
        events = self.config.events
        return BackgroundEventPublisher(
            self.event_transport,
            max_queue_size=events.queue_size,
            max_retries=events.max_retries,
            backoff_base=events.backoff_base,
            backoff_cap=events.backoff_cap,
            breaker=CircuitBreaker(
                failure_threshold=events.circuit_fail_threshold,
                reset_timeout=events.circuit_reset_timeout,
            ),
        )

    @cached_property
    def event_publisher(self) -> EventPublisher:
        if not self.config.events.enabled:
            return DisabledEventPublisher()
        return self.background_event_publisher

    # Use cases

    @cached_property
    def register_account_use_case(self) -> RegisterAccountUseCase:
        return RegisterAccountUseCase(
            accounts=self.account_repository,
            password_hasher=self.password_hasher,
            events=self.event_publisher,
            topic=self.config.events.topic,
        )

    @cached_property
    def login_use_case(self) -> LoginUseCase:
        return LoginUseCase(
            accounts=self.account_repository,
            password_hasher=self.password_hasher,
            tokens=self.token_codec,
        )

    @cached_property
    def refresh_access_token_use_case(self) -> RefreshAccessTokenUseCase:
        return RefreshAccessTokenUseCase(
            accounts=self.account_repository,
            tokens=self.token_codec,
            revoked=self.revoked_token_repository,
        )

    @cached_property
    def revoke_refresh_token_use_case(self) -> RevokeRefreshTokenUseCase:
        return RevokeRefreshTokenUseCase(
            tokens=self.token_codec,
            revoked=self.revoked_token_repository,
        )

    @cached_property
    def get_profile_use_case(self) -> GetProfileUseCase:
        return GetProfileUseCase(accounts=self.account_repository)

    # Controllers

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            register_use_case=self.register_account_use_case,
            login_use_case=self.login_use_case,
            refresh_use_case=self.refresh_access_token_use_case,
            revoke_use_case=self.revoke_refresh_token_use_case,
            default_device_class=self.config.security.default_device_class,
            opaque_login_errors=self.config.security.opaque_login_errors,
        )

    @cached_property
    def profile_controller(self) -> ProfileController:
        return ProfileController(get_profile_use_case=self.get_profile_use_case)

    @cached_property
    def probe_controller(self) -> ProbeController:
        return ProbeController()
