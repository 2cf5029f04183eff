from __future__ import annotations

from user_service.domain.accounts.context import (
    CLIENT_ADDRESS_HEADER,
    CLIENT_DEVICE_HEADER,
    USER_ID_HEADER,
    GatewayContext,
)
from user_service.domain.accounts.exceptions import MissingContextError


def test_context_reads_gateway_headers() -> None:
    context = GatewayContext.from_headers(
        {
            USER_ID_HEADER: "alice",
            CLIENT_DEVICE_HEADER: "APP",
            CLIENT_ADDRESS_HEADER: "10.0.0.7",
        }
    )

    assert context.require_user_id().unwrap() == "alice"
    assert context.require_client_device().unwrap() == "APP"
    assert context.require_client_address().unwrap() == "10.0.0.7"


def test_missing_header_is_missing_context() -> None:
    context = GatewayContext.from_headers({})

    result = context.require_user_id()

    assert not result.ok
    assert isinstance(result.error, MissingContextError)
    assert result.error.code == "missing_context"
    assert result.error.context == {"header": USER_ID_HEADER}


def test_blank_header_counts_as_missing() -> None:
    context = GatewayContext.from_headers({CLIENT_DEVICE_HEADER: "   "})

    assert context.client_device is None
    result = context.require_client_device()
    assert isinstance(result.error, MissingContextError)
    assert result.error.context == {"header": CLIENT_DEVICE_HEADER}


def test_header_values_are_trimmed() -> None:
    context = GatewayContext.from_headers({CLIENT_ADDRESS_HEADER: " 192.168.1.2 "})

    assert context.client_address == "192.168.1.2"
