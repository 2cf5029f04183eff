# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Identity context injected by the API gateway.

The gateway authenticates callers and forwards the result as trusted headers.
The context is built once per request and handed to the operations that need
it; nothing reads request state implicitly.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from user_service.domain.accounts.exceptions import MissingContextError
from user_service.shared.result import Err, Ok, Result

USER_ID_HEADER = "X-Auth-UserId"
CLIENT_DEVICE_HEADER = "X-Client-Device"
CLIENT_ADDRESS_HEADER = "X-Client-Address"


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(slots=True, frozen=True)
class GatewayContext:
    user_id: str | None = None
    client_device: str | None = None
    client_address: str | None = None

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> GatewayContext:
        return cls(
            user_id=_clean(headers.get(USER_ID_HEADER)),
            client_device=_clean(headers.get(CLIENT_DEVICE_HEADER)),
            client_address=_clean(headers.get(CLIENT_ADDRESS_HEADER)),
        )

    def require_user_id(self) -> Result[str]:
        return _require(self.user_id, USER_ID_HEADER)

    def require_client_device(self) -> Result[str]:
        return _require(self.client_device, CLIENT_DEVICE_HEADER)

    def require_client_address(self) -> Result[str]:
        return _require(self.client_address, CLIENT_ADDRESS_HEADER)


def _require(value: str | None, header: str) -> Result[str]:
    if value is None:
        return Err(MissingContextError(header))
    return Ok(value)


__all__ = [
    "CLIENT_ADDRESS_HEADER",
    "CLIENT_DEVICE_HEADER",
    "USER_ID_HEADER",
    "GatewayContext",
]
