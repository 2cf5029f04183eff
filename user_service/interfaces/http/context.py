# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import request

from user_service.domain.accounts.context import GatewayContext


def gateway_context_from_request() -> GatewayContext:
    return GatewayContext.from_headers(request.headers)


__all__ = ["gateway_context_from_request"]
