# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Delivery backends for account change events."""

from __future__ import annotations

from typing import Any, Protocol

import httpx

from user_service.shared.logging import logger

KAFKA_JSON_CONTENT_TYPE = "application/vnd.kafka.json.v2+json"


class EventTransport(Protocol):
    def send(self, topic: str, key: str, payload: dict[str, Any]) -> None: ...

    def close(self) -> None: ...


class HttpEventTransport(EventTransport):
    """Posts records to a Kafka REST proxy style endpoint (``/topics/{topic}``)."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 5.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._client = client or httpx.Client(base_url=base_url.rstrip("/"), timeout=timeout)

    def send(self, topic: str, key: str, payload: dict[str, Any]) -> None:
        response = self._client.post(
            f"/topics/{topic}",
            json={"records": [{"key": key, "value": payload}]},
            headers={"Content-Type": KAFKA_JSON_CONTENT_TYPE},
        )
        response.raise_for_status()
        logger.debug(f"events.http: delivered topic={topic} key={key} status={response.status_code}")

    def close(self) -> None:
        self._client.close()


class LoggingEventTransport(EventTransport):
    """Writes events to the log; used when no broker endpoint is configured."""

    def send(self, topic: str, key: str, payload: dict[str, Any]) -> None:
        logger.info(f"events.log: topic={topic} key={key} action={payload.get('action')}")

    def close(self) -> None:
        return None


__all__ = [
    "EventTransport",
    "HttpEventTransport",
    "KAFKA_JSON_CONTENT_TYPE",
    "LoggingEventTransport",
]
