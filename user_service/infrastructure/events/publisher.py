# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Fire-and-forget publisher for account change events.

``publish`` only enqueues; a single daemon worker drains the queue in order and
hands each event to the transport with retries and a circuit breaker. While the
broker is unavailable the worker holds the head event and tries again once the
breaker lets calls through, so a transient outage delays events instead of
losing them. Events are dropped only when the queue is full or at shutdown.
"""

from __future__ import annotations

import queue
import threading
import time
from dataclasses import dataclass

from user_service.domain.accounts.entities import AccountChangeEvent
from user_service.domain.accounts.repositories import EventPublisher
from user_service.infrastructure.observability import EVENT_QUEUE_DEPTH, record_event
from user_service.infrastructure.resilience import (
    CircuitBreaker,
    CircuitOpenError,
    resilient_call,
)
from user_service.shared.logging import logger

from .transports import EventTransport


@dataclass(slots=True, frozen=True)
class _Envelope:
    topic: str
    event: AccountChangeEvent


class BackgroundEventPublisher(EventPublisher):
    def __init__(
        self,
        transport: EventTransport,
        *,
        max_queue_size: int = 1000,
        max_retries: int = 3,
        backoff_base: float = 0.5,
        backoff_cap: float = 8.0,
        breaker: CircuitBreaker | None = None,
        redelivery_delay: float | None = None,
        poll_interval: float = 0.5,
    ) -> None:
        self._transport = transport
        self._queue: queue.Queue[_Envelope] = queue.Queue(maxsize=max_queue_size)
        self._max_retries = max_retries
        self._backoff_base = backoff_base
        self._backoff_cap = backoff_cap
        self._breaker = breaker or CircuitBreaker(failure_threshold=5, reset_timeout=60.0)
        self._redelivery_delay = backoff_cap if redelivery_delay is None else redelivery_delay
        self._poll_interval = poll_interval
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()

    def start(self) -> None:
        with self._lock:
            if self._thread is not None and self._thread.is_alive():
                return
            self._stop.clear()
            self._thread = threading.Thread(
                target=self._run, name="account-events", daemon=True
            )
            self._thread.start()
        logger.info("events: publisher started")

    def stop(self, timeout: float = 5.0) -> None:
        with self._lock:
            thread = self._thread
            self._thread = None
        if thread is None:
            return
        self._stop.set()
        thread.join(timeout)
        if thread.is_alive():
            logger.warning("events: worker still busy after stop, transport left open")
            return
        self._transport.close()
        pending = self._queue.qsize()
        if pending:
            logger.warning(f"events: publisher stopped with {pending} undelivered events")
        else:
            logger.info("events: publisher stopped")

    def publish(self, topic: str, event: AccountChangeEvent) -> None:
        try:
            self._queue.put_nowait(_Envelope(topic=topic, event=event))
        except queue.Full:
            record_event(topic, "dropped")
            logger.warning(f"events: queue full, dropped {event.action.value} for user={event.user_id}")
            return
        EVENT_QUEUE_DEPTH.set(self._queue.qsize())
        logger.debug(f"events: queued {event.action.value} topic={topic} user={event.user_id}")

    def flush(self, timeout: float | None = None) -> bool:
        """Wait until every queued event has been delivered or given up on."""

        deadline = None if timeout is None else time.monotonic() + timeout
        with self._queue.all_tasks_done:
            while self._queue.unfinished_tasks:
                remaining = None if deadline is None else deadline - time.monotonic()
                if remaining is not None and remaining <= 0:
                    return False
                self._queue.all_tasks_done.wait(remaining)
        return True

    def _run(self) -> None:
        while not self._stop.is_set():
            try:
                envelope = self._queue.get(timeout=self._poll_interval)
            except queue.Empty:
                continue
            try:
                self._deliver(envelope)
            finally:
                self._queue.task_done()
                EVENT_QUEUE_DEPTH.set(self._queue.qsize())

    def _deliver(self, envelope: _Envelope) -> None:
        event = envelope.event
        while True:
            try:
                resilient_call(
                    self._transport.send,
                    envelope.topic,
                    event.user_id,
                    event.to_payload(),
                    breaker=self._breaker,
                    max_retries=self._max_retries,
                    backoff_base=self._backoff_base,
                    backoff_cap=self._backoff_cap,
                    sleep=self._stop.wait,
                )
            except CircuitOpenError:
                logger.debug(f"events: circuit open, holding {event.action.value} for user={event.user_id}")
            except Exception as exc:
                record_event(envelope.topic, "retrying")
                logger.warning(
                    f"events: delivery of {event.action.value} for user={event.user_id} "
                    f"topic={envelope.topic} failed: {type(exc).__name__}: {exc}"
                )
            else:
                record_event(envelope.topic, "delivered")
                return

            delay = max(self._breaker.retry_after(), self._redelivery_delay)
            if self._stop.wait(delay):
                record_event(envelope.topic, "dropped")
                logger.warning(
                    f"events: shutting down, dropped {event.action.value} for user={event.user_id}"
                )
                return


class DisabledEventPublisher(EventPublisher):
    """Accepts events and discards them; used when ``EVENTS_ENABLED`` is off."""

    def publish(self, topic: str, event: AccountChangeEvent) -> None:
        logger.debug(f"events: disabled, skipped {event.action.value} for user={event.user_id}")


__all__ = ["BackgroundEventPublisher", "DisabledEventPublisher"]
