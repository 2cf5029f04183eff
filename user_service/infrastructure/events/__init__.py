# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .publisher import BackgroundEventPublisher, DisabledEventPublisher
from .transports import EventTransport, HttpEventTransport, LoggingEventTransport

__all__ = [
    "BackgroundEventPublisher",
    "DisabledEventPublisher",
    "EventTransport",
    "HttpEventTransport",
    "LoggingEventTransport",
]
