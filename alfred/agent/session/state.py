"""Process-wide conversation state shared by the webhook and the broker.

The bridge serves a single operator: there is exactly one pending-request
slot and one "awaiting a value" flag for the whole process. A new query
overwrites the slot even when another user is still waiting, and the flag is
consumed by whichever user sends the next text message.

Every access goes through one re-entrant lock because webhook requests and
MQTT deliveries arrive on different threads.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from alfred.agent.observability.log_manager import get_component_logger

logger = get_component_logger("session.state")


class RequestKind(str, Enum):
    TEMPERATURE_QUERY = "temperature_query"
    LED_STATUS_QUERY = "led_status_query"


@dataclass(frozen=True)
class PendingRequest:
    user: str
    kind: RequestKind


class SessionState:
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._pending: PendingRequest | None = None
        self._awaiting_value = False

    @contextmanager
    def transaction(self) -> Iterator["SessionState"]:
        with self._lock:
            yield self

    def begin_pending(self, user: str, kind: RequestKind) -> None:
        with self._lock:
            previous = self._pending
            self._pending = PendingRequest(user=str(user), kind=kind)
        if previous is not None and previous.user != str(user):
            logger.info(
                "pending request replaced previous_user=%s user=%s kind=%s",
                previous.user,
                user,
                kind.value,
            )

    def resolve_pending(self, kind: RequestKind) -> str | None:
        with self._lock:
            current = self._pending
            if current is None or current.kind != kind:
                return None
            self._pending = None
            return current.user

    def peek_pending(self) -> PendingRequest | None:
        with self._lock:
            return self._pending

    def is_awaiting_value(self) -> bool:
        with self._lock:
            return self._awaiting_value

    def set_awaiting_value(self, awaiting: bool) -> None:
        with self._lock:
            self._awaiting_value = bool(awaiting)
