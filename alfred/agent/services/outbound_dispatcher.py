"""Queued delivery of chat replies.

Replies produced on the webhook path or on the broker network thread are
enqueued here and sent by one worker thread, so neither caller waits on the
Send API.
"""

from __future__ import annotations

import queue
import threading
from dataclasses import dataclass
from typing import Sequence

from alfred.agent.io.adapters import ReplySink
from alfred.agent.io.contracts import QuickReply, SenderAction
from alfred.agent.observability.log_manager import get_component_logger
from alfred.integrations.messenger.send_api import MessengerSendError

logger = get_component_logger("services.outbound_dispatcher")


@dataclass(frozen=True)
class OutboundJob:
    recipient_id: str
    text: str | None = None
    quick_replies: tuple[QuickReply, ...] = ()
    action: SenderAction | None = None


class OutboundDispatcher:
    def __init__(self, sink: ReplySink, *, max_queue: int = 1000) -> None:
        self._sink = sink
        self._queue: queue.Queue[OutboundJob | None] = queue.Queue(maxsize=max_queue)
        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()

    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()
        logger.info("OutboundDispatcher started")

    def stop(self, timeout: float = 5.0) -> None:
        self._stop_event.set()
        if self._thread and self._thread.is_alive():
            try:
                self._queue.put_nowait(None)
            except queue.Full:
                logger.warning("outbound queue full on stop pending=%s", self._queue.qsize())
            self._thread.join(timeout=timeout)
        logger.info("OutboundDispatcher stopped")

    def send_text(
        self,
        recipient_id: str,
        text: str,
        quick_replies: Sequence[QuickReply] | None = None,
    ) -> None:
        self._enqueue(
            OutboundJob(
                recipient_id=recipient_id,
                text=text,
                quick_replies=tuple(quick_replies or ()),
            )
        )

    def send_sender_action(self, recipient_id: str, action: SenderAction) -> None:
        self._enqueue(OutboundJob(recipient_id=recipient_id, action=action))

    def join(self) -> None:
        """Block until every queued job has been attempted."""
        self._queue.join()

    def _enqueue(self, job: OutboundJob) -> None:
        try:
            self._queue.put_nowait(job)
        except queue.Full:
            logger.error("outbound queue full user_id=%s dropped", job.recipient_id)

    def _run(self) -> None:
        while not self._stop_event.is_set():
            job = self._queue.get()
            try:
                if job is None:
                    continue
                self.deliver(job)
            finally:
                self._queue.task_done()

    def deliver(self, job: OutboundJob) -> None:
        try:
            if job.action is not None:
                self._sink.send_sender_action(job.recipient_id, job.action)
            elif job.text is not None:
                self._sink.send_text(job.recipient_id, job.text, list(job.quick_replies) or None)
        except MessengerSendError as exc:
            logger.error(
                "outbound send failed user_id=%s status=%s error=%s",
                job.recipient_id,
                exc.status_code,
                exc,
            )
        except Exception as exc:
            logger.exception("outbound send crashed user_id=%s", job.recipient_id, exc_info=exc)
