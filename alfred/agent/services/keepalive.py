from __future__ import annotations

import threading

import requests

from alfred.agent.observability.log_manager import get_component_logger

logger = get_component_logger("services.keepalive")


class KeepAlivePinger:
    """Periodically GETs a URL so an idling host does not put the service to sleep."""

    def __init__(
        self,
        url: str,
        interval_sec: float,
        *,
        session: requests.Session | None = None,
        timeout_sec: float = 10.0,
    ) -> None:
        self._url = url
        self._interval_sec = max(1.0, float(interval_sec))
        self._timeout_sec = timeout_sec
        self._session = session or requests.Session()
        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()

    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()
        logger.info("KeepAlivePinger started url=%s interval=%.0fs", self._url, self._interval_sec)

    def stop(self) -> None:
        self._stop_event.set()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5)
        logger.info("KeepAlivePinger stopped")

    def ping(self) -> bool:
        try:
            response = self._session.get(self._url, timeout=self._timeout_sec)
        except requests.RequestException as exc:
            logger.warning("keepalive ping failed url=%s error=%s", self._url, exc)
            return False
        if response.status_code >= 400:
            logger.warning("keepalive ping rejected url=%s status=%s", self._url, response.status_code)
            return False
        logger.debug("keepalive ping ok url=%s status=%s", self._url, response.status_code)
        return True

    def _run(self) -> None:
        while not self._stop_event.wait(timeout=self._interval_sec):
            self.ping()
