from __future__ import annotations

import json
import logging
import re
import traceback
from typing import Any

_LOGGER_NAME = "alfred.agent.observability"


class LogManager:
    """Centralized structured logging for the bridge."""

    def __init__(self) -> None:
        self._logger = logging.getLogger(_LOGGER_NAME)

    def emit(
        self,
        *,
        level: str = "info",
        event: str,
        message: str | None = None,
        component: str | None = None,
        user_id: str | None = None,
        topic: str | None = None,
        intent: str | None = None,
        status: str | None = None,
        error_code: str | None = None,
        payload: dict[str, Any] | None = None,
    ) -> None:
        normalized_level = str(level or "info").lower()
        event_payload: dict[str, Any] = {
            "level": normalized_level,
            "event": str(event or "unknown_event"),
            "component": component,
            "user_id": user_id,
            "topic": topic,
            "intent": intent,
            "status": status,
            "error_code": error_code,
            "message": message,
        }
        if isinstance(payload, dict) and payload:
            event_payload.update(payload)

        self._log_text_line(level=normalized_level, payload=event_payload)

    def _log_text_line(self, *, level: str, payload: dict[str, Any]) -> None:
        line = json.dumps(payload, ensure_ascii=False, separators=(",", ":"), default=str)
        if level == "debug":
            self._logger.debug("event %s", line)
        elif level == "warning":
            self._logger.warning("event %s", line)
        elif level == "error":
            self._logger.error("event %s", line)
        else:
            self._logger.info("event %s", line)


class StructuredLoggerAdapter:
    """Drop-in logger-style adapter that writes via LogManager."""

    def __init__(self, *, manager: LogManager, component: str) -> None:
        self._manager = manager
        self._component = component

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._emit(level="debug", msg=msg, args=args, kwargs=kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._emit(level="info", msg=msg, args=args, kwargs=kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._emit(level="warning", msg=msg, args=args, kwargs=kwargs)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._emit(level="error", msg=msg, args=args, kwargs=kwargs)

    def exception(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._emit(level="error", msg=msg, args=args, kwargs=kwargs)

    def _emit(self, *, level: str, msg: str, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
        text = self._format(msg, args)
        context = self._extract_context(text=text)
        payload: dict[str, Any] = {"parsed_fields": context["parsed_fields"]}
        error_code = context["error_code"]
        exc = kwargs.get("exc_info")
        if isinstance(exc, BaseException):
            payload.update(_exception_fields(exc))
            error_code = error_code or type(exc).__name__
        self._manager.emit(
            level=level,
            event=context["event"],
            component=self._component,
            user_id=context["user_id"],
            topic=context["topic"],
            intent=context["intent"],
            status=context["status"],
            error_code=error_code,
            message=text,
            payload=payload,
        )

    @staticmethod
    def _format(msg: str, args: tuple[Any, ...]) -> str:
        if not args:
            return str(msg)
        try:
            return str(msg) % args
        except Exception:
            arg_text = ", ".join(str(v) for v in args)
            return f"{msg} | args={arg_text}"

    def _extract_context(self, *, text: str) -> dict[str, Any]:
        fields = _extract_kv_pairs(text)
        return {
            "event": str(fields.get("event") or f"{self._component}.log"),
            "user_id": _as_text_or_none(fields.get("user_id") or fields.get("user")),
            "topic": _as_text_or_none(fields.get("topic")),
            "intent": _as_text_or_none(fields.get("intent")),
            "status": _as_text_or_none(fields.get("status")),
            "error_code": _as_text_or_none(fields.get("error_code")),
            "parsed_fields": fields or None,
        }


def _exception_fields(exc: BaseException) -> dict[str, Any]:
    return {
        "exception_type": type(exc).__name__,
        "exception_message": str(exc),
        "stack_excerpt": "".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__, limit=10)
        ),
    }

_DEFAULT_MANAGER: LogManager | None = None


def get_log_manager() -> LogManager:
    global _DEFAULT_MANAGER
    if _DEFAULT_MANAGER is None:
        _DEFAULT_MANAGER = LogManager()
    return _DEFAULT_MANAGER


def get_component_logger(component: str) -> StructuredLoggerAdapter:
    return StructuredLoggerAdapter(manager=get_log_manager(), component=component)


_KEY_VALUE_PATTERN = re.compile(r"([A-Za-z_][A-Za-z0-9_.-]*)=([^\s]+)")


def _extract_kv_pairs(text: str) -> dict[str, str]:
    result: dict[str, str] = {}
    for key, raw_value in _KEY_VALUE_PATTERN.findall(str(text or "")):
        value = raw_value.strip().strip(",")
        if value.startswith(("'", '"')) and value.endswith(("'", '"')) and len(value) >= 2:
            value = value[1:-1]
        result[key] = value
    return result


def _as_text_or_none(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
