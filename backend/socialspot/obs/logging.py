"""JSON log formatting with request context and location redaction."""

from __future__ import annotations

import json
import logging
import random
import re
from contextvars import ContextVar, Token
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from socialspot.settings import settings

_LOGGER_NAME = "socialspot"

# Payload field name -> context variable bound by the request middleware.
_CONTEXT: Dict[str, ContextVar[Optional[str]]] = {
	"request_id": ContextVar("obs_request_id", default=None),
	"route": ContextVar("obs_route", default=None),
	"screen": ContextVar("obs_screen", default=None),
	"ip": ContextVar("obs_client_ip", default=None),
}

# Matched against whole ``_``-separated key parts, so ``latency_ms`` survives
# while ``center_lat`` does not. Search centres never reach the stream raw.
_REDACTED_PARTS = frozenset(
	{
		"authorization",
		"center",
		"coordinates",
		"lat",
		"latitude",
		"lon",
		"lng",
		"longitude",
		"password",
		"secret",
		"token",
		"zip",
	}
)
_KEY_SPLIT = re.compile(r"[_\-.]+")

_MAX_TEXT = 256
_MAX_ITEMS = 10

_STANDARD_ATTRS = frozenset(logging.LogRecord("", 0, "", 0, "", None, None).__dict__) | {"message", "taskName"}


def bind_context(**fields: Optional[str]) -> Dict[str, Token]:
	"""Bind the non-empty ``fields`` for the current task; returns reset tokens."""

	tokens: Dict[str, Token] = {}
	for name, value in fields.items():
		if value is None:
			continue
		if name == "client_ip":
			name = "ip"
		tokens[name] = _CONTEXT[name].set(value)
	return tokens


def reset_context(tokens: Dict[str, Token]) -> None:
	for name, token in tokens.items():
		_CONTEXT[name].reset(token)


def current_request_id() -> Optional[str]:
	return _CONTEXT["request_id"].get()


def is_redacted(key: str) -> bool:
	return any(part in _REDACTED_PARTS for part in _KEY_SPLIT.split(key.lower()))


def _clip(value: Any) -> Any:
	if isinstance(value, str) and len(value) > _MAX_TEXT:
		return value[:_MAX_TEXT] + "…"
	if isinstance(value, dict):
		return {key: redact(key, nested) for key, nested in list(value.items())[:_MAX_ITEMS]}
	if isinstance(value, (list, tuple, set)):
		return [_clip(item) for item in list(value)[:_MAX_ITEMS]]
	return value


def redact(key: str, value: Any) -> Any:
	return "[redacted]" if is_redacted(key) else _clip(value)


class JSONLogFormatter(logging.Formatter):
	def format(self, record: logging.LogRecord) -> str:  # noqa: A003
		payload: Dict[str, Any] = {
			"ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
			"level": record.levelname.lower(),
			"msg": record.getMessage(),
			"logger": record.name,
			"service": settings.service_name,
			"env": settings.environment,
			"commit": settings.git_commit,
		}
		for name, var in _CONTEXT.items():
			value = var.get()
			if value:
				payload[name] = value
		if record.exc_info:
			payload["exc_info"] = self.formatException(record.exc_info)
		for key, value in record.__dict__.items():
			if key not in _STANDARD_ATTRS and key not in payload:
				payload[key] = redact(key, value)
		return json.dumps(payload, separators=(",", ":"), default=str)


class InfoSampler(logging.Filter):
	"""Keep a ``rate`` share of INFO records; other levels always pass."""

	def __init__(self, rate: float) -> None:
		super().__init__()
		self.rate = max(0.0, min(1.0, rate))

	def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
		return record.levelno != logging.INFO or random.random() < self.rate


def configure_logging() -> logging.Logger:
	handler = logging.StreamHandler()
	handler.setFormatter(JSONLogFormatter())
	if settings.obs_log_sampling_rate_info < 1.0:
		handler.addFilter(InfoSampler(settings.obs_log_sampling_rate_info))
	root = logging.getLogger()
	root.handlers = [handler]
	root.setLevel(settings.obs_log_level)
	return logging.getLogger(_LOGGER_NAME)


def get_logger(name: Optional[str] = None) -> logging.Logger:
	return logging.getLogger(name or _LOGGER_NAME)
