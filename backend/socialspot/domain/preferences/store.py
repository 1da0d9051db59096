"""Per-screen preference blobs (filters, map viewport) kept in Redis."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Optional

from socialspot.infra.redis import redis_client
from socialspot.settings import settings

_LOG = logging.getLogger(__name__)

_SCREEN_PATTERN = re.compile(r"^[a-z][a-z0-9_-]{0,31}$")
MAX_BLOB_BYTES = 16 * 1024


class PreferenceError(ValueError):
	"""Raised for an invalid screen name or an oversized blob."""


def _key(screen: str) -> str:
	if not _SCREEN_PATTERN.match(screen or ""):
		raise PreferenceError("invalid_screen")
	return f"prefs:{screen}"


class PreferenceStore:
	"""Opaque JSON blobs keyed by screen; the store never interprets them."""

	def __init__(self, ttl_seconds: Optional[int] = None) -> None:
		self._ttl = ttl_seconds or settings.preferences_ttl_seconds

	async def load(self, screen: str) -> Optional[Dict[str, Any]]:
		raw = await redis_client.get(_key(screen))
		if not raw:
			return None
		try:
			data = json.loads(raw)
		except json.JSONDecodeError:
			_LOG.warning("Discarding unreadable preferences for screen %s", screen)
			await redis_client.delete(_key(screen))
			return None
		return data if isinstance(data, dict) else None

	async def save(self, screen: str, blob: Dict[str, Any]) -> None:
		key = _key(screen)
		payload = json.dumps(blob, separators=(",", ":"))
		if len(payload.encode("utf-8")) > MAX_BLOB_BYTES:
			raise PreferenceError("preferences_too_large")
		await redis_client.set(key, payload, ex=self._ttl)

	async def clear(self, screen: str) -> None:
		await redis_client.delete(_key(screen))


__all__ = ["MAX_BLOB_BYTES", "PreferenceError", "PreferenceStore"]
