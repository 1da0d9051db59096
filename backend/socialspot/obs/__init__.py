"""Observability package bootstrap: JSON logs, request middleware, build info."""

from __future__ import annotations

from fastapi import FastAPI

from socialspot.obs import logging as obs_logging
from socialspot.obs import metrics, middleware
from socialspot.settings import settings

_initialised = False


def init(app: FastAPI) -> None:
	global _initialised
	if _initialised or not settings.obs_enabled:
		return
	obs_logging.configure_logging()
	middleware.install(app)
	metrics.set_build_info(settings.service_name, settings.git_commit, settings.environment)
	_initialised = True


__all__ = ["init"]
