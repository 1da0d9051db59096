"""Event date parsing and date-window predicates."""

from __future__ import annotations

import calendar
import re
from datetime import date, timedelta
from typing import Optional, Tuple

from socialspot.domain.catalog.models import EventSchedule

_MONTHS = {
	name: idx
	for idx, name in enumerate(
		("jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec"), start=1
	)
}

_NUMERIC_US = re.compile(r"\b(\d{1,2})/(\d{1,2})/(\d{4})\b")
_MONTH_NAME = re.compile(
	r"\b(jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*\.?\s+(\d{1,2})(?:st|nd|rd|th)?,?\s+(\d{4})\b",
	re.IGNORECASE,
)
_ISO = re.compile(r"\b(\d{4})-(\d{2})-(\d{2})\b")

RECURRING_SCHEDULES = frozenset({"weekly", "daily"})


def _safe_date(year: int, month: int, day: int) -> Optional[date]:
	try:
		return date(year, month, day)
	except ValueError:
		return None


def parse_date_text(text: Optional[str]) -> Optional[date]:
	if not text:
		return None
	match = _ISO.search(text)
	if match:
		return _safe_date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
	match = _NUMERIC_US.search(text)
	if match:
		return _safe_date(int(match.group(3)), int(match.group(1)), int(match.group(2)))
	match = _MONTH_NAME.search(text)
	if match:
		month = _MONTHS[match.group(1).lower()[:3]]
		return _safe_date(int(match.group(3)), month, int(match.group(2)))
	return None


def parse_event_date(schedule: Optional[EventSchedule]) -> Optional[date]:
	"""First parseable date from the event date, then the schedule description."""

	if schedule is None:
		return None
	for text in (schedule.event_date, schedule.schedule_description):
		parsed = parse_date_text(text)
		if parsed is not None:
			return parsed
	return None


def is_recurring(schedule: Optional[EventSchedule]) -> bool:
	if schedule is None:
		return False
	if schedule.recurring:
		return True
	if schedule.schedule and schedule.schedule.strip().lower() in RECURRING_SCHEDULES:
		return True
	for text in (schedule.event_date, schedule.schedule_description):
		if text and text.strip().lower().startswith("every "):
			return True
	return False


def add_month(day: date) -> date:
	year, month = (day.year + 1, 1) if day.month == 12 else (day.year, day.month + 1)
	last = calendar.monthrange(year, month)[1]
	return date(year, month, min(day.day, last))


def window_range(window: str, today: date) -> Optional[Tuple[date, date]]:
	"""Half-open ``[start, end)`` for a bounded window, ``None`` for ``all``."""

	if window == "all":
		return None
	if window == "today":
		return today, today + timedelta(days=1)
	if window == "week":
		return today, today + timedelta(days=7)
	if window == "month":
		return today, add_month(today)
	raise ValueError(f"unknown date window: {window!r}")


def matches_date_window(
	schedule: Optional[EventSchedule],
	window: str,
	today: date,
	*,
	show_past: bool = False,
) -> bool:
	if is_recurring(schedule):
		return True
	event_day = parse_event_date(schedule)
	if event_day is not None and event_day < today and not show_past:
		return False
	bounds = window_range(window, today)
	if bounds is None:
		return True
	if event_day is None:
		return False
	start, end = bounds
	return start <= event_day < end


__all__ = [
	"is_recurring",
	"matches_date_window",
	"parse_date_text",
	"parse_event_date",
	"window_range",
]
