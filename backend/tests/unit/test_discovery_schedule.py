from datetime import date

import pytest

from socialspot.domain.catalog.models import EventSchedule
from socialspot.domain.discovery.schedule import (
	add_month,
	is_recurring,
	matches_date_window,
	parse_date_text,
	parse_event_date,
	window_range,
)


@pytest.mark.parametrize(
	"text,expected",
	[
		("7/4/2025", date(2025, 7, 4)),
		("Friday, 12/05/2025 at 6pm", date(2025, 12, 5)),
		("Jul 4, 2025", date(2025, 7, 4)),
		("September 13th, 2025", date(2025, 9, 13)),
		("2025-10-31", date(2025, 10, 31)),
		("2/30/2025", None),
		("Every Saturday", None),
		("", None),
		(None, None),
	],
)
def test_parse_date_text(text, expected):
	assert parse_date_text(text) == expected


def test_event_date_falls_back_to_schedule_description():
	schedule = EventSchedule(event_date="TBD", schedule_description="Opening night Aug 2, 2025")
	assert parse_event_date(schedule) == date(2025, 8, 2)
	assert parse_event_date(None) is None


@pytest.mark.parametrize(
	"schedule,expected",
	[
		(EventSchedule(recurring=True), True),
		(EventSchedule(schedule="Weekly"), True),
		(EventSchedule(schedule="daily"), True),
		(EventSchedule(event_date="Every Saturday"), True),
		(EventSchedule(schedule_description="First Friday monthly"), False),
		(EventSchedule(event_date="7/4/2025"), False),
		(None, False),
	],
)
def test_is_recurring(schedule, expected):
	assert is_recurring(schedule) is expected


def test_month_window_uses_calendar_months():
	assert add_month(date(2025, 1, 31)) == date(2025, 2, 28)
	assert add_month(date(2025, 12, 15)) == date(2026, 1, 15)
	assert window_range("month", date(2025, 6, 10)) == (date(2025, 6, 10), date(2025, 7, 10))
	assert window_range("all", date(2025, 6, 10)) is None
	with pytest.raises(ValueError):
		window_range("upcoming", date(2025, 6, 10))


def test_past_events_hidden_unless_requested():
	today = date(2025, 6, 10)
	past = EventSchedule(event_date="6/9/2025")
	assert matches_date_window(past, "all", today) is False
	assert matches_date_window(past, "all", today, show_past=True) is True
	assert matches_date_window(past, "week", today, show_past=True) is False
