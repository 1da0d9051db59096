"""Result ordering."""

from __future__ import annotations

import unicodedata
from typing import Iterable, List, Tuple

from socialspot.domain.catalog.models import Item


def name_key(name: str) -> Tuple[int, str]:
	"""Case- and accent-insensitive sort key; empty names go last."""

	folded = unicodedata.normalize("NFKD", name or "").casefold()
	stripped = "".join(char for char in folded if not unicodedata.combining(char)).strip()
	return (1, "") if not stripped else (0, stripped)


def rank(items: Iterable[Item], has_location_filter: bool) -> List[Item]:
	# sorted() is stable, so ties keep their input order.
	if has_location_filter:
		return sorted(items, key=lambda item: item.distance if item.distance is not None else float("inf"))
	return sorted(items, key=lambda item: name_key(item.name))


__all__ = ["name_key", "rank"]
