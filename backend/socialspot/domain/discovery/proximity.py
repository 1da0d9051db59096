"""Exact radius cutoff over geo candidates."""

from __future__ import annotations

import logging
from typing import Iterable, List

from socialspot.domain.catalog.models import Item
from socialspot.domain.geo.distance import distance_miles
from socialspot.domain.geo.models import Coordinate

logger = logging.getLogger(__name__)


class ProximityFilter:
	def apply(self, candidates: Iterable[Item], center: Coordinate, radius_miles: float) -> List[Item]:
		"""Copies of the items within ``radius_miles`` with ``distance`` attached.

		The comparison uses the unrounded distance; items without coordinates
		are dropped.
		"""

		kept: List[Item] = []
		dropped = 0
		for item in candidates:
			coords = item.coordinates
			if coords is None:
				dropped += 1
				continue
			miles = distance_miles(center, coords)
			if miles <= radius_miles:
				kept.append(item.with_distance(miles))
			else:
				dropped += 1
		if dropped:
			logger.debug("proximity_dropped", extra={"dropped": dropped, "kept": len(kept)})
		return kept


__all__ = ["ProximityFilter"]
