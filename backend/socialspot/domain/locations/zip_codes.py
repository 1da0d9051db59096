"""ZIP code to coordinate lookup for the service region."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Mapping, Optional

from socialspot.domain.geo.models import Coordinate
from socialspot.settings import settings

logger = logging.getLogger(__name__)

_ZIP_PATTERN = re.compile(r"^\d{5}$")

KNOWN_ZIP_CODES: Mapping[str, Coordinate] = {
	"21201": Coordinate(39.2904, -76.6122),  # Baltimore
	"21202": Coordinate(39.2904, -76.6122),  # Baltimore
	"21853": Coordinate(38.2046, -75.6939),  # Princess Anne
	"21222": Coordinate(39.2575, -76.5226),  # Dundalk
	"20850": Coordinate(39.0840, -77.1528),  # Rockville
	"21401": Coordinate(38.9784, -76.4922),  # Annapolis
}


@dataclass(slots=True, frozen=True)
class ZipResolution:
	zip_code: str
	coordinate: Coordinate
	fallback: bool


def regional_center() -> Coordinate:
	return Coordinate(settings.regional_center_lat, settings.regional_center_lon)


def validate_zip(zip_code: str) -> str:
	value = (zip_code or "").strip()
	if not _ZIP_PATTERN.match(value):
		raise ValueError("zip_code must be 5 digits")
	return value


class ZipResolver:
	def __init__(self, table: Optional[Mapping[str, Coordinate]] = None) -> None:
		self._table = dict(KNOWN_ZIP_CODES if table is None else table)

	def lookup(self, zip_code: str) -> ZipResolution:
		value = validate_zip(zip_code)
		coordinate = self._table.get(value)
		if coordinate is None:
			logger.info("zip_fallback_to_region", extra={"known_codes": len(self._table)})
			return ZipResolution(zip_code=value, coordinate=regional_center(), fallback=True)
		return ZipResolution(zip_code=value, coordinate=coordinate, fallback=False)

	def resolve(self, zip_code: str) -> Coordinate:
		"""Coordinate for ``zip_code``; unknown codes resolve to the regional centre."""
		return self.lookup(zip_code).coordinate


__all__ = ["KNOWN_ZIP_CODES", "ZipResolution", "ZipResolver", "regional_center", "validate_zip"]
