"""Free-text age range matching.

Age ranges are free text written by whoever entered the item ("Ages 4-12",
"All ages", "Adults 21+"). Matching is a keyword heuristic: "21+" lands in
adults only through the "21+" keyword, and "Adults with kids" matches both
kids and adults. Both are accepted.
"""

from __future__ import annotations

from typing import Optional

AGE_BAND_KEYWORDS = {
	"toddler": ("0-3", "toddler", "infant", "all ages"),
	"kids": ("4-12", "kids", "children", "all ages"),
	"teens": ("13-18", "teen", "youth", "all ages"),
	"adults": ("18+", "adult", "21+", "all ages"),
}

AGE_BAND_LABELS = {
	"all": "All Ages",
	"toddler": "Toddler (0-3)",
	"kids": "Kids (4-12)",
	"teens": "Teens (13-18)",
	"adults": "Adults (18+)",
}


def matches_age_band(age_range: Optional[str], band: str) -> bool:
	if band == "all" or not age_range:
		return True
	keywords = AGE_BAND_KEYWORDS.get(band)
	if keywords is None:
		raise ValueError(f"unknown age band: {band!r}")
	lowered = age_range.lower()
	return any(keyword in lowered for keyword in keywords)


__all__ = ["AGE_BAND_KEYWORDS", "AGE_BAND_LABELS", "matches_age_band"]
