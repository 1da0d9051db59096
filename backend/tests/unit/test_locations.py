import pytest

from socialspot.domain.geo.models import Coordinate
from socialspot.domain.locations.provider import (
	LocationPermissionDenied,
	PositionUnavailable,
	StaticLocationProvider,
	resolve_search_center,
)
from socialspot.domain.locations.zip_codes import ZipResolver


def test_known_zip_codes_resolve():
	resolver = ZipResolver()
	assert resolver.resolve("21201") == Coordinate(39.2904, -76.6122)
	assert resolver.resolve("21853") == Coordinate(38.2046, -75.6939)
	assert resolver.lookup("21401").fallback is False


def test_unknown_zip_falls_back_to_regional_center():
	resolution = ZipResolver().lookup("99999")
	assert resolution.coordinate == Coordinate(38.8, -76.5)
	assert resolution.fallback is True


@pytest.mark.parametrize("value", ["2120", "212011", "abcde", "", "21 01"])
def test_malformed_zip_codes_are_rejected(value):
	with pytest.raises(ValueError):
		ZipResolver().resolve(value)


@pytest.mark.asyncio
async def test_static_provider_failures():
	with pytest.raises(LocationPermissionDenied):
		await StaticLocationProvider(denied=True).get_current_coordinates()
	with pytest.raises(PositionUnavailable):
		await StaticLocationProvider().get_current_coordinates()


@pytest.mark.asyncio
async def test_zip_code_wins_over_device_location():
	device = StaticLocationProvider(Coordinate(10.0, 10.0))
	center = await resolve_search_center(zip_code="20850", use_device_location=True, provider=device)
	assert center == Coordinate(39.0840, -77.1528)


@pytest.mark.asyncio
async def test_device_failures_mean_no_location_filter():
	assert await resolve_search_center(use_device_location=True, provider=StaticLocationProvider(denied=True)) is None
	assert await resolve_search_center(use_device_location=True, provider=StaticLocationProvider()) is None
	assert await resolve_search_center() is None


@pytest.mark.asyncio
async def test_device_location_used_when_available():
	here = Coordinate(39.2575, -76.5226)
	assert await resolve_search_center(use_device_location=True, provider=StaticLocationProvider(here)) == here
