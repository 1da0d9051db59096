import pytest

from socialspot.domain.preferences.store import MAX_BLOB_BYTES, PreferenceError, PreferenceStore


@pytest.mark.asyncio
async def test_save_and_load_round_trip(fake_redis):
	store = PreferenceStore(ttl_seconds=60)
	blob = {"selectedCategory": "Outdoor Fun", "showFreeOnly": True, "region": {"latitudeDelta": 0.5}}

	await store.save("map", blob)

	assert await store.load("map") == blob
	assert await fake_redis.exists("prefs:map")
	assert 0 < await fake_redis.ttl("prefs:map") <= 60


@pytest.mark.asyncio
async def test_screens_are_isolated_and_clearable(fake_redis):
	store = PreferenceStore()
	await store.save("home", {"selectedAge": "kids"})
	await store.save("events", {"selectedAge": "teens"})

	await store.clear("home")

	assert await store.load("home") is None
	assert await store.load("events") == {"selectedAge": "teens"}


@pytest.mark.asyncio
async def test_unreadable_blob_is_discarded(fake_redis):
	await fake_redis.set("prefs:map", "{not json")
	assert await PreferenceStore().load("map") is None
	assert not await fake_redis.exists("prefs:map")


@pytest.mark.asyncio
async def test_invalid_screen_and_oversized_blob_are_rejected(fake_redis):
	store = PreferenceStore()
	with pytest.raises(PreferenceError):
		await store.load("Bad Screen!")
	with pytest.raises(PreferenceError):
		await store.save("map", {"blob": "x" * MAX_BLOB_BYTES})
