import sys
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from fakeredis.aioredis import FakeRedis

# Ensure backend package is importable when tests run from repo root
BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
	sys.path.insert(0, str(BACKEND_ROOT))

from socialspot.domain.catalog import store as catalog_store
from socialspot.infra import postgres
from socialspot.main import app
from socialspot.settings import settings


@pytest_asyncio.fixture(autouse=True)
async def fake_redis():
	from socialspot.infra.redis import set_redis_client
	client = FakeRedis(decode_responses=True)
	set_redis_client(client)
	try:
		yield client
	finally:
		await client.flushall()
		set_redis_client(None)


@pytest.fixture(autouse=True)
def patch_postgres(monkeypatch):
	async def _noop():
		return None

	monkeypatch.setattr(postgres, "init_pool", _noop)
	monkeypatch.setattr(postgres, "close_pool", _noop)


@pytest.fixture(autouse=True)
def force_test_settings(monkeypatch):
	"""Run every test against the in-memory document store."""
	monkeypatch.setattr(settings, "environment", "dev")
	monkeypatch.setattr(settings, "store_backend", "memory")
	monkeypatch.setattr(settings, "obs_metrics_public", True)


@pytest_asyncio.fixture
async def memory_store():
	store = catalog_store.memory_store()
	await store.reset()
	try:
		yield store
	finally:
		await store.reset()


@pytest_asyncio.fixture
async def api_client():
	transport = ASGITransport(app=app)
	async with AsyncClient(transport=transport, base_url="http://testserver") as client:
		yield client
