"""Infrastructure adapters (Postgres pool, Redis proxy)."""
