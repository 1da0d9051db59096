"""ZIP code lookup endpoint."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel

from socialspot.domain.locations.zip_codes import ZipResolver

router = APIRouter(prefix="/locations", tags=["locations"])

_resolver = ZipResolver()


class ZipLookupResponse(BaseModel):
	zip_code: str
	lat: float
	lon: float
	fallback: bool = False


@router.get("/zip/{zip_code}", response_model=ZipLookupResponse)
async def lookup_zip_endpoint(zip_code: str) -> ZipLookupResponse:
	try:
		resolution = _resolver.lookup(zip_code)
	except ValueError as exc:
		raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="invalid_zip") from exc
	return ZipLookupResponse(
		zip_code=resolution.zip_code,
		lat=resolution.coordinate.latitude,
		lon=resolution.coordinate.longitude,
		fallback=resolution.fallback,
	)
