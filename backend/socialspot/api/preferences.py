"""Per-screen preference endpoints."""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Body, HTTPException, Response, status

from socialspot.domain.preferences.store import PreferenceError, PreferenceStore

router = APIRouter(prefix="/preferences", tags=["preferences"])

_store = PreferenceStore()


def _as_http_error(exc: PreferenceError) -> HTTPException:
	code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE if str(exc) == "preferences_too_large" else status.HTTP_400_BAD_REQUEST
	return HTTPException(status_code=code, detail=str(exc))


@router.get("/{screen}")
async def get_preferences_endpoint(screen: str) -> Dict[str, Any]:
	try:
		blob = await _store.load(screen)
	except PreferenceError as exc:
		raise _as_http_error(exc) from exc
	if blob is None:
		raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="preferences_not_found")
	return blob


@router.put("/{screen}")
async def put_preferences_endpoint(screen: str, blob: Dict[str, Any] = Body(...)) -> Dict[str, Any]:
	try:
		await _store.save(screen, blob)
	except PreferenceError as exc:
		raise _as_http_error(exc) from exc
	return blob


@router.delete("/{screen}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_preferences_endpoint(screen: str) -> Response:
	try:
		await _store.clear(screen)
	except PreferenceError as exc:
		raise _as_http_error(exc) from exc
	return Response(status_code=status.HTTP_204_NO_CONTENT)
