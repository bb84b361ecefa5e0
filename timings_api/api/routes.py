from typing import Any, Dict

from fastapi import APIRouter, Body, HTTPException, Response

from timings import TimingsError
from timings_api.session import (
    get_state,
    get_units,
    init_session,
    pointer_move,
    render_png,
    reset_session,
    set_controls,
)

router = APIRouter()


def _coord(payload: Dict[str, Any], key: str) -> float:
    try:
        return float(payload[key])
    except KeyError:
        raise HTTPException(status_code=422, detail=f"{key} is required")
    except (TypeError, ValueError):
        raise HTTPException(status_code=422, detail=f"{key} must be a number")


@router.get("/health")
def health() -> Dict[str, bool]:
    return {"ok": True}


@router.post("/timings/load")
def timings_load(payload: Dict[str, Any] = Body(default_factory=dict)) -> Dict[str, Any]:
    try:
        return init_session(payload)
    except TimingsError as exc:
        raise HTTPException(status_code=422, detail=str(exc))


@router.get("/timings/state")
def timings_state() -> Dict[str, Any]:
    return get_state()


@router.post("/timings/controls")
def timings_controls(payload: Dict[str, Any] = Body(default_factory=dict)) -> Dict[str, Any]:
    try:
        return set_controls(payload)
    except TimingsError as exc:
        raise HTTPException(status_code=422, detail=str(exc))


@router.post("/timings/pointer")
def timings_pointer(payload: Dict[str, Any] = Body(default_factory=dict)) -> Dict[str, Any]:
    return pointer_move(_coord(payload, "x"), _coord(payload, "y"))


@router.get("/timings/units")
def timings_units() -> Dict[str, Any]:
    return get_units()


@router.get("/timings/graph/{name}.png")
def timings_graph(name: str) -> Response:
    try:
        data = render_png(name)
    except TimingsError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    if data is None:
        return Response(status_code=204)
    return Response(content=data, media_type="image/png")


@router.post("/timings/reset")
def timings_reset() -> Dict[str, Any]:
    return reset_session()
