from typing import Any, Dict

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from timings import TimingsError
from timings_api.session import get_state, pointer_move, reset_session, set_controls

router = APIRouter()


@router.websocket("/ws/timings")
async def ws_timings(websocket: WebSocket) -> None:
    """Pointer moves answer with the highlight; control changes with the full state."""
    await websocket.accept()
    await websocket.send_json({"type": "state", "data": get_state()})

    try:
        while True:
            msg: Dict[str, Any] = await websocket.receive_json()
            mtype = str(msg.get("type", "")).lower()

            try:
                if mtype == "pointer":
                    result = pointer_move(float(msg.get("x", -1)), float(msg.get("y", -1)))
                    if result["changed"]:
                        await websocket.send_json({"type": "highlight", "data": result})
                    continue
                if mtype == "controls":
                    payload = dict(msg)
                    payload.pop("type", None)
                    data = set_controls(payload)
                elif mtype == "reset":
                    data = reset_session()
                else:
                    data = get_state()
            except (TimingsError, TypeError, ValueError) as exc:
                await websocket.send_json({"type": "error", "detail": str(exc)})
                continue

            await websocket.send_json({"type": "state", "data": data})
    except WebSocketDisconnect:
        return
