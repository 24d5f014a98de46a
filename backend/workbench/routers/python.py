import asyncio
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import BaseModel
from starlette.websockets import WebSocketState

from workbench.services.python_executor import ExecutionResult, PythonSession, execute_code

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/python", tags=["python"])


class ExecuteCodeRequest(BaseModel):
    code: str


@router.post("/execute", response_model=ExecutionResult)
async def execute(data: ExecuteCodeRequest):
    return await execute_code(data.code)


async def _send(ws: WebSocket, kind: str, data: str) -> None:
    if ws.client_state == WebSocketState.CONNECTED:
        await ws.send_json({"type": kind, "data": data})


@router.websocket("/session")
async def python_session(websocket: WebSocket):
    """Interactive interpreter over a websocket.

    Client sends {"type": "command", "data": "..."} or {"type": "stop"};
    the server relays {"type": "output" | "error" | "exit", "data": "..."}.
    """
    await websocket.accept()
    session = PythonSession()
    try:
        await session.start()
    except OSError as e:
        await _send(websocket, "error", f"Could not start Python: {e}")
        await websocket.close()
        return

    async def relay():
        async for kind, data in session.events():
            await _send(websocket, kind, data)

    relay_task = asyncio.create_task(relay())
    try:
        while True:
            message = await websocket.receive_json()
            msg_type = message.get("type") if isinstance(message, dict) else None
            if msg_type == "command":
                await session.send(str(message.get("data", "")))
            elif msg_type == "stop":
                await session.stop()
                break
            else:
                await _send(websocket, "error", f"Unknown message type: {msg_type}")
    except WebSocketDisconnect:
        logger.info("Python session client disconnected")
    finally:
        await session.stop()
        try:
            await asyncio.wait_for(relay_task, timeout=1)
        except asyncio.TimeoutError:
            relay_task.cancel()
        if websocket.client_state == WebSocketState.CONNECTED:
            await websocket.close()
