import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from livepoll.core.connection import WebSocketConnection
from livepoll.services.poll_gateway import PollGateway

logger = logging.getLogger(__name__)

router = APIRouter(tags=["WebSocket"])


@router.websocket("/ws")
async def poll_ws(websocket: WebSocket):
    gateway: PollGateway = websocket.app.state.gateway
    await websocket.accept()
    connection = WebSocketConnection(websocket)
    connection.start()
    logger.info(f"{connection!r} connected")

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))
            # binary frames are not part of the protocol
            if message.get("text") is not None:
                gateway.dispatch_text(connection, message["text"])
    except WebSocketDisconnect:
        logger.info(f"{connection!r} disconnected")
    finally:
        connection.close()
