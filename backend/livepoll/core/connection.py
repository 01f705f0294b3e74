import asyncio
import itertools
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional

from fastapi import WebSocket

logger = logging.getLogger(__name__)

_ids = itertools.count(1)

MAX_PENDING_FRAMES = 32


class Connection(ABC):
    """
    A viewer the broadcaster can push events to.

    ``send`` only queues the event, it never suspends. ``close`` runs the
    registered close callbacks exactly once.
    """

    def __init__(self) -> None:
        self.id = next(_ids)
        self.closed = False
        self._close_callbacks: List[Callable[["Connection"], Any]] = []

    @abstractmethod
    def send(self, event: str, data: Any) -> None:
        ...

    def on_close(self, callback: Callable[["Connection"], Any]) -> None:
        self._close_callbacks.append(callback)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        callbacks, self._close_callbacks = self._close_callbacks, []
        for callback in callbacks:
            callback(self)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.id}>"


class WebSocketConnection(Connection):
    """Connection over a FastAPI websocket with a single ordered writer."""

    def __init__(self, websocket: WebSocket) -> None:
        super().__init__()
        self.websocket = websocket
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=MAX_PENDING_FRAMES)
        self._writer: Optional[asyncio.Task] = None

    def start(self) -> None:
        self._writer = asyncio.create_task(self._drain())

    def send(self, event: str, data: Any) -> None:
        if self.closed:
            return
        # a stalled client only needs the newest snapshots
        if self._queue.full():
            self._queue.get_nowait()
        self._queue.put_nowait({"event": event, "data": data})

    async def _drain(self) -> None:
        while True:
            frame = await self._queue.get()
            try:
                await self.websocket.send_json(frame)
            except Exception as e:
                logger.warning(f"Dropping {self!r} after failed send: {e}")
                self.close()
                return

    def close(self) -> None:
        if self._writer is not None and self._writer is not asyncio.current_task():
            self._writer.cancel()
        super().close()
