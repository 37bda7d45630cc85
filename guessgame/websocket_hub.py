from __future__ import annotations

import asyncio
import logging
from typing import Any

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class SessionListeners:
    """WebSockets watching the one game session.

    `notify` pushes a JSON payload to every listener; a socket whose send fails is
    forgotten so later updates skip it.
    """

    def __init__(self) -> None:
        self._sockets: set[WebSocket] = set()

    def __len__(self) -> int:
        return len(self._sockets)

    async def attach(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self._sockets.add(websocket)

    def detach(self, websocket: WebSocket) -> None:
        self._sockets.discard(websocket)

    async def notify(self, payload: dict[str, Any]) -> None:
        sockets = list(self._sockets)
        results = await asyncio.gather(*(ws.send_json(payload) for ws in sockets), return_exceptions=True)
        for ws, result in zip(sockets, results):
            if isinstance(result, Exception):
                logger.debug("Forgetting session listener after failed send: %r", result)
                self.detach(ws)


listeners = SessionListeners()
