from __future__ import annotations

import json
from typing import Any, Dict, Iterable, Optional, Set

from fastapi import WebSocket
from loguru import logger

from ludo_online.engine.lobby import new_player_id


class ConnectionManager:
    """Tracks open sockets, their player ids and the room each one is in."""

    def __init__(self):
        self.active_connections: Dict[str, WebSocket] = {}
        self.rooms: Dict[str, str] = {}
        self.created: Dict[str, Set[str]] = {}

    async def connect(self, websocket: WebSocket) -> str:
        await websocket.accept()
        player_id = new_player_id()
        self.active_connections[player_id] = websocket
        return player_id

    def disconnect(self, player_id: str) -> Optional[str]:
        self.active_connections.pop(player_id, None)
        return self.rooms.pop(player_id, None)

    def remember_created(self, player_id: str, code: str) -> None:
        self.created.setdefault(player_id, set()).add(code)

    def forget_created(self, player_id: str) -> Set[str]:
        return self.created.pop(player_id, set())

    def room_of(self, player_id: str) -> Optional[str]:
        return self.rooms.get(player_id)

    def bind(self, player_id: str, code: Optional[str]) -> None:
        if code is None:
            self.rooms.pop(player_id, None)
        else:
            self.rooms[player_id] = code

    async def send(self, player_id: str, message: Dict[str, Any]) -> None:
        websocket = self.active_connections.get(player_id)
        if websocket is None:
            return
        try:
            await websocket.send_text(json.dumps(message))
        except Exception as e:
            # delivery is best effort; a dead socket is cleaned up on close
            logger.debug(f"Skipping send to {player_id}: {e}")

    async def broadcast(self, player_ids: Iterable[str], message: Dict[str, Any]) -> None:
        for player_id in list(player_ids):
            await self.send(player_id, message)
