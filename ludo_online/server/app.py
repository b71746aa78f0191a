"""WebSocket transport for the lobby.

Inbound envelopes are JSON objects tagged by ``type``. Successful commands
broadcast their events to every current member of the room; rejections go
back to the requester only as ``{"type": "error", "message": ...}``.
"""

from __future__ import annotations

import json
from typing import Any, Awaitable, Callable, Dict, Optional

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from loguru import logger

from ludo_online.engine.errors import LudoError, PlayerNotInRoom, RoomNotFound
from ludo_online.engine.lobby import Lobby
from ludo_online.engine.types import Outcome, RoomCreated

from .connections import ConnectionManager

Handler = Callable[[str, Dict[str, Any]], Awaitable[None]]


class LudoServer:
    """Maps inbound envelopes onto lobby commands for one process."""

    def __init__(self, lobby: Optional[Lobby] = None):
        self.lobby = lobby or Lobby()
        self.connections = ConnectionManager()
        self.handlers: Dict[str, Handler] = {
            "create_room": self.create_room,
            "join_room": self.join_room,
            "start_game": self.start_game,
            "roll_dice": self.roll_dice,
            "move_piece": self.move_piece,
        }

    # --- Delivery ---
    async def publish(self, requester_id: str, outcome: Outcome) -> None:
        for event in outcome.events:
            message = event.to_message()
            if isinstance(event, RoomCreated):
                await self.connections.send(requester_id, message)
                continue
            try:
                members = list(self.lobby.room(outcome.code).players)
            except RoomNotFound:
                continue
            await self.connections.broadcast(members, message)

    async def error(self, player_id: str, err: LudoError) -> None:
        await self.connections.send(player_id, {"type": "error", "message": err.message})

    def _current_room(self, player_id: str) -> str:
        code = self.connections.room_of(player_id)
        if code is None:
            raise PlayerNotInRoom()
        return code

    # --- Handlers ---
    async def create_room(self, player_id: str, data: Dict[str, Any]) -> None:
        outcome = self.lobby.create_room(str(data.get("origin") or ""))
        self.connections.remember_created(player_id, outcome.code)
        await self.publish(player_id, outcome)

    async def join_room(self, player_id: str, data: Dict[str, Any]) -> None:
        code = str(data.get("code") or "")
        previous = self.connections.room_of(player_id)
        outcome = self.lobby.join_room(code, data.get("name"), player_id=player_id)
        if previous is not None and previous != outcome.code:
            await self.leave(player_id, previous)
        self.connections.bind(player_id, outcome.code)
        await self.publish(player_id, outcome)

    async def start_game(self, player_id: str, data: Dict[str, Any]) -> None:
        outcome = self.lobby.start_game(self._current_room(player_id), player_id)
        await self.publish(player_id, outcome)

    async def roll_dice(self, player_id: str, data: Dict[str, Any]) -> None:
        outcome = self.lobby.roll_dice(self._current_room(player_id), player_id)
        await self.publish(player_id, outcome)

    async def move_piece(self, player_id: str, data: Dict[str, Any]) -> None:
        piece_index = data.get("pieceIndex")
        if not isinstance(piece_index, int) or isinstance(piece_index, bool):
            piece_index = -1
        outcome = self.lobby.move_piece(
            self._current_room(player_id), player_id, piece_index
        )
        await self.publish(player_id, outcome)

    async def leave(self, player_id: str, code: str) -> None:
        outcome = self.lobby.disconnect(code, player_id)
        await self.publish(player_id, outcome)

    # --- Dispatch ---
    async def dispatch(self, player_id: str, raw: str) -> None:
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.debug(f"Dropping malformed message from {player_id}")
            return
        if not isinstance(data, dict):
            return
        handler = self.handlers.get(data.get("type"))
        if handler is None:
            logger.debug(f"Dropping unknown message type from {player_id}: {data.get('type')}")
            return
        try:
            await handler(player_id, data)
        except LudoError as err:
            await self.error(player_id, err)

    async def serve(self, websocket: WebSocket) -> None:
        player_id = await self.connections.connect(websocket)
        try:
            while True:
                raw = await websocket.receive_text()
                try:
                    await self.dispatch(player_id, raw)
                except Exception:
                    logger.exception(f"Failed to handle message from {player_id}")
        except WebSocketDisconnect:
            logger.debug(f"Connection {player_id} closed")
        finally:
            code = self.connections.disconnect(player_id)
            # rooms this connection created but never entered
            for created in self.connections.forget_created(player_id):
                if created != code:
                    self.lobby.discard_room(created)
            if code is not None:
                await self.leave(player_id, code)


def create_app(lobby: Optional[Lobby] = None) -> FastAPI:
    app = FastAPI(
        title="Ludo Online",
        description="Authoritative game server for networked Ludo rooms",
        version="0.1.0",
    )
    server = LudoServer(lobby)
    app.state.server = server

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        await server.serve(websocket)

    return app
