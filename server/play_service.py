"""REST service to play Eleven against heuristic bots."""

from __future__ import annotations

import logging
import uuid
from dataclasses import asdict
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from bots.base import BotStrategy
from bots.baseline_greedy import GreedyBot
from engine.service import GameService, GameView
from engine.state import GamePhase, InvalidMove

logger = logging.getLogger(__name__)


class StartRequest(BaseModel):
    player_names: List[str] = Field(default_factory=lambda: ["You", "Bot"])
    game_mode: Optional[str] = None
    forced_deal_order: Optional[int] = None


class MoveRequest(BaseModel):
    hand_card_id: str
    capture_card_ids: List[str] = Field(default_factory=list)


class SessionState:
    def __init__(self, service: GameService, bot: BotStrategy) -> None:
        self.service = service
        self.bot = bot


sessions: Dict[str, SessionState] = {}


app = FastAPI(title="Eleven Play Service")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def ensure_session(session_id: str) -> SessionState:
    session = sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def serialize_view(view: GameView) -> Dict[str, object]:
    return asdict(view)


@app.post("/session/start")
def start_session(request: StartRequest) -> Dict[str, object]:
    service = GameService()
    try:
        view = service.start_game(
            request.player_names,
            game_mode=request.game_mode,
            forced_deal_order=request.forced_deal_order,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    session_id = uuid.uuid4().hex
    sessions[session_id] = SessionState(service=service, bot=GreedyBot())
    logger.info("Session %s started (%s)", session_id, view.mode)
    return {"session_id": session_id, "state": serialize_view(view)}


@app.get("/session/{session_id}")
def get_session(session_id: str, perspective: Optional[int] = None) -> Dict[str, object]:
    session = ensure_session(session_id)
    state = session.service.state
    if perspective is not None and state is not None and not 0 <= perspective < len(state.players):
        raise HTTPException(status_code=400, detail="Unknown seat")
    return {"state": serialize_view(session.service.get_view(perspective))}


@app.post("/session/{session_id}/move")
def make_move(session_id: str, request: MoveRequest) -> Dict[str, object]:
    session = ensure_session(session_id)
    state = session.service.state
    if state is not None and state.phase is not GamePhase.PLAYING:
        raise HTTPException(status_code=400, detail=f"Moves are not allowed in phase {state.phase.value}")
    if state is not None and state.active_player.is_bot:
        raise HTTPException(status_code=400, detail="It is a bot's turn")
    try:
        view = session.service.play(request.hand_card_id, request.capture_card_ids)
    except InvalidMove as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"state": serialize_view(view)}


@app.post("/session/{session_id}/bot")
def bot_move(session_id: str) -> Dict[str, object]:
    session = ensure_session(session_id)
    state = session.service.state
    if state is None or state.phase is not GamePhase.PLAYING or not state.active_player.is_bot:
        raise HTTPException(status_code=400, detail="It is not a bot's turn")
    move = session.bot.choose_move(
        state, state.active_player_index, target_sum=session.service.engine.rules.target_sum
    )
    try:
        view = session.service.play(move.hand_card_id, move.capture_card_ids)
    except InvalidMove as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {
        "move": {"hand_card_id": move.hand_card_id, "capture_card_ids": list(move.capture_card_ids)},
        "state": serialize_view(view),
    }


@app.post("/session/{session_id}/next-round")
def next_round(session_id: str) -> Dict[str, object]:
    session = ensure_session(session_id)
    try:
        view = session.service.next_round()
    except InvalidMove as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"state": serialize_view(view)}


@app.post("/session/{session_id}/restart")
def restart_session(session_id: str) -> Dict[str, object]:
    session = ensure_session(session_id)
    return {"state": serialize_view(session.service.restart_match())}
