import logging
import os
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from models import (BlankLetterRequest, DictionaryStatsResponse, ExchangeRequest,
                    GameStateResponse, KeyRequest, PlaceRequest, SquareRequest,
                    StartRequest)
from rack_rush.clock import SessionClock
from rack_rush.dictionary import load_dictionary
from rack_rush.errors import RackRushError
from rack_rush.highscores import HighScoreStore
from rack_rush.session import GameSession, Phase

logging.basicConfig(level=logging.INFO,
                    format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

DICTIONARY_PATH = os.environ.get("RACK_RUSH_DICTIONARY")
USE_NLTK = os.environ.get("RACK_RUSH_USE_NLTK", "0") == "1"
HIGHSCORES_PATH = os.environ.get(
    "RACK_RUSH_HIGHSCORES",
    os.path.join(os.path.dirname(os.path.abspath(__file__)), "rack_rush_highscores.json"))
CLOCK_INTERVAL = float(os.environ.get("RACK_RUSH_CLOCK_INTERVAL", "1.0"))
CORS_ORIGINS = [o.strip() for o in os.environ.get(
    "RACK_RUSH_CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",") if o.strip()]

app = FastAPI(title="Rack Rush Game Backend")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"]
)

dictionary = load_dictionary(DICTIONARY_PATH, use_nltk=USE_NLTK)
game_session = GameSession(dictionary, high_scores=HighScoreStore(HIGHSCORES_PATH))
game_clock: Optional[SessionClock] = None


@app.exception_handler(RackRushError)
async def rack_rush_error_handler(request: Request, exc: RackRushError):
    logger.warning(f"{request.url.path}: {exc}")
    return JSONResponse(status_code=400, content={"detail": str(exc)})


def _restart_clock():
    global game_clock
    if game_clock is not None:
        game_clock.stop()
        game_clock = None
    if CLOCK_INTERVAL > 0 and game_session.phase == Phase.PLAY:
        game_clock = SessionClock(game_session, CLOCK_INTERVAL)
        game_clock.start()


def _state_response(message: Optional[str] = None) -> GameStateResponse:
    return GameStateResponse(**game_session.get_state(), message=message)


@app.get("/api/game/state", response_model=GameStateResponse, tags=["Game Info"])
def get_current_game_state():
    return _state_response("Current game state retrieved.")


@app.get("/api/dictionary/stats", response_model=DictionaryStatsResponse, tags=["Game Info"])
def get_dictionary_stats():
    return DictionaryStatsResponse(**dictionary.stats())


@app.post("/api/game/start", response_model=GameStateResponse, tags=["Game Flow"])
def start_game(request: StartRequest):
    game_session.start_game(request.mode)
    _restart_clock()
    return _state_response(f"New {request.mode} game started. Reach {game_session.target} points!")


@app.post("/api/game/reset", response_model=GameStateResponse, tags=["Game Flow"])
def reset_game():
    game_session.reset_game()
    _restart_clock()
    return _state_response("Game reset.")


@app.post("/api/game/place", response_model=GameStateResponse, tags=["Game Actions"])
def place_tiles(request: PlaceRequest):
    staged = [game_session.stage_from_rack(t.row, t.col, t.tile_id, t.letter) for t in request.tiles]
    game_session.place_word(staged)
    return _state_response()


@app.post("/api/game/submit", response_model=GameStateResponse, tags=["Game Actions"])
def submit_word():
    result = game_session.submit_word()
    if game_session.phase != Phase.PLAY:
        _restart_clock()
    return _state_response(result.message)


@app.post("/api/game/placed/remove", response_model=GameStateResponse, tags=["Game Actions"])
def remove_placed_tile(request: SquareRequest):
    removed = game_session.remove_placed_tile(request.row, request.col)
    return _state_response(None if removed else "No staged tile on that square.")


@app.post("/api/game/placed/clear", response_model=GameStateResponse, tags=["Game Actions"])
def clear_placed_tiles():
    game_session.clear_placed_tiles()
    return _state_response()


@app.post("/api/game/rack/shuffle", response_model=GameStateResponse, tags=["Game Actions"])
def shuffle_rack():
    game_session.shuffle_rack()
    return _state_response()


@app.post("/api/game/exchange", response_model=GameStateResponse, tags=["Game Actions"])
def exchange_tiles(request: ExchangeRequest):
    if game_session.exchange_tiles(request.indices):
        return _state_response(f"Tiles exchanged. {game_session.exchanges_left} exchange(s) left.")
    return _state_response("Exchange not allowed.")


@app.post("/api/game/blank/request", response_model=GameStateResponse, tags=["Game Actions"])
def request_blank_letter(request: SquareRequest):
    game_session.request_blank_letter(request.row, request.col)
    return _state_response(f"Choose a letter for the blank at ({request.row},{request.col}).")


@app.post("/api/game/blank", response_model=GameStateResponse, tags=["Game Actions"])
def set_blank_letter(request: BlankLetterRequest):
    if game_session.set_blank_letter(request.letter, request.row, request.col):
        return _state_response()
    return _state_response("No blank tile is waiting for a letter.")


@app.post("/api/game/blank/cancel", response_model=GameStateResponse, tags=["Game Actions"])
def cancel_blank_letter():
    game_session.cancel_blank_letter()
    return _state_response()


@app.post("/api/game/select", response_model=GameStateResponse, tags=["Game Input"])
def select_square(request: SquareRequest):
    game_session.select_square(request.row, request.col)
    return _state_response()


@app.post("/api/game/type", response_model=GameStateResponse, tags=["Game Input"])
def type_key(request: KeyRequest):
    handled = game_session.handle_typed_character(request.key)
    return _state_response(None if handled else f"Key '{request.key}' ignored.")


if __name__ == "__main__":
    import uvicorn
    logger.info("Starting Rack Rush backend server...")
    if not dictionary.is_loaded:
        logger.critical(
            "Word dictionary issue: no words loaded. Set RACK_RUSH_DICTIONARY or RACK_RUSH_USE_NLTK=1. Exiting.")
        exit(1)
    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="info")
