
from pydantic import BaseModel
from typing import Any, Dict, List, Optional


class StartRequest(BaseModel):
    mode: str = "medium"


class StagedTile(BaseModel):
    row: int
    col: int
    tile_id: str
    letter: Optional[str] = None


class PlaceRequest(BaseModel):
    tiles: List[StagedTile]


class SquareRequest(BaseModel):
    row: int
    col: int


class ExchangeRequest(BaseModel):
    indices: List[int]


class BlankLetterRequest(BaseModel):
    letter: str
    row: Optional[int] = None
    col: Optional[int] = None


class KeyRequest(BaseModel):
    key: str


class TileModel(BaseModel):
    id: str
    letter: str
    points: int
    is_blank: bool


class CellModel(BaseModel):
    letter: Optional[str] = None
    points: Optional[int] = None
    premium: str
    premium_used: bool


class PlacedTileModel(BaseModel):
    row: int
    col: int
    tile: TileModel


class PlayedWordModel(BaseModel):
    word: str
    score: int
    timestamp: float


class GameStateResponse(BaseModel):
    phase: str
    mode: str
    score: int
    target: int
    strikes: int
    max_strikes: int
    time_left: int
    board: List[List[CellModel]]
    rack: List[TileModel]
    placed_tiles: List[PlacedTileModel]
    played_words: List[PlayedWordModel]
    exchanges_used: int
    exchanges_left: int
    tiles_in_bag: int
    is_first_move: bool
    high_score: int
    new_high_score: bool
    end_reason: Optional[str] = None
    error_message: Optional[str] = None
    blank_letter_input: Optional[List[int]] = None
    cursor: Dict[str, Any]
    message: Optional[str] = None


class DictionaryStatsResponse(BaseModel):
    is_loaded: bool
    word_count: int
    source: str
