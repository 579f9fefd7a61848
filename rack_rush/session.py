import functools
import logging
import random
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .board import PlacedTile, commit_tiles, create_empty_board, in_bounds
from .constants import (BACKSPACE_KEYS, DEFAULT_MODE, ERROR_MESSAGE_SECONDS,
                        GAME_MODES, MAX_EXCHANGES, MAX_STRIKES, RACK_SIZE)
from .errors import IllegalPhaseError, InvalidStagingError, UnknownModeError
from .highscores import HighScoreStore
from .placement import validate_placement
from .scoring import calculate_move_score
from .tiles import Tile, can_exchange, create_letter_bag, draw_tiles, exchange_tiles
from .typing_cursor import TypingCursor
from .words import get_formed_words

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    READY = 'ready'
    PLAY = 'play'
    END = 'end'


class EndReason(str, Enum):
    WON = 'won'
    STRIKES = 'strikes'
    TIMEOUT = 'timeout'


ALLOWED_TRANSITIONS = {
    Phase.READY: {Phase.PLAY},
    Phase.PLAY: {Phase.END, Phase.READY},
    Phase.END: {Phase.PLAY, Phase.READY},
}

NO_WORD_MESSAGE = "Word must be at least two letters"
BLANK_UNASSIGNED_MESSAGE = "Choose a letter for the blank tile first"


@dataclass(frozen=True)
class PlayedWord:
    word: str
    score: int
    timestamp: float


@dataclass(frozen=True)
class SubmitResult:
    accepted: bool
    message: str
    score: int = 0
    words: List[str] = field(default_factory=list)


def exclusive(method):
    """Runs a session operation under the session lock so ticks and commands never interleave."""
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)
    return wrapper


def _is_letter(value: str) -> bool:
    return len(value) == 1 and 'A' <= value.upper() <= 'Z'


class GameSession:
    """
    One single-player game: board, rack, bag, the staged move and the turn rules.
    Every operation either changes state or reports a recoverable condition; operations
    requested in the wrong phase raise IllegalPhaseError and change nothing.
    """

    def __init__(self, is_valid_word: Callable[[str], bool],
                 high_scores: Optional[HighScoreStore] = None,
                 rng: Optional[random.Random] = None):
        self._lock = threading.RLock()
        self._rng = rng
        self.is_valid_word = is_valid_word
        self.high_scores = high_scores or HighScoreStore()
        self.phase = Phase.READY
        self.mode = DEFAULT_MODE
        self.new_high_score = False
        self._reset_state()

    def _reset_state(self):
        self.score = 0
        self.strikes = 0
        self.time_left = GAME_MODES[self.mode]['time']
        self.board = create_empty_board()
        self.rack: List[Tile] = []
        self.letter_bag: List[Tile] = create_letter_bag(self._rng)
        self.placed_tiles: List[PlacedTile] = []
        self.played_words: List[PlayedWord] = []
        self.exchanges_used = 0
        self.is_first_move = True
        self.end_reason: Optional[EndReason] = None
        self.error_message: Optional[str] = None
        self._error_ttl = 0
        self.blank_letter_input: Optional[Tuple[int, int]] = None
        self.cursor = TypingCursor()

    @property
    def target(self) -> int:
        return GAME_MODES[self.mode]['target']

    @property
    def high_score(self) -> int:
        return self.high_scores.get(self.mode)

    @property
    def exchanges_left(self) -> int:
        return MAX_EXCHANGES - self.exchanges_used

    def tile_count(self) -> int:
        """Tiles in bag, rack and on the board. Staged tiles still belong to the rack."""
        return len(self.letter_bag) + len(self.rack) + self.board.tile_count()

    def available_rack_tiles(self) -> List[Tile]:
        staged_ids = {p.tile.id for p in self.placed_tiles}
        return [tile for tile in self.rack if tile.id not in staged_ids]

    # Phase handling

    def _transition(self, new_phase: Phase):
        if new_phase not in ALLOWED_TRANSITIONS[self.phase]:
            raise IllegalPhaseError(f"move to {new_phase.value}", self.phase.value)
        logger.info(f"Game phase {self.phase.value} -> {new_phase.value}")
        self.phase = new_phase

    def _require_play(self, operation: str):
        if self.phase != Phase.PLAY:
            raise IllegalPhaseError(operation, self.phase.value)

    def _end(self, reason: EndReason):
        self._transition(Phase.END)
        self.end_reason = reason
        self.placed_tiles = []
        self.blank_letter_input = None
        self.cursor.clear()
        self.new_high_score = self.high_scores.record(self.mode, self.score)
        logger.info(f"Game over ({reason.value}). Final score {self.score} in {self.mode} mode.")

    def _flash(self, message: str):
        self.error_message = message
        self._error_ttl = ERROR_MESSAGE_SECONDS

    def _clear_staging(self):
        self.placed_tiles = []
        self.blank_letter_input = None

    # Lifecycle

    @exclusive
    def start_game(self, mode: str = DEFAULT_MODE):
        if mode not in GAME_MODES:
            raise UnknownModeError(mode)
        if self.phase == Phase.PLAY:
            raise IllegalPhaseError("start a game", self.phase.value)
        self.mode = mode
        self.new_high_score = False
        self._reset_state()
        self.rack, self.letter_bag = draw_tiles(RACK_SIZE, self.letter_bag)
        self._transition(Phase.PLAY)
        logger.info(f"New {mode} game: {self.time_left}s to reach {self.target} points.")

    @exclusive
    def reset_game(self):
        if self.phase != Phase.READY:
            self._transition(Phase.READY)
        self.new_high_score = False
        self._reset_state()
        logger.info("Game reset.")

    @exclusive
    def tick(self) -> bool:
        """Advances the countdown by one second. Returns False once the game is no longer running."""
        if self.phase != Phase.PLAY or self.time_left <= 0:
            return False
        self.time_left -= 1
        if self._error_ttl > 0:
            self._error_ttl -= 1
            if self._error_ttl == 0:
                self.error_message = None
        if self.time_left <= 0:
            self.time_left = 0
            self._end(EndReason.TIMEOUT)
            return False
        return True

    # Staging

    def _check_staging(self, tiles: Sequence[PlacedTile]):
        rack_by_id = {tile.id: tile for tile in self.rack}
        positions = set()
        tile_ids = set()
        for placed in tiles:
            if not in_bounds(placed.row, placed.col):
                raise InvalidStagingError(f"Square ({placed.row},{placed.col}) is off the board.")
            if placed.pos in positions:
                raise InvalidStagingError(f"Two tiles staged on ({placed.row},{placed.col}).")
            if self.board.has_tile(placed.row, placed.col):
                raise InvalidStagingError(f"Square ({placed.row},{placed.col}) already holds a tile.")
            rack_tile = rack_by_id.get(placed.tile.id)
            if rack_tile is None:
                raise InvalidStagingError(f"Tile {placed.tile.id} is not in the rack.")
            if placed.tile.id in tile_ids:
                raise InvalidStagingError(f"Tile {placed.tile.id} is staged twice.")
            if placed.tile != rack_tile:
                if not rack_tile.is_blank or placed.tile != rack_tile.with_letter(placed.tile.letter) \
                        or not _is_letter(placed.tile.letter):
                    raise InvalidStagingError(f"Tile {placed.tile.id} does not match the rack.")
            positions.add(placed.pos)
            tile_ids.add(placed.tile.id)

    def _first_unassigned_blank(self) -> Optional[Tuple[int, int]]:
        return next((p.pos for p in self.placed_tiles if p.tile.is_blank and not p.tile.has_letter), None)

    @exclusive
    def place_word(self, tiles: Sequence[PlacedTile]):
        """Replaces the staged move with `tiles`."""
        self._require_play("place tiles")
        tiles = list(tiles)
        self._check_staging(tiles)
        self.placed_tiles = tiles
        unassigned = {p.pos for p in tiles if p.tile.is_blank and not p.tile.has_letter}
        if self.blank_letter_input not in unassigned:
            self.blank_letter_input = None
        if self.blank_letter_input is None:
            self.blank_letter_input = self._first_unassigned_blank()

    @exclusive
    def stage_from_rack(self, row: int, col: int, tile_id: str, letter: Optional[str] = None) -> PlacedTile:
        """Builds a PlacedTile for a rack tile, giving a blank its letter when one is supplied."""
        tile = next((t for t in self.rack if t.id == tile_id), None)
        if tile is None:
            raise InvalidStagingError(f"Tile {tile_id} is not in the rack.")
        if tile.is_blank and letter:
            if not _is_letter(letter):
                raise InvalidStagingError(f"'{letter}' is not a letter.")
            tile = tile.with_letter(letter)
        return PlacedTile(row, col, tile)

    @exclusive
    def remove_placed_tile(self, row: int, col: int) -> bool:
        self._require_play("remove a tile")
        remaining = [p for p in self.placed_tiles if p.pos != (row, col)]
        removed = len(remaining) != len(self.placed_tiles)
        self.placed_tiles = remaining
        if self.blank_letter_input == (row, col):
            self.blank_letter_input = None
        return removed

    @exclusive
    def clear_placed_tiles(self):
        self._require_play("clear tiles")
        self._clear_staging()

    # Blank tiles

    @exclusive
    def request_blank_letter(self, row: int, col: int):
        self._require_play("choose a blank letter")
        if not any(p.pos == (row, col) and p.tile.is_blank for p in self.placed_tiles):
            raise InvalidStagingError(f"No staged blank at ({row},{col}).")
        self.blank_letter_input = (row, col)

    @exclusive
    def set_blank_letter(self, letter: str, row: Optional[int] = None, col: Optional[int] = None) -> bool:
        """Gives the staged blank at (row, col), or the pending one, its letter."""
        self._require_play("choose a blank letter")
        target = (row, col) if row is not None and col is not None else self.blank_letter_input
        if target is None:
            return False
        if not _is_letter(letter):
            raise InvalidStagingError(f"'{letter}' is not a letter.")
        for i, placed in enumerate(self.placed_tiles):
            if placed.pos == target and placed.tile.is_blank:
                self.placed_tiles[i] = PlacedTile(placed.row, placed.col, placed.tile.with_letter(letter))
                break
        else:
            raise InvalidStagingError(f"No staged blank at {target}.")
        self.blank_letter_input = self._first_unassigned_blank()
        return True

    @exclusive
    def cancel_blank_letter(self):
        self.blank_letter_input = None

    # Turn

    def _check_word(self, word: str) -> bool:
        try:
            return bool(self.is_valid_word(word))
        except Exception:
            logger.exception(f"Dictionary lookup failed for '{word}'; treating it as invalid.")
            return False

    @exclusive
    def submit_word(self) -> SubmitResult:
        self._require_play("submit a word")

        if self._first_unassigned_blank() is not None:
            self.blank_letter_input = self._first_unassigned_blank()
            self._flash(BLANK_UNASSIGNED_MESSAGE)
            return SubmitResult(False, BLANK_UNASSIGNED_MESSAGE)

        placement = validate_placement(self.placed_tiles, self.board, self.is_first_move)
        if not placement.valid:
            logger.debug(f"Placement rejected: {placement.error.name}")
            self._clear_staging()
            self._flash(placement.error.message)
            return SubmitResult(False, placement.error.message)

        formed_words = get_formed_words(self.placed_tiles, self.board)
        if not formed_words:
            self._clear_staging()
            self._flash(NO_WORD_MESSAGE)
            return SubmitResult(False, NO_WORD_MESSAGE)

        invalid_words = [w.word for w in formed_words if not self._check_word(w.word)]
        if invalid_words:
            self.strikes += 1
            message = f'"{invalid_words[0]}" is not a valid word. Strike {self.strikes}/{MAX_STRIKES}'
            logger.info(message)
            self._clear_staging()
            self._flash(message)
            if self.strikes >= MAX_STRIKES:
                self._end(EndReason.STRIKES)
            return SubmitResult(False, message, words=invalid_words)

        move = calculate_move_score(formed_words, self.board, len(self.placed_tiles))
        commit_tiles(self.board, self.placed_tiles)

        used_ids = {p.tile.id for p in self.placed_tiles}
        self.rack = [tile for tile in self.rack if tile.id not in used_ids]
        drawn, self.letter_bag = draw_tiles(RACK_SIZE - len(self.rack), self.letter_bag)
        self.rack.extend(drawn)

        now = time.time()
        self.played_words.extend(PlayedWord(word, score, now) for word, score in move.entries)
        self.score += move.total
        self.is_first_move = False
        self._clear_staging()
        self.cursor.clear()
        self.error_message = None
        self._error_ttl = 0

        words = [w.word for w in formed_words]
        message = f"Played {', '.join(words)} for {move.total} pts."
        logger.info(f"{message} Score {self.score}/{self.target}, bag {len(self.letter_bag)}.")
        if self.score >= self.target:
            self._end(EndReason.WON)
        return SubmitResult(True, message, move.total, words)

    # Rack

    @exclusive
    def shuffle_rack(self):
        self._require_play("shuffle the rack")
        (self._rng or random).shuffle(self.rack)

    @exclusive
    def exchange_tiles(self, indices: Sequence[int]) -> bool:
        """Swaps the rack tiles at `indices`. Refused exchanges leave rack and bag untouched."""
        self._require_play("exchange tiles")
        indices = list(indices)
        if not can_exchange(indices, self.rack, self.letter_bag, self.exchanges_used):
            logger.warning(f"Exchange of {indices} refused ({self.exchanges_left} exchange(s) left, "
                           f"{len(self.letter_bag)} tile(s) in bag).")
            return False
        self._clear_staging()
        self.rack, self.letter_bag = exchange_tiles(
            indices, self.rack, self.letter_bag, self.exchanges_used, self._rng)
        self.exchanges_used += 1
        logger.info(f"Exchanged {len(indices)} tile(s); {self.exchanges_left} exchange(s) left.")
        return True

    # Keyboard input

    @exclusive
    def select_square(self, row: int, col: int):
        self._require_play("select a square")
        if not in_bounds(row, col):
            raise InvalidStagingError(f"Square ({row},{col}) is off the board.")
        self.cursor.select(row, col)

    @exclusive
    def handle_typed_character(self, key: str) -> bool:
        """
        Single entry point for keyboard input. Letters stage a rack tile at the cursor and
        advance it; BACKSPACE/DELETE take back the staged tile just behind the cursor.
        Returns whether the key was used.
        """
        self._require_play("type")
        key = key.upper()

        if key in BACKSPACE_KEYS:
            last = self.cursor.last_staged_behind(self.placed_tiles)
            if last is None:
                return False
            self.placed_tiles = [p for p in self.placed_tiles if p.pos != last.pos]
            if self.blank_letter_input == last.pos:
                self.blank_letter_input = None
            self.cursor.position = last.pos
            return True

        if not self.cursor.active or self.blank_letter_input is not None or not _is_letter(key):
            return False

        available = self.available_rack_tiles()
        tile = next((t for t in available if not t.is_blank and t.letter == key), None)
        if tile is None:
            blank = next((t for t in available if t.is_blank), None)
            if blank is None:
                return False
            tile = blank.with_letter(key)

        target = self.cursor.position
        if self.board.has_tile(*target) or any(p.pos == target for p in self.placed_tiles):
            target = self.cursor.next_free_square(self.board, self.placed_tiles, target, advance=True)
            if target is None:
                return False

        self.placed_tiles.append(PlacedTile(target[0], target[1], tile))
        next_square = self.cursor.next_free_square(self.board, self.placed_tiles, target, advance=True)
        if next_square is not None:
            self.cursor.position = next_square
        return True

    # Snapshot

    @exclusive
    def get_state(self) -> Dict[str, Any]:
        """Read-only snapshot of the whole session for the UI."""
        return {
            "phase": self.phase.value,
            "mode": self.mode,
            "score": self.score,
            "target": self.target,
            "strikes": self.strikes,
            "max_strikes": MAX_STRIKES,
            "time_left": self.time_left,
            "board": [[{"letter": cell.tile.letter if cell.tile else None,
                        "points": cell.tile.points if cell.tile else None,
                        "premium": cell.premium.value,
                        "premium_used": cell.premium_used}
                       for cell in row] for row in self.board.cells],
            "rack": [_tile_dict(tile) for tile in self.rack],
            "placed_tiles": [{"row": p.row, "col": p.col, "tile": _tile_dict(p.tile)} for p in self.placed_tiles],
            "played_words": [{"word": w.word, "score": w.score, "timestamp": w.timestamp}
                             for w in self.played_words],
            "exchanges_used": self.exchanges_used,
            "exchanges_left": self.exchanges_left,
            "tiles_in_bag": len(self.letter_bag),
            "is_first_move": self.is_first_move,
            "high_score": self.high_score,
            "new_high_score": self.new_high_score,
            "end_reason": self.end_reason.value if self.end_reason else None,
            "error_message": self.error_message,
            "blank_letter_input": list(self.blank_letter_input) if self.blank_letter_input else None,
            "cursor": self.cursor.as_dict(),
        }


def _tile_dict(tile: Tile) -> Dict[str, Any]:
    return {"id": tile.id, "letter": tile.letter, "points": tile.points, "is_blank": tile.is_blank}
