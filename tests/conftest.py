"""Shared fixtures for Rack Rush tests."""

from __future__ import annotations

import itertools
import random

import pytest

from rack_rush.board import Board, PlacedTile, commit_tiles, create_empty_board
from rack_rush.constants import LETTER_DISTRIBUTION
from rack_rush.dictionary import WordDictionary
from rack_rush.session import GameSession
from rack_rush.tiles import Tile


_ids = itertools.count()


def make_tile(letter: str, tile_id: str | None = None) -> Tile:
    """Tile with the standard points for `letter`; '_' gives a blank."""
    points = LETTER_DISTRIBUTION[letter][1]
    return Tile(letter=letter, points=points, id=tile_id or f"t-{letter}-{next(_ids)}",
                is_blank=letter == "_")


def stage(word: str, row: int, col: int, horizontal: bool = True) -> list[PlacedTile]:
    """PlacedTiles spelling `word` from (row, col). '.' skips a square."""
    placed = []
    for i, ch in enumerate(word):
        if ch == ".":
            continue
        r, c = (row, col + i) if horizontal else (row + i, col)
        placed.append(PlacedTile(r, c, make_tile(ch)))
    return placed


def board_with(*words: tuple[str, int, int, bool]) -> Board:
    """Empty board with each (word, row, col, horizontal) committed in turn."""
    board = create_empty_board()
    for word, row, col, horizontal in words:
        placed = [p for p in stage(word, row, col, horizontal) if not board.has_tile(p.row, p.col)]
        commit_tiles(board, placed)
    return board


def load_rack(session: GameSession, letters: str) -> list[Tile]:
    """Swaps the session's rack for tiles spelling `letters`, moving tiles between rack and bag so none are lost."""
    pool = session.letter_bag + session.rack
    rack = []
    for ch in letters:
        tile = next(t for t in pool if t.letter == ch and t not in rack)
        rack.append(tile)
    session.letter_bag = [t for t in pool if t not in rack]
    session.rack = rack
    return rack


def stage_rack(session: GameSession, letters: str, row: int, col: int,
               horizontal: bool = True) -> list[PlacedTile]:
    """Stages rack tiles spelling `letters` from (row, col); '.' skips a square."""
    used: list[Tile] = []
    placed = []
    for i, ch in enumerate(letters):
        if ch == ".":
            continue
        tile = next(t for t in session.rack if t.letter == ch and t not in used)
        used.append(tile)
        r, c = (row, col + i) if horizontal else (row + i, col)
        placed.append(PlacedTile(r, c, tile))
    session.place_word(placed)
    return placed


@pytest.fixture
def small_dictionary() -> WordDictionary:
    """Hand-picked words. No file I/O."""
    return WordDictionary([
        "AT", "TA", "AB", "BA", "AN", "NA", "TO", "IT", "IS", "ON", "NO", "OX", "XI", "QI",
        "CAT", "CAB", "BAT", "TAB", "CATS", "ACT", "TAN", "ANT", "NAB", "TON", "NOT",
        "RETAINS", "STAINER", "SATIRE",
    ])


@pytest.fixture
def session(small_dictionary: WordDictionary) -> GameSession:
    return GameSession(small_dictionary, rng=random.Random(7))


@pytest.fixture
def playing(session: GameSession) -> GameSession:
    session.start_game("fast")
    return session
