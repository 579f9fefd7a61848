import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .constants import BOARD_SIZE, DL_COORDS, DW_COORDS, TL_COORDS, TW_COORDS
from .tiles import Tile

logger = logging.getLogger(__name__)


class Premium(str, Enum):
    NONE = 'normal'
    DOUBLE_LETTER = 'DL'
    TRIPLE_LETTER = 'TL'
    DOUBLE_WORD = 'DW'
    TRIPLE_WORD = 'TW'

    @property
    def letter_multiplier(self) -> int:
        return {Premium.DOUBLE_LETTER: 2, Premium.TRIPLE_LETTER: 3}.get(self, 1)

    @property
    def word_multiplier(self) -> int:
        return {Premium.DOUBLE_WORD: 2, Premium.TRIPLE_WORD: 3}.get(self, 1)


@dataclass(frozen=True)
class PlacedTile:
    """A tile staged on a square for the current, not yet committed move."""
    row: int
    col: int
    tile: Tile

    @property
    def pos(self) -> Tuple[int, int]:
        return self.row, self.col


@dataclass
class Cell:
    premium: Premium = Premium.NONE
    premium_used: bool = False
    tile: Optional[Tile] = None


def in_bounds(r: int, c: int) -> bool:
    return 0 <= r < BOARD_SIZE and 0 <= c < BOARD_SIZE


def build_premium_layout() -> Dict[Tuple[int, int], Premium]:
    """Maps board coordinates to premium squares, mirroring one quadrant into all four."""
    premiums = {}
    last = BOARD_SIZE - 1

    def mirror_and_add(base_coords, p_type):
        for r, c in base_coords:
            for mr, mc in [(r, c), (r, last - c), (last - r, c), (last - r, last - c)]:
                premiums[(mr, mc)] = p_type

    mirror_and_add(TW_COORDS, Premium.TRIPLE_WORD)
    mirror_and_add(DW_COORDS, Premium.DOUBLE_WORD)
    mirror_and_add(TL_COORDS, Premium.TRIPLE_LETTER)
    mirror_and_add(DL_COORDS, Premium.DOUBLE_LETTER)
    return premiums


PREMIUM_LAYOUT = build_premium_layout()


class Board:
    """The committed 15x15 grid. Tiles only ever arrive through `commit_tiles`."""

    def __init__(self):
        self.size = BOARD_SIZE
        self.cells: List[List[Cell]] = [
            [Cell(premium=PREMIUM_LAYOUT.get((r, c), Premium.NONE)) for c in range(self.size)]
            for r in range(self.size)]

    def cell(self, r: int, c: int) -> Cell:
        return self.cells[r][c]

    def tile_at(self, r: int, c: int) -> Optional[Tile]:
        if in_bounds(r, c):
            return self.cells[r][c].tile
        return None

    def has_tile(self, r: int, c: int) -> bool:
        return self.tile_at(r, c) is not None

    def iter_tiles(self) -> Iterator[Tuple[int, int, Tile]]:
        for r, row in enumerate(self.cells):
            for c, cell in enumerate(row):
                if cell.tile is not None:
                    yield r, c, cell.tile

    def tile_count(self) -> int:
        return sum(1 for _ in self.iter_tiles())

    def is_empty(self) -> bool:
        return self.tile_count() == 0

    def letters(self) -> List[List[Optional[str]]]:
        return [[cell.tile.letter if cell.tile else None for cell in row] for row in self.cells]


def create_empty_board() -> Board:
    return Board()


def commit_tiles(board: Board, placed_tiles: Iterable[PlacedTile]) -> Board:
    """Makes staged tiles permanent and consumes the premium of every square they cover."""
    placed_tiles = list(placed_tiles)
    for placed in placed_tiles:
        cell = board.cell(placed.row, placed.col)
        if cell.tile is not None or cell.premium_used:
            raise ValueError(f"Square ({placed.row},{placed.col}) is already occupied.")
    for placed in placed_tiles:
        cell = board.cell(placed.row, placed.col)
        cell.tile = placed.tile
        cell.premium_used = True
    logger.debug(f"Committed {len(placed_tiles)} tile(s) to the board.")
    return board
