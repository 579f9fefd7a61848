import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from .board import Board, PlacedTile, in_bounds
from .placement import HORIZONTAL, VERTICAL, move_orientation
from .tiles import Tile

logger = logging.getLogger(__name__)

AXIS_STEP = {HORIZONTAL: (0, 1), VERTICAL: (1, 0)}


class BoardView:
    """Read-only composite of the committed board and the staged tiles of the current move."""

    def __init__(self, board: Board, placed_tiles: Sequence[PlacedTile]):
        self._board = board
        self._staged: Dict[Tuple[int, int], Tile] = {p.pos: p.tile for p in placed_tiles}

    def tile_at(self, r: int, c: int) -> Optional[Tile]:
        if not in_bounds(r, c):
            return None
        staged = self._staged.get((r, c))
        return staged if staged is not None else self._board.tile_at(r, c)

    def is_new(self, r: int, c: int) -> bool:
        return (r, c) in self._staged


@dataclass(frozen=True)
class WordCell:
    row: int
    col: int
    tile: Tile
    is_new: bool


@dataclass(frozen=True)
class FormedWord:
    """A word created or extended by a move, in reading order."""
    word: str
    cells: Tuple[WordCell, ...]

    @property
    def positions(self) -> List[Tuple[int, int]]:
        return [(cell.row, cell.col) for cell in self.cells]

    @property
    def tiles(self) -> List[PlacedTile]:
        """The newly placed tiles that belong to this word."""
        return [PlacedTile(cell.row, cell.col, cell.tile) for cell in self.cells if cell.is_new]


def read_run(view: BoardView, r: int, c: int, dr: int, dc: int,
             span_end: Optional[Tuple[int, int]] = None) -> Tuple[WordCell, ...]:
    """Collects the contiguous run of tiles through (r, c) along (dr, dc), extended past `span_end` if given."""
    while view.tile_at(r - dr, c - dc) is not None:
        r, c = r - dr, c - dc
    end_r, end_c = span_end if span_end is not None else (r, c)
    cells = []
    while in_bounds(r, c):
        tile = view.tile_at(r, c)
        past_span = (r - end_r) * dr + (c - end_c) * dc > 0
        if tile is None:
            if past_span:
                break
        else:
            cells.append(WordCell(r, c, tile, view.is_new(r, c)))
        r, c = r + dr, c + dc
    return tuple(cells)


def _as_word(cells: Tuple[WordCell, ...]) -> FormedWord:
    return FormedWord("".join(cell.tile.letter for cell in cells), cells)


def get_formed_words(placed_tiles: Sequence[PlacedTile], board: Board) -> List[FormedWord]:
    """
    Finds every word of two or more letters that the staged tiles create or extend:
    the main word along the move's axis, then one perpendicular word per staged tile
    that touches a neighbour across that axis.
    """
    if not placed_tiles:
        return []
    orientation = move_orientation(placed_tiles)
    if orientation is None:
        raise ValueError("Staged tiles are not in a single line.")

    view = BoardView(board, placed_tiles)
    dr, dc = AXIS_STEP[orientation]
    pr, pc = dc, dr
    words = []

    ordered = sorted(placed_tiles, key=lambda p: (p.row, p.col))
    first, last = ordered[0], ordered[-1]
    main_cells = read_run(view, first.row, first.col, dr, dc, span_end=last.pos)
    if len(main_cells) >= 2:
        words.append(_as_word(main_cells))

    for placed in placed_tiles:
        cross_cells = read_run(view, placed.row, placed.col, pr, pc)
        if len(cross_cells) >= 2:
            words.append(_as_word(cross_cells))

    logger.debug(f"Move forms {[w.word for w in words]}")
    return words
