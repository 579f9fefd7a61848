import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

from .board import Board, PlacedTile, in_bounds
from .constants import CENTER

logger = logging.getLogger(__name__)

HORIZONTAL = "horizontal"
VERTICAL = "vertical"

NEIGHBOUR_OFFSETS = [(-1, 0), (1, 0), (0, -1), (0, 1)]


class PlacementError(Enum):
    NO_TILES_PLACED = "No tiles placed"
    MUST_CROSS_CENTER = "First word must cross center star"
    NOT_IN_LINE = "Tiles must be in a straight line"
    HAS_GAPS = "Word cannot have gaps"
    MUST_CONNECT = "Word must connect to existing tiles"

    @property
    def message(self) -> str:
        return self.value


@dataclass(frozen=True)
class PlacementResult:
    error: Optional[PlacementError] = None

    @property
    def valid(self) -> bool:
        return self.error is None


VALID = PlacementResult()


def move_orientation(placed_tiles: Sequence[PlacedTile]) -> Optional[str]:
    """
    Returns HORIZONTAL if every tile shares a row, VERTICAL if they share a column, else None.
    A single tile counts as horizontal.
    """
    if not placed_tiles:
        return None
    if len({p.row for p in placed_tiles}) == 1:
        return HORIZONTAL
    if len({p.col for p in placed_tiles}) == 1:
        return VERTICAL
    return None


def _has_gaps(placed_tiles: Sequence[PlacedTile], board: Board, orientation: str) -> bool:
    if orientation == HORIZONTAL:
        ordered: List[PlacedTile] = sorted(placed_tiles, key=lambda p: p.col)
        for prev, curr in zip(ordered, ordered[1:]):
            if any(not board.has_tile(prev.row, c) for c in range(prev.col + 1, curr.col)):
                return True
    else:
        ordered = sorted(placed_tiles, key=lambda p: p.row)
        for prev, curr in zip(ordered, ordered[1:]):
            if any(not board.has_tile(r, prev.col) for r in range(prev.row + 1, curr.row)):
                return True
    return False


def _touches_committed_tile(placed_tiles: Sequence[PlacedTile], board: Board) -> bool:
    staged = {p.pos for p in placed_tiles}
    for p in placed_tiles:
        for dr, dc in NEIGHBOUR_OFFSETS:
            r, c = p.row + dr, p.col + dc
            if in_bounds(r, c) and (r, c) not in staged and board.has_tile(r, c):
                return True
    return False


def validate_placement(placed_tiles: Sequence[PlacedTile], board: Board,
                       is_first_move: bool) -> PlacementResult:
    """Checks a staged move against the placement rules, stopping at the first rule broken."""
    if not placed_tiles:
        return PlacementResult(PlacementError.NO_TILES_PLACED)

    if is_first_move and sum(1 for p in placed_tiles if p.pos == CENTER) != 1:
        return PlacementResult(PlacementError.MUST_CROSS_CENTER)

    orientation = move_orientation(placed_tiles)
    if orientation is None:
        return PlacementResult(PlacementError.NOT_IN_LINE)

    if _has_gaps(placed_tiles, board, orientation):
        return PlacementResult(PlacementError.HAS_GAPS)

    if not is_first_move and not _touches_committed_tile(placed_tiles, board):
        return PlacementResult(PlacementError.MUST_CONNECT)

    logger.debug(f"Placement of {len(placed_tiles)} tile(s) is valid ({orientation}).")
    return VALID
