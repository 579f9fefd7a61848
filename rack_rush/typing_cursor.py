from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .board import Board, PlacedTile, in_bounds

RIGHT = 'right'
DOWN = 'down'

DIRECTION_STEP = {RIGHT: (0, 1), DOWN: (1, 0)}


@dataclass
class TypingCursor:
    """Square selected for keyboard entry and the direction typing advances in."""
    position: Optional[Tuple[int, int]] = None
    direction: Optional[str] = None

    @property
    def active(self) -> bool:
        return self.position is not None and self.direction is not None

    def clear(self):
        self.position = None
        self.direction = None

    def select(self, row: int, col: int):
        """Selecting a new square starts typing rightwards; reselecting cycles right, down, off."""
        if self.position == (row, col):
            if self.direction is None:
                self.direction = RIGHT
            elif self.direction == RIGHT:
                self.direction = DOWN
            else:
                self.clear()
            return
        self.position = (row, col)
        self.direction = RIGHT

    def next_free_square(self, board: Board, placed_tiles: Sequence[PlacedTile],
                         start: Tuple[int, int], advance: bool = False) -> Optional[Tuple[int, int]]:
        """First square from `start` (or the one after it) along the direction with no tile on it."""
        if self.direction is None:
            return start
        dr, dc = DIRECTION_STEP[self.direction]
        staged = {p.pos for p in placed_tiles}
        r, c = start
        if advance:
            r, c = r + dr, c + dc
        while in_bounds(r, c):
            if not board.has_tile(r, c) and (r, c) not in staged:
                return r, c
            r, c = r + dr, c + dc
        return None

    def last_staged_behind(self, placed_tiles: Sequence[PlacedTile]) -> Optional[PlacedTile]:
        """
        The staged tile closest behind the cursor on its line, if any. A tile under the
        cursor counts: typing that reaches the board edge leaves the cursor on its last tile.
        """
        if not self.active:
            return None
        row, col = self.position
        if self.direction == RIGHT:
            behind = [p for p in placed_tiles if p.row == row and p.col <= col]
            return max(behind, key=lambda p: p.col, default=None)
        behind = [p for p in placed_tiles if p.col == col and p.row <= row]
        return max(behind, key=lambda p: p.row, default=None)

    def as_dict(self):
        return {"position": list(self.position) if self.position else None, "direction": self.direction}
