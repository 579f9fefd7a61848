from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from .board import Board
from .constants import BINGO_BONUS, BINGO_LABEL, RACK_SIZE
from .words import FormedWord


@dataclass(frozen=True)
class MoveScore:
    total: int
    word_scores: List[Tuple[str, int]] = field(default_factory=list)
    bingo: bool = False

    @property
    def entries(self) -> List[Tuple[str, int]]:
        """Per-word scores followed by the bingo bonus entry, if earned."""
        if self.bingo:
            return self.word_scores + [(BINGO_LABEL, BINGO_BONUS)]
        return list(self.word_scores)


def calculate_word_score(formed: FormedWord, board: Board) -> int:
    """
    Sums the letters of a word and applies each square's premium only if that square
    has not been consumed yet, i.e. it is being covered by this move.
    """
    score = 0
    word_multiplier = 1
    for cell in formed.cells:
        letter_score = cell.tile.points
        square = board.cell(cell.row, cell.col)
        if not square.premium_used:
            letter_score *= square.premium.letter_multiplier
            word_multiplier *= square.premium.word_multiplier
        score += letter_score
    return score * word_multiplier


def calculate_move_score(formed_words: Sequence[FormedWord], board: Board,
                         tiles_placed: int) -> MoveScore:
    word_scores = [(formed.word, calculate_word_score(formed, board)) for formed in formed_words]
    total = sum(score for _, score in word_scores)
    bingo = tiles_placed == RACK_SIZE
    if bingo:
        total += BINGO_BONUS
    return MoveScore(total=total, word_scores=word_scores, bingo=bingo)
