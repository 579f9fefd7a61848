import itertools
import logging
import random
from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple

from .constants import BLANK_LETTER, LETTER_DISTRIBUTION, MAX_EXCHANGES

logger = logging.getLogger(__name__)

_tile_ids = itertools.count()


@dataclass(frozen=True)
class Tile:
    """A single letter tile. `id` stays fixed for the tile's whole life; a blank's letter is assigned on placement."""
    letter: str
    points: int
    id: str
    is_blank: bool = False

    @property
    def has_letter(self) -> bool:
        return self.letter != BLANK_LETTER

    def with_letter(self, letter: str) -> 'Tile':
        """Returns a copy of a blank tile showing `letter`. Non-blank tiles never change letter."""
        if not self.is_blank:
            raise ValueError(f"Tile {self.id} is not a blank.")
        return replace(self, letter=letter.upper())


def _shuffle(tiles: List[Tile], rng: Optional[random.Random] = None) -> None:
    (rng or random).shuffle(tiles)


def create_letter_bag(rng: Optional[random.Random] = None) -> List[Tile]:
    """Creates every tile of the standard English distribution and shuffles them."""
    game_no = next(_tile_ids)
    bag = []
    for letter, (count, points) in LETTER_DISTRIBUTION.items():
        for _ in range(count):
            bag.append(Tile(letter=letter, points=points, id=f"tile-{game_no}-{len(bag)}",
                            is_blank=letter == BLANK_LETTER))
    _shuffle(bag, rng)
    return bag


def draw_tiles(count: int, bag: Sequence[Tile]) -> Tuple[List[Tile], List[Tile]]:
    """Draws up to `count` tiles from the end of the bag. Returns (drawn, remaining bag)."""
    remaining = list(bag)
    drawn = []
    for _ in range(max(count, 0)):
        if not remaining:
            break
        drawn.append(remaining.pop())
    return drawn, remaining


def can_exchange(indices: Sequence[int], rack: Sequence[Tile], bag: Sequence[Tile],
                 exchanges_used: int = 0) -> bool:
    """Checks the exchange budget, the bag size and that `indices` name distinct rack slots."""
    if exchanges_used >= MAX_EXCHANGES:
        return False
    if not indices or len(set(indices)) != len(indices):
        return False
    if any(i < 0 or i >= len(rack) for i in indices):
        return False
    return len(bag) >= len(indices)


def exchange_tiles(indices: Sequence[int], rack: Sequence[Tile], bag: Sequence[Tile],
                   exchanges_used: int = 0,
                   rng: Optional[random.Random] = None) -> Tuple[List[Tile], List[Tile]]:
    """
    Swaps the rack tiles at `indices` for the same number of tiles from the bag.
    The returned tiles go back in the bag before it is reshuffled and the replacements drawn.
    Returns (rack, bag) unchanged if the exchange is not allowed.
    """
    if not can_exchange(indices, rack, bag, exchanges_used):
        logger.warning(
            f"Exchange of {len(indices)} tile(s) refused (bag: {len(bag)}, exchanges used: {exchanges_used}).")
        return list(rack), list(bag)

    selected = set(indices)
    returned = [tile for i, tile in enumerate(rack) if i in selected]
    kept = [tile for i, tile in enumerate(rack) if i not in selected]

    new_bag = list(bag) + returned
    _shuffle(new_bag, rng)
    drawn, new_bag = draw_tiles(len(returned), new_bag)
    return kept + drawn, new_bag
