BOARD_SIZE = 15
CENTER = (BOARD_SIZE // 2, BOARD_SIZE // 2)
RACK_SIZE = 7
BINGO_BONUS = 50
BINGO_LABEL = 'BONUS: All 7 tiles!'
MAX_STRIKES = 3
MAX_EXCHANGES = 2
ERROR_MESSAGE_SECONDS = 3
BLANK_LETTER = '_'

# letter -> (count, points); 98 letters + 2 blanks
LETTER_DISTRIBUTION = {
    'A': (9, 1), 'B': (2, 3), 'C': (2, 3), 'D': (4, 2), 'E': (12, 1), 'F': (2, 4),
    'G': (3, 2), 'H': (2, 4), 'I': (9, 1), 'J': (1, 8), 'K': (1, 5), 'L': (4, 1),
    'M': (2, 3), 'N': (6, 1), 'O': (8, 1), 'P': (2, 3), 'Q': (1, 10), 'R': (6, 1),
    'S': (4, 1), 'T': (6, 1), 'U': (4, 1), 'V': (2, 4), 'W': (2, 4), 'X': (1, 8),
    'Y': (2, 4), 'Z': (1, 10), BLANK_LETTER: (2, 0),
}
TOTAL_TILES = sum(count for count, _ in LETTER_DISTRIBUTION.values())

# One quadrant of the standard layout; mirrored across both axes.
TW_COORDS = [(0, 0), (0, 7), (7, 0)]
DW_COORDS = [(r, r) for r in range(1, 5)] + [CENTER]
TL_COORDS = [(1, 5), (5, 1), (5, 5)]
DL_COORDS = [(0, 3), (2, 6), (3, 0), (3, 7), (6, 2), (6, 6), (7, 3)]

GAME_MODES = {
    'slow': {'time': 600, 'target': 300},
    'medium': {'time': 360, 'target': 200},
    'fast': {'time': 180, 'target': 120},
}
DEFAULT_MODE = 'medium'

BACKSPACE_KEYS = {'BACKSPACE', 'DELETE'}
