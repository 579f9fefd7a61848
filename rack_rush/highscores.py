import json
import logging
import os
from typing import Dict, Optional

from .constants import GAME_MODES

logger = logging.getLogger(__name__)


class HighScoreStore:
    """Best score per game mode, kept in a small JSON file (or only in memory when no path is given)."""

    def __init__(self, path: Optional[str] = None):
        self.path = path
        self.scores: Dict[str, int] = {mode: 0 for mode in GAME_MODES}
        if path:
            self._load()

    def _load(self):
        if not os.path.exists(self.path):
            return
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                stored = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Could not read high scores from {self.path}: {e}")
            return
        for mode in self.scores:
            value = stored.get(mode, 0) if isinstance(stored, dict) else 0
            self.scores[mode] = value if isinstance(value, int) and value > 0 else 0

    def _save(self):
        if not self.path:
            return
        try:
            with open(self.path, 'w', encoding='utf-8') as f:
                json.dump(self.scores, f)
        except OSError as e:
            logger.error(f"Could not write high scores to {self.path}: {e}")

    def get(self, mode: str) -> int:
        return self.scores.get(mode, 0)

    def record(self, mode: str, score: int) -> bool:
        """Stores `score` if it beats the mode's best. Returns True when a new high score was written."""
        if score <= self.get(mode):
            return False
        self.scores[mode] = score
        self._save()
        logger.info(f"New {mode} high score: {score}")
        return True
