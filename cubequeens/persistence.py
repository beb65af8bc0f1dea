"""
Progress store implementations.

- MemoryProgressStore: keeps the document in process memory
- JsonProgressStore: keeps the document in a JSON file on disk
"""

import copy
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from .interfaces import PersistenceError, ProgressStore

logger = logging.getLogger(__name__)


def empty_progress() -> Dict[str, Any]:
    return {'best_scores': {}, 'last_session': None}


def parse_progress(data: Any) -> Dict[str, Any]:
    """
    Normalize a raw progress document.

    Board sizes become ints; scores that are not non-negative integers are
    dropped. A last_session without a usable level is discarded. The board
    text itself is left for the session to validate.

    Args:
        data: Decoded document (usually from JSON)

    Returns:
        Progress document in canonical form.
    """
    progress = empty_progress()
    if not isinstance(data, dict):
        return progress

    raw_scores = data.get('best_scores') or {}
    if isinstance(raw_scores, dict):
        for key, value in raw_scores.items():
            try:
                size = int(key)
            except (TypeError, ValueError):
                logger.warning("Ignoring best score with invalid board size %r", key)
                continue
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                logger.warning("Ignoring invalid best score %r for N=%s", value, key)
                continue
            progress['best_scores'][size] = value

    session = data.get('last_session')
    if isinstance(session, dict):
        level = session.get('level')
        if isinstance(level, int) and not isinstance(level, bool) and level > 0:
            progress['last_session'] = {'level': level, 'board': session.get('board')}

    return progress


class MemoryProgressStore(ProgressStore):
    """Progress store backed by a dictionary."""

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self._data = parse_progress(data) if data is not None else empty_progress()
        self.save_count = 0

    def load_progress(self) -> Dict[str, Any]:
        return copy.deepcopy(self._data)

    def save_progress(self, best_scores, last_session) -> None:
        self._data = {
            'best_scores': dict(best_scores),
            'last_session': copy.deepcopy(last_session),
        }
        self.save_count += 1


class JsonProgressStore(ProgressStore):
    """
    Progress store backed by a JSON file.

    A missing file means no progress yet. Unreadable or undecodable files
    raise PersistenceError.
    """

    def __init__(self, path: str):
        self.path = Path(path)

    def load_progress(self) -> Dict[str, Any]:
        if not self.path.exists():
            return empty_progress()
        try:
            with open(self.path, 'r') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise PersistenceError(f"Could not read progress from {self.path}: {e}") from e
        return parse_progress(data)

    def save_progress(self, best_scores, last_session) -> None:
        document = {
            # JSON object keys are strings
            'best_scores': {str(k): int(v) for k, v in best_scores.items()},
            'last_session': last_session,
            'timestamp': datetime.now().isoformat(),
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, 'w') as f:
                json.dump(document, f, indent=2)
        except (OSError, TypeError) as e:
            raise PersistenceError(f"Could not write progress to {self.path}: {e}") from e
