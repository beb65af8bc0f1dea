"""
Abstract interfaces for collaborators of the puzzle engine.

The engine never talks to storage directly; it goes through a
ProgressStore, so the backing service can be swapped without touching
game logic.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class PersistenceError(Exception):
    """Raised by a ProgressStore when loading or saving fails."""


class ProgressStore(ABC):
    """
    Abstract interface for best-score and session persistence.

    A progress document has the shape:
        {
            'best_scores': {N: best conflict-free queen count},
            'last_session': {'level': N, 'board': competition-format text} or None,
        }
    """

    @abstractmethod
    def load_progress(self) -> Dict[str, Any]:
        """
        Load the stored progress document.

        Returns:
            Progress document (defaults when nothing has been stored yet).

        Raises:
            PersistenceError: If the backing store cannot be read.
        """
        pass

    @abstractmethod
    def save_progress(
        self,
        best_scores: Dict[int, int],
        last_session: Optional[Dict[str, Any]]
    ) -> None:
        """
        Store best scores and the current session.

        Args:
            best_scores: Mapping N -> best conflict-free queen count
            last_session: {'level': N, 'board': text} or None

        Raises:
            PersistenceError: If the backing store cannot be written.
        """
        pass
