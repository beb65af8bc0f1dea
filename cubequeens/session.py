"""
Game session for the 3D Queens puzzle.

A GameSession owns everything one player mutates: the board, the progress
tracker, the hidden-layer counters and the best-score table. Each toggle
runs the board mutation, conflict scan, progress update and best-score
update as one synchronous step before anything is persisted.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Iterable, Optional, Sequence, Tuple

import numpy as np

from .board import Board
from .config import Config
from .conflicts import ConflictReport, analyze
from .interfaces import ProgressStore
from .layers import HiddenLayers
from .persistence import empty_progress, parse_progress
from .progress import ProgressState, ProgressTracker, ProgressUpdate
from .utils import Coordinate, get_level_target, is_target_exact

logger = logging.getLogger(__name__)

# Largest level a stored session may restore
MAX_RESTORE_LEVEL = 64


@dataclass(frozen=True)
class SessionSnapshot:
    """
    Plain-data view of a session for renderers and UIs.

    Attributes:
        N: Board dimension (equal to the level number)
        queens: Occupied cells
        conflicts: Queens attacking at least one other queen
        hidden_layers: Hide count per face ('min_x' ... 'max_z')
        target: Goal queen count (None in creative mode)
        target_exact: Whether the target is a known maximum
        state: Progress state
        best_score: Best conflict-free queen count for N
        just_achieved: The last update reached the target
        record: The last update reached the target with a new best
        unlocked: The next level may be started
        creative: Creative mode is active
        offline: Progress is not being persisted
    """
    N: int
    queens: FrozenSet[Coordinate]
    conflicts: FrozenSet[Coordinate]
    hidden_layers: Dict[str, int]
    target: Optional[int]
    target_exact: bool
    state: ProgressState
    best_score: int
    just_achieved: bool
    record: bool
    unlocked: bool
    creative: bool
    offline: bool

    @property
    def level(self) -> int:
        return self.N

    @property
    def queen_count(self) -> int:
        return len(self.queens)

    @property
    def conflict_count(self) -> int:
        return len(self.conflicts)


class GameSession:
    """
    One player's puzzle session.

    Args:
        store: Optional ProgressStore; without one the session is offline
        config: Session configuration
    """

    def __init__(self, store: Optional[ProgressStore] = None, config: Optional[Config] = None):
        self.config = config or Config()
        self.creative = self.config.creative_mode
        self.best_scores: Dict[int, int] = {}
        self.layers = HiddenLayers()

        self._store = store
        self._store_usable = store is not None
        self.offline = store is None

        self.board: Optional[Board] = None
        self.tracker: Optional[ProgressTracker] = None
        self._report = ConflictReport(frozenset(), frozenset())

    # -------------------------------------------------------------------------
    # Startup
    # -------------------------------------------------------------------------

    def load(self) -> SessionSnapshot:
        """
        Load stored progress once and start the first level.

        The stored session is restored when present, otherwise the
        configured start level begins with an empty board.
        """
        progress = empty_progress()
        if self._store is not None:
            try:
                progress = parse_progress(self._store.load_progress())
            except Exception as e:  # any backend failure means offline
                logger.warning("Could not load progress (%s); running in offline mode", e)
                self._store_usable = False
                self.offline = True

        self.best_scores = dict(progress['best_scores'])

        last_session = progress['last_session']
        if last_session is not None:
            return self.restore_session(last_session['level'], last_session.get('board'))
        return self.start_level(self.config.start_level)

    def restore_session(self, level: int, board_text: Any) -> SessionSnapshot:
        """
        Restore a saved level; malformed board data yields an empty board.

        Levels above MAX_RESTORE_LEVEL are not restored; the configured
        start level begins instead.
        """
        if level > MAX_RESTORE_LEVEL:
            logger.warning("Discarding saved session: level %d exceeds %d",
                           level, MAX_RESTORE_LEVEL)
            return self.start_level(self.config.start_level)

        queens = None
        if isinstance(board_text, str):
            try:
                queens = Board.from_text(level, board_text).get_queens()
            except ValueError as e:
                logger.warning("Discarding malformed saved board for level %d: %s", level, e)
        elif board_text is not None:
            logger.warning("Discarding saved board for level %d: expected text, got %s",
                           level, type(board_text).__name__)
        return self.start_level(level, queens)

    # -------------------------------------------------------------------------
    # Level management
    # -------------------------------------------------------------------------

    @property
    def N(self) -> int:
        return self.board.N

    @property
    def level(self) -> int:
        return self.board.N

    def start_level(self, N: int, initial_queens: Optional[Iterable[Coordinate]] = None) -> SessionSnapshot:
        """
        Start level N on a fresh N×N×N board.

        The board, hidden layers and progress state are replaced, not merged.

        Raises:
            ValueError: If N is not a positive integer or the initial
                queens do not fit the board.
        """
        board = Board(N, initial_queens)
        target = get_level_target(board.N)

        self.board = board
        self.layers.reset()
        self.tracker = ProgressTracker(
            board.N, target,
            unlock_threshold=board.N if self.config.unlock_at_n_queens else None,
        )

        if self.creative:
            logger.info("Starting level %d in creative mode", board.N)
        else:
            logger.info("Starting level %d (%d×%d×%d board, target %d%s)",
                        board.N, board.N, board.N, board.N, target,
                        "" if is_target_exact(board.N) else ", estimated")

        update = self._evaluate()
        self._persist()
        return self._snapshot(update)

    def reset_level(self) -> SessionSnapshot:
        """Clear the board and force the level back to incomplete."""
        self.board.clear()
        self.tracker.reset()
        logger.info("Level %d reset", self.level)
        update = self._evaluate()
        self._persist()
        return self._snapshot(update)

    def next_level(self) -> bool:
        """Advance to the next level if the current one is unlocked."""
        if self.creative or not self.tracker.unlocked:
            return False
        self.start_level(self.level + 1)
        return True

    def navigate_level(self, delta: int) -> bool:
        """Jump to level + delta; levels below 1 are ignored."""
        new_level = self.level + delta
        if new_level < 1:
            return False
        self.start_level(new_level)
        return True

    def toggle_creative_mode(self) -> SessionSnapshot:
        """Switch creative mode and reload the current level."""
        self.creative = not self.creative
        return self.start_level(self.level)

    # -------------------------------------------------------------------------
    # Player actions
    # -------------------------------------------------------------------------

    def toggle(self, x, y, z) -> Optional[SessionSnapshot]:
        """
        Place or remove a queen and re-evaluate the level.

        Returns:
            Snapshot after the update, or None if the coordinate was
            rejected (nothing changes).
        """
        if not self.board.toggle(x, y, z):
            logger.warning("Rejected toggle at (%r, %r, %r): outside the %d×%d×%d board",
                           x, y, z, self.N, self.N, self.N)
            return None

        logger.debug("Toggled (%d, %d, %d)", x, y, z)
        update = self._evaluate()
        self._persist()
        return self._snapshot(update)

    def request_layer(self, direction: str, forward: Sequence[float]) -> Dict[str, int]:
        """
        Hide or reveal a layer relative to the camera, or reset all layers.

        Returns:
            Hide count per face after the request.
        """
        self.layers.request(direction, forward, self.N)
        return self.layers.as_dict()

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def report(self) -> ConflictReport:
        return self._report

    @property
    def target(self) -> Optional[int]:
        return None if self.creative else self.tracker.target

    @property
    def state(self) -> ProgressState:
        return self.tracker.state

    @property
    def best_score(self) -> int:
        return self.best_scores.get(self.N, 0)

    def is_visible(self, x: int, y: int, z: int) -> bool:
        return self.layers.is_visible(x, y, z, self.N)

    def visibility_mask(self) -> np.ndarray:
        return self.layers.visibility_mask(self.N)

    def visible_ranges(self) -> Dict[str, Tuple[int, int]]:
        return self.layers.visible_ranges(self.N)

    def session_data(self) -> Dict[str, Any]:
        return {'level': self.level, 'board': self.board.to_text()}

    def snapshot(self) -> SessionSnapshot:
        """Current state; edge events are only reported by the mutation that caused them."""
        return self._snapshot(None)

    def _snapshot(self, update: Optional[ProgressUpdate]) -> SessionSnapshot:
        return SessionSnapshot(
            N=self.N,
            queens=self._report.queens,
            conflicts=self._report.conflicts,
            hidden_layers=self.layers.as_dict(),
            target=self.target,
            target_exact=is_target_exact(self.N),
            state=self.tracker.state,
            best_score=self.best_score,
            just_achieved=update is not None and update.just_achieved,
            record=update is not None and update.record,
            unlocked=not self.creative and self.tracker.unlocked,
            creative=self.creative,
            offline=self.offline,
        )

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _evaluate(self) -> Optional[ProgressUpdate]:
        self._report = analyze(self.board.get_queens(), self.config.conflict_method)

        if self.creative:
            return None

        update = self.tracker.update(
            self._report.conflict_count, self._report.queen_count, self.best_score
        )
        if update.new_best:
            self.best_scores[self.N] = update.best_score
            logger.info("New best for N=%d: %d queens", self.N, update.best_score)
        if update.just_achieved:
            logger.info("Level %d complete with %d queens (target %d)",
                        self.N, update.queen_count, update.target)
        elif update.just_lost:
            logger.debug("Level %d no longer complete", self.N)

        return update

    def _persist(self) -> None:
        if not self._store_usable:
            return
        try:
            self._store.save_progress(dict(self.best_scores), self.session_data())
        except Exception as e:  # any backend failure means offline
            logger.warning("Could not save progress (%s); continuing offline", e)
            self.offline = True
            return
        self.offline = False
