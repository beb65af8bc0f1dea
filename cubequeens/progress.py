"""
Progress tracking for a single level.

The state is a pure function of the conflict count, queen count and target,
re-evaluated after every board mutation. Notifications are edge-triggered:
the tracker remembers the previous state only to report transitions.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class ProgressState(Enum):
    INCOMPLETE = 'incomplete'
    ACHIEVED = 'achieved'


def evaluate_progress(conflict_count: int, queen_count: int, target: int) -> ProgressState:
    """Level is achieved when the placement is conflict-free and meets the target."""
    if conflict_count == 0 and queen_count >= target:
        return ProgressState.ACHIEVED
    return ProgressState.INCOMPLETE


@dataclass(frozen=True)
class ProgressUpdate:
    """
    Outcome of re-evaluating progress after one mutation.

    Attributes:
        state: State after the mutation
        previous_state: State before the mutation
        queen_count: Queens on the board
        conflict_count: Queens involved in at least one attack
        target: Goal queen count for the level
        best_score: Best conflict-free count for N after this update
        new_best: The best score was raised by this update
        record: Level just achieved with more queens than the previous best
        unlocked: Progression to the next level is allowed
        just_unlocked: Progression became allowed with this update
    """
    state: ProgressState
    previous_state: ProgressState
    queen_count: int
    conflict_count: int
    target: int
    best_score: int
    new_best: bool = False
    record: bool = False
    unlocked: bool = False
    just_unlocked: bool = False

    @property
    def just_achieved(self) -> bool:
        return (self.previous_state is ProgressState.INCOMPLETE
                and self.state is ProgressState.ACHIEVED)

    @property
    def just_lost(self) -> bool:
        return (self.previous_state is ProgressState.ACHIEVED
                and self.state is ProgressState.INCOMPLETE)

    @property
    def exceeds_target(self) -> bool:
        return self.state is ProgressState.ACHIEVED and self.queen_count > self.target


class ProgressTracker:
    """
    Progress state machine for one board size.

    Args:
        N: Board dimension
        target: Goal queen count
        unlock_threshold: Optional lesser conflict-free queen count that
            already unlocks the next level
    """

    def __init__(self, N: int, target: int, unlock_threshold: Optional[int] = None):
        self.N = N
        self.target = target
        self.unlock_threshold = unlock_threshold
        self._state = ProgressState.INCOMPLETE
        self._unlocked = False

    @property
    def state(self) -> ProgressState:
        return self._state

    @property
    def achieved(self) -> bool:
        return self._state is ProgressState.ACHIEVED

    @property
    def unlocked(self) -> bool:
        return self._unlocked

    def _is_unlocked(self, state: ProgressState, conflict_count: int, queen_count: int) -> bool:
        if state is ProgressState.ACHIEVED:
            return True
        if self.unlock_threshold is None:
            return False
        return conflict_count == 0 and queen_count >= self.unlock_threshold

    def update(self, conflict_count: int, queen_count: int, best_score: int) -> ProgressUpdate:
        """
        Re-evaluate after a mutation.

        Args:
            conflict_count: Size of the conflict set
            queen_count: Size of the queen set
            best_score: Stored best conflict-free count for N

        Returns:
            ProgressUpdate describing the new state and any edge events.
        """
        previous = self._state
        was_unlocked = self._unlocked

        state = evaluate_progress(conflict_count, queen_count, self.target)
        unlocked = self._is_unlocked(state, conflict_count, queen_count)

        new_best = conflict_count == 0 and queen_count > best_score
        record = (previous is ProgressState.INCOMPLETE
                  and state is ProgressState.ACHIEVED
                  and queen_count > best_score)

        self._state = state
        self._unlocked = unlocked

        if state is not previous:
            logger.debug("N=%d: %s -> %s (queens=%d, conflicts=%d, target=%d)",
                         self.N, previous.value, state.value,
                         queen_count, conflict_count, self.target)

        return ProgressUpdate(
            state=state,
            previous_state=previous,
            queen_count=queen_count,
            conflict_count=conflict_count,
            target=self.target,
            best_score=queen_count if new_best else best_score,
            new_best=new_best,
            record=record,
            unlocked=unlocked,
            just_unlocked=unlocked and not was_unlocked,
        )

    def reset(self) -> None:
        """Force the machine back to INCOMPLETE."""
        self._state = ProgressState.INCOMPLETE
        self._unlocked = False
