"""
Test suite for level progress tracking.

Tests verify:
1. State evaluation from conflict count, queen count and target
2. Edge-triggered completion and record notifications
3. Unlocking of the next level
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


# =============================================================================
# State Evaluation Tests
# =============================================================================

def test_evaluate_progress():
    from cubequeens.progress import evaluate_progress, ProgressState

    assert evaluate_progress(0, 8, 8) is ProgressState.ACHIEVED
    assert evaluate_progress(0, 9, 8) is ProgressState.ACHIEVED, "Exceeding the target still achieves"
    assert evaluate_progress(0, 7, 8) is ProgressState.INCOMPLETE
    assert evaluate_progress(2, 8, 8) is ProgressState.INCOMPLETE, "Conflicts block completion"
    assert evaluate_progress(0, 0, 0) is ProgressState.ACHIEVED

    print("Evaluate progress test passed")


def test_single_queen_level():
    """N=1: target 1, one queen completes the level."""
    from cubequeens.progress import ProgressTracker, ProgressState
    from cubequeens.utils import get_level_target

    tracker = ProgressTracker(1, get_level_target(1))
    assert tracker.state is ProgressState.INCOMPLETE

    update = tracker.update(0, 1, 0)
    assert update.state is ProgressState.ACHIEVED
    assert update.just_achieved
    assert update.record
    assert update.best_score == 1

    print("Single queen level test passed")


def test_target_reached_and_lost():
    """N=4 with target 8: 8 conflict-free queens achieve, removing one reverts."""
    from cubequeens.progress import ProgressTracker, ProgressState

    tracker = ProgressTracker(4, 8)
    best = 0
    for count in range(1, 8):
        update = tracker.update(0, count, best)
        best = update.best_score
        assert update.state is ProgressState.INCOMPLETE
        assert not update.just_achieved

    update = tracker.update(0, 8, best)
    assert update.state is ProgressState.ACHIEVED
    assert update.just_achieved
    assert update.record, "First completion beats the previous best of 7"
    assert not update.exceeds_target
    best = update.best_score

    update = tracker.update(0, 7, best)
    assert update.state is ProgressState.INCOMPLETE
    assert update.just_lost
    assert update.best_score == 8, "Best score must not drop"

    update = tracker.update(0, 8, best)
    assert update.just_achieved
    assert not update.record, "Matching the best is not a record"

    print("Target reached and lost test passed")


def test_notification_is_edge_triggered():
    from cubequeens.progress import ProgressTracker

    tracker = ProgressTracker(3, 4)
    assert tracker.update(0, 4, 0).just_achieved

    # Staying achieved, even with more queens, does not fire again
    update = tracker.update(0, 5, 4)
    assert tracker.achieved
    assert not update.just_achieved
    assert not update.record
    assert update.new_best
    assert update.exceeds_target

    print("Edge-triggered notification test passed")


def test_conflicts_block_best_score():
    from cubequeens.progress import ProgressTracker

    tracker = ProgressTracker(3, 4)
    update = tracker.update(2, 5, 1)
    assert not update.new_best
    assert update.best_score == 1
    assert not tracker.achieved

    print("Conflicts block best score test passed")


def test_reset():
    from cubequeens.progress import ProgressTracker, ProgressState

    tracker = ProgressTracker(2, 1)
    tracker.update(0, 1, 0)
    assert tracker.achieved and tracker.unlocked

    tracker.reset()
    assert tracker.state is ProgressState.INCOMPLETE
    assert not tracker.unlocked

    # A completed board after reset notifies again
    assert tracker.update(0, 1, 1).just_achieved

    print("Reset test passed")


# =============================================================================
# Unlock Tests
# =============================================================================

def test_unlock_follows_achieved():
    from cubequeens.progress import ProgressTracker

    tracker = ProgressTracker(3, 4)
    update = tracker.update(0, 3, 0)
    assert not update.unlocked

    update = tracker.update(0, 4, 3)
    assert update.unlocked and update.just_unlocked

    update = tracker.update(1, 5, 4)
    assert not update.unlocked, "Losing completion locks again"

    print("Unlock follows achieved test passed")


def test_unlock_threshold():
    """With a threshold of N, N conflict-free queens unlock before the target."""
    from cubequeens.progress import ProgressTracker, ProgressState

    tracker = ProgressTracker(5, 12, unlock_threshold=5)
    update = tracker.update(0, 4, 0)
    assert not update.unlocked

    update = tracker.update(0, 5, 4)
    assert update.unlocked
    assert update.just_unlocked
    assert update.state is ProgressState.INCOMPLETE

    update = tracker.update(2, 6, 5)
    assert not update.unlocked

    print("Unlock threshold test passed")


def run_all_tests():
    """Run all tests"""
    print("\n" + "=" * 60)
    print("Running Progress Tests")
    print("=" * 60 + "\n")

    test_evaluate_progress()
    test_single_queen_level()
    test_target_reached_and_lost()
    test_notification_is_edge_triggered()
    test_conflicts_block_best_score()
    test_reset()
    test_unlock_follows_achieved()
    test_unlock_threshold()

    print("\n" + "=" * 60)
    print("All tests passed!")
    print("=" * 60 + "\n")


if __name__ == "__main__":
    run_all_tests()
