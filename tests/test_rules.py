"""
Test suite for the puzzle rules.

Tests verify:
1. Attack rule (pure Python and JIT) and its 13 line families
2. Conflict engine implementations agree with each other
3. Level target table
4. Board occupancy and competition-format text
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import itertools

import jax.numpy as jnp
import numpy as np


# 4 mutually non-attacking queens on a 3×3×3 board (the N=3 target)
SOLUTION_N3 = [(0, 0, 0), (1, 2, 0), (2, 0, 1), (0, 1, 2)]


def all_cells(N):
    return list(itertools.product(range(N), repeat=3))


# =============================================================================
# Attack Rule Tests
# =============================================================================

def test_central_queen():
    """
    On a 3x3x3 board, a queen at (1,1,1) attacks:
    - (0,0,0) and (2,2,2) via space diagonals
    - (0,1,1) and (2,1,1) via rook lines
    - (0,0,1) and (2,2,1) via planar diagonals in the z=1 plane
    """
    from cubequeens.utils import check_attack

    center = (1, 1, 1)

    assert check_attack(center, (0, 0, 0)), "Should attack (0,0,0) via space diagonal"
    assert check_attack(center, (2, 2, 2)), "Should attack (2,2,2) via space diagonal"
    assert check_attack(center, (0, 1, 1)), "Should attack (0,1,1) via rook line"
    assert check_attack(center, (2, 1, 1)), "Should attack (2,1,1) via rook line"
    assert check_attack(center, (0, 0, 1)), "Should attack (0,0,1) via planar diagonal"
    assert check_attack(center, (2, 2, 1)), "Should attack (2,2,1) via planar diagonal"
    assert check_attack(center, (1, 0, 2)), "Should attack (1,0,2) via planar diagonal (x=1)"

    print("Central queen test passed")


def test_non_attacking_pairs():
    """Cells off every line do not attack."""
    from cubequeens.utils import check_attack

    # No shared coordinate, differences pairwise distinct
    assert not check_attack((0, 0, 0), (2, 1, 3))
    # One shared coordinate, unequal differences on the other two
    assert not check_attack((0, 0, 0), (0, 1, 2))
    assert not check_attack((0, 0, 0), (2, 0, 1))
    # No shared coordinate, two equal differences only
    assert not check_attack((0, 0, 0), (1, 1, 2))

    print("Non-attacking pairs test passed")


def test_attack_irreflexive_and_symmetric():
    """attacks(a, a) is False and attacks(a, b) == attacks(b, a)."""
    from cubequeens.utils import check_attack

    cells = all_cells(4)
    for a in cells:
        assert not check_attack(a, a), f"{a} should not attack itself"
    for a, b in itertools.combinations(cells, 2):
        assert check_attack(a, b) == check_attack(b, a), f"Asymmetric for {a}, {b}"

    print("Irreflexive/symmetric test passed")


def test_attack_matches_line_families():
    """Two distinct cells attack iff they share one of the 13 line indices."""
    from cubequeens.utils import check_attack, get_line_indices, LINE_FAMILIES

    N = 4
    cells = all_cells(N)
    for a, b in itertools.combinations(cells, 2):
        la = get_line_indices(*a, N)
        lb = get_line_indices(*b, N)
        shared = any(la[f] == lb[f] for f in LINE_FAMILIES)
        assert shared == check_attack(a, b), f"Line families disagree for {a}, {b}"

    assert len(get_line_indices(1, 2, 3, N)) == 13, "Should have 13 line families"

    print("Line family test passed")


def test_attack_jit_matches_python():
    """JIT predicate and attack matrix agree with the pure Python rule."""
    from cubequeens.utils import check_attack, check_attack_jit, attack_matrix

    assert bool(check_attack_jit(jnp.array([0, 0, 0]), jnp.array([1, 1, 1])))
    assert not bool(check_attack_jit(jnp.array([0, 0, 0]), jnp.array([2, 1, 3])))
    assert not bool(check_attack_jit(jnp.array([1, 2, 0]), jnp.array([1, 2, 0])))

    cells = all_cells(3)
    matrix = np.asarray(attack_matrix(jnp.array(cells, dtype=jnp.int32)))
    assert matrix.shape == (27, 27)
    for i, a in enumerate(cells):
        for j, b in enumerate(cells):
            assert bool(matrix[i, j]) == check_attack(a, b), f"Mismatch for {a}, {b}"

    print("JIT attack test passed")


# =============================================================================
# Conflict Engine Tests
# =============================================================================

def test_conflicts_trivial():
    """conflicts(∅) == ∅ and conflicts({q}) == ∅ for every method."""
    from cubequeens.conflicts import conflicts, CONFLICT_METHODS

    for method in CONFLICT_METHODS:
        assert conflicts(set(), method) == set(), f"{method}: empty set"
        assert conflicts({(1, 2, 3)}, method) == set(), f"{method}: single queen"

    print("Trivial conflicts test passed")


def test_conflicts_known_placements():
    from cubequeens.conflicts import conflicts, CONFLICT_METHODS

    for method in CONFLICT_METHODS:
        assert conflicts(SOLUTION_N3, method) == set(), f"{method}: solution should be conflict-free"

        queens = SOLUTION_N3 + [(1, 1, 1)]
        result = conflicts(queens, method)
        # (1,1,1) attacks (0,0,0) on a space diagonal and (1,2,0) on a planar diagonal
        assert (1, 1, 1) in result
        assert (0, 0, 0) in result
        assert (1, 2, 0) in result

        pair = [(0, 0, 0), (0, 0, 3)]
        assert conflicts(pair, method) == set(pair), f"{method}: rook pair"

    print("Known placements test passed")


def test_conflict_methods_agree():
    """iter, hash and jit produce identical sets on random placements."""
    from cubequeens.conflicts import conflicts_iter, conflicts_hash, conflicts_jit

    rng = np.random.default_rng(42)
    for N in [2, 3, 4, 5]:
        cells = all_cells(N)
        for _ in range(10):
            k = int(rng.integers(0, min(len(cells), 2 * N * N) + 1))
            idx = rng.choice(len(cells), size=k, replace=False)
            queens = [cells[i] for i in idx]

            expected = conflicts_iter(queens)
            assert conflicts_hash(queens) == expected, f"hash mismatch for N={N}, {queens}"
            assert conflicts_jit(queens) == expected, f"jit mismatch for N={N}, {queens}"

    print("Conflict methods agreement test passed")


def test_conflict_report():
    from cubequeens.conflicts import analyze, count_attacking_pairs

    report = analyze(SOLUTION_N3 + [(1, 1, 1)])
    assert report.queen_count == 5
    assert report.conflict_count == len(report.conflicts)
    assert not report.is_conflict_free
    # The centre queen reaches every queen of the solution
    assert report.conflicts == report.queens
    assert report.safe_queens == frozenset()

    assert analyze(SOLUTION_N3, 'hash').is_conflict_free

    # Example: all 6 pairs of these 4 queens attack
    queens = [(0, 0, 0), (0, 0, 1), (1, 1, 0), (1, 1, 1)]
    assert count_attacking_pairs(queens) == 6

    print("Conflict report test passed")


def test_unknown_conflict_method():
    from cubequeens.conflicts import get_conflict_method

    try:
        get_conflict_method('bogus')
        assert False, "Should raise ValueError"
    except ValueError:
        pass

    print("Unknown method test passed")


# =============================================================================
# Level Target Tests
# =============================================================================

def test_level_targets():
    from cubequeens.utils import get_level_target, is_target_exact, KNOWN_MAX_QUEENS

    expected = [0, 1, 1, 4, 8, 12, 18, 24, 32, 42, 52, 64, 78, 94, 112, 132, 154]
    assert list(KNOWN_MAX_QUEENS) == expected
    for N, value in enumerate(expected):
        assert get_level_target(N) == value, f"target({N}) should be {value}"
        assert is_target_exact(N)

    # Beyond the table: floor(N²/2)
    assert get_level_target(17) == 144
    assert get_level_target(20) == 200
    assert not is_target_exact(17)

    try:
        get_level_target(-1)
        assert False, "Should raise ValueError"
    except ValueError:
        pass

    print("Level target test passed")


# =============================================================================
# Board Tests
# =============================================================================

def test_board_initialization():
    from cubequeens.board import Board

    for N in [1, 2, 3, 4]:
        board = Board(N)
        assert board.N == N
        assert board.get_board().shape == (N, N, N), "Board shape should be N×N×N"
        assert board.queen_count == 0
        assert board.get_queens() == set()

    board = Board(3, SOLUTION_N3)
    assert board.get_queens() == set(SOLUTION_N3)
    assert board.get_board().shape == (3, 3, 3)

    for bad in [0, -1, 2.5, True]:
        try:
            Board(bad)
            assert False, f"Board({bad!r}) should raise ValueError"
        except ValueError:
            pass

    print("Board initialization test passed")


def test_board_toggle():
    from cubequeens.board import Board

    board = Board(3)
    assert board.toggle(1, 2, 0)
    assert board.is_occupied(1, 2, 0)
    assert board.queen_count == 1
    assert board.toggle(1, 2, 0)
    assert not board.is_occupied(1, 2, 0)

    # Out of range and non-integral coordinates are rejected
    before = board.get_board().copy()
    for cell in [(3, 0, 0), (-1, 0, 0), (0, 0, 5), (1.5, 0, 0), ('1', 0, 0)]:
        assert not board.toggle(*cell), f"{cell} should be rejected"
    assert np.array_equal(board.get_board(), before), "Rejected toggles must not change occupancy"
    assert board.get_board().shape == (3, 3, 3)

    print("Board toggle test passed")


def test_board_text_format():
    from cubequeens.board import Board

    board = Board(3, SOLUTION_N3)
    text = board.to_text()
    assert text.splitlines()[0] == "0,0,0"
    assert len(text.splitlines()) == 4

    restored = Board.from_text(3, text)
    assert restored == board

    assert Board.from_text(3, "") == Board(3)

    for bad in ["0,0", "a,b,c", "0,0,3", "0,0,0\n0,0,0"]:
        try:
            Board.from_text(3, bad)
            assert False, f"{bad!r} should raise ValueError"
        except ValueError:
            pass

    copy = board.copy()
    copy.toggle(0, 0, 0)
    assert board.is_occupied(0, 0, 0), "Copy must not share occupancy"

    print("Board text format test passed")


def run_all_tests():
    """Run all tests"""
    print("\n" + "=" * 60)
    print("Running Rule Tests")
    print("=" * 60 + "\n")

    test_central_queen()
    test_non_attacking_pairs()
    test_attack_irreflexive_and_symmetric()
    test_attack_matches_line_families()
    test_attack_jit_matches_python()
    test_conflicts_trivial()
    test_conflicts_known_placements()
    test_conflict_methods_agree()
    test_conflict_report()
    test_unknown_conflict_method()
    test_level_targets()
    test_board_initialization()
    test_board_toggle()
    test_board_text_format()

    print("\n" + "=" * 60)
    print("All tests passed!")
    print("=" * 60 + "\n")


if __name__ == "__main__":
    run_all_tests()
