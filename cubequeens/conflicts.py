"""
Conflict engine for the 3D Queens puzzle.

Given the occupied cells, find every queen that attacks at least one other
queen. Three implementations with identical output are provided:
- iter: O(k²) pairwise scan with check_attack (ground truth)
- hash: bucket queens by the 13 line families
- jit:  JAX attack matrix, reduced row-wise
"""

import numpy as np
import jax.numpy as jnp
from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, Iterable, List, Set

from .utils import (
    Coordinate,
    LINE_FAMILIES,
    attack_matrix,
    check_attack,
    get_line_indices,
)


# =============================================================================
# Conflict Functions
# =============================================================================

def conflicts_iter(queens: Iterable[Coordinate]) -> Set[Coordinate]:
    """
    Find conflicting queens by examining every unordered pair once.

    Args:
        queens: Occupied cells

    Returns:
        Set of queens involved in at least one attack.
    """
    queens_list = list(queens)
    conflict_set = set()
    n = len(queens_list)
    for i in range(n):
        for j in range(i + 1, n):
            if check_attack(queens_list[i], queens_list[j]):
                conflict_set.add(queens_list[i])
                conflict_set.add(queens_list[j])
    return conflict_set


def conflicts_hash(queens: Iterable[Coordinate]) -> Set[Coordinate]:
    """
    Find conflicting queens by bucketing them along the 13 line families.

    Every line holding two or more queens puts all of them in conflict.
    """
    queens_list = list(queens)
    if len(queens_list) < 2:
        return set()

    # Any consistent N works for the index offsets; use the bounding size
    N = max(max(q) for q in queens_list) + 1

    buckets: Dict[str, Dict[tuple, List[Coordinate]]] = {
        family: defaultdict(list) for family in LINE_FAMILIES
    }
    for q in queens_list:
        for family, index in get_line_indices(q[0], q[1], q[2], N).items():
            buckets[family][index].append(q)

    conflict_set = set()
    for lines in buckets.values():
        for members in lines.values():
            if len(members) > 1:
                conflict_set.update(members)
    return conflict_set


def conflicts_jit(queens: Iterable[Coordinate]) -> Set[Coordinate]:
    """
    Find conflicting queens from the JIT-compiled attack matrix.
    """
    queens_list = list(queens)
    if len(queens_list) < 2:
        return set()

    matrix = np.asarray(attack_matrix(jnp.array(queens_list, dtype=jnp.int32)))
    endangered = matrix.any(axis=1)
    return {q for q, hit in zip(queens_list, endangered) if hit}


def count_attacking_pairs(queens: Iterable[Coordinate]) -> int:
    """Count attacking pairs using the naive pairwise scan."""
    queens_list = list(queens)
    count = 0
    n = len(queens_list)
    for i in range(n):
        for j in range(i + 1, n):
            if check_attack(queens_list[i], queens_list[j]):
                count += 1
    return count


CONFLICT_METHODS: Dict[str, Callable[[Iterable[Coordinate]], Set[Coordinate]]] = {
    'iter': conflicts_iter,
    'hash': conflicts_hash,
    'jit': conflicts_jit,
}


def get_conflict_method(name: str) -> Callable[[Iterable[Coordinate]], Set[Coordinate]]:
    """
    Get conflict function by name.

    Args:
        name: Method name ('iter', 'hash', 'jit')

    Returns:
        Conflict function.
    """
    if name not in CONFLICT_METHODS:
        raise ValueError(f"Unknown conflict method: {name}. "
                         f"Valid options: {list(CONFLICT_METHODS.keys())}")
    return CONFLICT_METHODS[name]


def conflicts(queens: Iterable[Coordinate], method: str = 'iter') -> Set[Coordinate]:
    """Compute the conflict set of a queen set."""
    return get_conflict_method(method)(queens)


# =============================================================================
# Conflict Report
# =============================================================================

@dataclass(frozen=True)
class ConflictReport:
    """
    Result of a conflict scan over one board state.

    Attributes:
        queens: Occupied cells that were scanned
        conflicts: Queens attacking at least one other queen
    """
    queens: FrozenSet[Coordinate]
    conflicts: FrozenSet[Coordinate]

    @property
    def queen_count(self) -> int:
        return len(self.queens)

    @property
    def conflict_count(self) -> int:
        return len(self.conflicts)

    @property
    def is_conflict_free(self) -> bool:
        return not self.conflicts

    @property
    def safe_queens(self) -> FrozenSet[Coordinate]:
        return self.queens - self.conflicts


def analyze(queens: Iterable[Coordinate], method: str = 'iter') -> ConflictReport:
    """
    Scan a queen set and wrap the result in a ConflictReport.

    Args:
        queens: Occupied cells
        method: Conflict method name

    Returns:
        ConflictReport for the given queens.
    """
    queens = frozenset(queens)
    return ConflictReport(queens=queens, conflicts=frozenset(conflicts(queens, method)))
