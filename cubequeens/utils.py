"""
Utility functions for the 3D Queens puzzle engine.

This module contains:
- Attack checking functions (pure Python and JIT-compiled)
- Line index calculations for the 13 line families
- The level target table
"""

import jax
import jax.numpy as jnp
from typing import Dict, Tuple


Coordinate = Tuple[int, int, int]


# =============================================================================
# Attack Checking Functions
# =============================================================================

def check_attack(q1: Coordinate, q2: Coordinate) -> bool:
    """
    Check if two queens attack each other.

    Attack types:
    - Rook-type: share exactly two coordinates
    - Planar diagonal: one shared coordinate, equal differences on the others
    - Space diagonal: |dx| = |dy| = |dz| != 0

    A cell never attacks itself.

    Args:
        q1: First queen position (x, y, z)
        q2: Second queen position (x, y, z)

    Returns:
        Boolean indicating if queens attack each other.
    """
    x1, y1, z1 = q1
    x2, y2, z2 = q2

    dx = abs(x1 - x2)
    dy = abs(y1 - y2)
    dz = abs(z1 - z2)

    if dx == 0 and dy == 0 and dz == 0:
        return False

    # Rook-type
    if (dx == 0 and dy == 0) or (dx == 0 and dz == 0) or (dy == 0 and dz == 0):
        return True

    # Planar diagonals
    if dz == 0 and dx == dy:
        return True
    if dy == 0 and dx == dz:
        return True
    if dx == 0 and dy == dz:
        return True

    # Space diagonal
    if dx == dy == dz:
        return True

    return False


@jax.jit
def check_attack_jit(q1: jnp.ndarray, q2: jnp.ndarray) -> jnp.ndarray:
    """
    Check if two queens attack each other (JIT-compiled).

    Same relation as check_attack, over integer arrays.
    """
    d = jnp.abs(q1 - q2)
    dx, dy, dz = d[0], d[1], d[2]

    distinct = (dx + dy + dz) != 0

    rook = ((dx == 0) & (dy == 0)) | ((dx == 0) & (dz == 0)) | ((dy == 0) & (dz == 0))

    planar_xy = (dz == 0) & (dx == dy)
    planar_xz = (dy == 0) & (dx == dz)
    planar_yz = (dx == 0) & (dy == dz)

    space = (dx == dy) & (dy == dz)

    return distinct & (rook | planar_xy | planar_xz | planar_yz | space)


@jax.jit
def attack_matrix(queens: jnp.ndarray) -> jnp.ndarray:
    """
    Compute the pairwise attack matrix for a set of queens.

    Args:
        queens: Integer array of shape (k, 3)

    Returns:
        Boolean array of shape (k, k); entry (i, j) is True iff queen i
        attacks queen j. The diagonal is False.
    """
    row = jax.vmap(check_attack_jit, in_axes=(None, 0))
    return jax.vmap(row, in_axes=(0, None))(queens, queens)


# =============================================================================
# Line Index Functions
# =============================================================================

LINE_FAMILIES = (
    'rook_xy', 'rook_xz', 'rook_yz',
    'diag_xy1', 'diag_xy2', 'diag_xz1', 'diag_xz2', 'diag_yz1', 'diag_yz2',
    'space1', 'space2', 'space3', 'space4',
)


def get_line_indices(x: int, y: int, z: int, N: int) -> Dict[str, Tuple[int, int]]:
    """
    Calculate indices for all 13 line families for a position (x, y, z).

    Line families:
    - 3 rook lines: (x,y), (x,z), (y,z)
    - 6 planar diagonals: 2 per plane
    - 4 space diagonals

    Two distinct cells attack each other iff they share the index of at
    least one family.

    Args:
        x, y, z: Position coordinates
        N: Board dimension

    Returns:
        Dictionary mapping line family names to index tuples.
    """
    return {
        'rook_xy': (x, y),
        'rook_xz': (x, z),
        'rook_yz': (y, z),
        'diag_xy1': (z, x - y + N - 1),
        'diag_xy2': (z, x + y),
        'diag_xz1': (y, x - z + N - 1),
        'diag_xz2': (y, x + z),
        'diag_yz1': (x, y - z + N - 1),
        'diag_yz2': (x, y + z),
        # space1 (+1,+1,+1): indexed by (x-y, y-z)
        'space1': (x - y + N - 1, y - z + N - 1),
        # space2 (+1,+1,-1): indexed by (x-y, y+z)
        'space2': (x - y + N - 1, y + z),
        # space3 (+1,-1,+1): indexed by (x+y, y+z)
        'space3': (x + y, y + z),
        # space4 (-1,+1,+1): indexed by (x+y, y-z)
        'space4': (x + y, y - z + N - 1),
    }


# =============================================================================
# Level Targets
# =============================================================================

# Known maximum number of mutually non-attacking queens on an N×N×N cube
KNOWN_MAX_QUEENS: Tuple[int, ...] = (
    0, 1, 1, 4, 8, 12, 18, 24, 32, 42, 52, 64, 78, 94, 112, 132, 154,
)


def is_target_exact(N: int) -> bool:
    """Whether the target for N comes from the known table."""
    return 0 <= N < len(KNOWN_MAX_QUEENS)


def get_level_target(N: int) -> int:
    """
    Get the goal queen count for an N×N×N board.

    Beyond the known table the target is floor(N²/2). That value is a
    heuristic goal, not a proven optimum.

    Args:
        N: Board dimension

    Returns:
        Target queen count.
    """
    if N < 0:
        raise ValueError(f"Board size must be non-negative, got {N}")
    if is_target_exact(N):
        return KNOWN_MAX_QUEENS[N]
    return N * N // 2
