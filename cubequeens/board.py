"""
Board state for the 3D Queens puzzle.

The board owns an N×N×N boolean occupancy grid indexed [x, y, z]. The
queen set is always derived from the grid, never stored separately.
"""

import numpy as np
from numbers import Integral
from typing import Iterable, Optional, Set

from .utils import Coordinate


class Board:
    """
    Occupancy state for one level.

    Attributes:
        _N: Board dimension
        _board: 3D boolean occupancy grid of shape (N, N, N)
    """

    def __init__(self, N: int, queens: Optional[Iterable[Coordinate]] = None):
        """
        Initialize an empty board, optionally placing queens.

        Args:
            N: Board dimension (positive integer)
            queens: Optional initial queen positions

        Raises:
            ValueError: If N is not a positive integer or a queen is off the board.
        """
        if isinstance(N, bool) or not isinstance(N, Integral) or N < 1:
            raise ValueError(f"Board size must be a positive integer, got {N!r}")
        self._N = int(N)
        self._board = np.zeros((self._N, self._N, self._N), dtype=bool)

        if queens is not None:
            for q in queens:
                if not self.in_bounds(*q):
                    raise ValueError(f"Queen {tuple(q)} is outside a {N}×{N}×{N} board")
                self._board[q[0], q[1], q[2]] = True

    @property
    def N(self) -> int:
        return self._N

    @property
    def queen_count(self) -> int:
        return int(np.count_nonzero(self._board))

    def get_board(self) -> np.ndarray:
        """Get 3D occupancy grid."""
        return self._board

    def in_bounds(self, x, y, z) -> bool:
        for c in (x, y, z):
            if isinstance(c, bool) or not isinstance(c, Integral):
                return False
            if not 0 <= c < self._N:
                return False
        return True

    def is_occupied(self, x: int, y: int, z: int) -> bool:
        return self.in_bounds(x, y, z) and bool(self._board[x, y, z])

    def get_queens(self) -> Set[Coordinate]:
        """Derive the queen set from the occupancy grid."""
        return {(int(x), int(y), int(z)) for x, y, z in np.argwhere(self._board)}

    def toggle(self, x, y, z) -> bool:
        """
        Place or remove a queen.

        Returns:
            True if the cell was flipped, False if the coordinate was
            rejected (the board is left untouched).
        """
        if not self.in_bounds(x, y, z):
            return False
        self._board[x, y, z] = not self._board[x, y, z]
        return True

    def clear(self) -> None:
        self._board[...] = False

    def copy(self) -> 'Board':
        """Create a deep copy."""
        new_board = Board.__new__(Board)
        new_board._N = self._N
        new_board._board = self._board.copy()
        return new_board

    def to_text(self) -> str:
        """
        Serialize in competition format: one 'x,y,z' row per queen.

        Rows are sorted so equal boards serialize identically.
        """
        return "".join(f"{x},{y},{z}\n" for x, y, z in sorted(self.get_queens()))

    @classmethod
    def from_text(cls, N: int, text: str) -> 'Board':
        """
        Parse a competition-format board.

        Blank lines are ignored.

        Raises:
            ValueError: On malformed rows, cells off the board or duplicates.
        """
        queens = []
        for lineno, line in enumerate(text.splitlines(), start=1):
            line = line.strip()
            if not line:
                continue
            parts = line.split(',')
            if len(parts) != 3:
                raise ValueError(f"Line {lineno}: expected 'x,y,z', got {line!r}")
            queens.append(tuple(int(p) for p in parts))

        if len(set(queens)) != len(queens):
            raise ValueError("Duplicate queen positions")
        return cls(N, queens)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._N == other._N and bool(np.array_equal(self._board, other._board))

    def __repr__(self) -> str:
        return f"Board(N={self._N}, queens={self.queen_count})"
