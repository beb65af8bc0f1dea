"""
Camera-relative layer slicing.

The player hides cross-sections of the cube by asking for "up", "down",
"left" or "right". Which absolute face that means depends on where the
camera is looking, so the request is first mapped through the camera's
right and up vectors.
"""

import math
import numpy as np
from dataclasses import dataclass, fields
from typing import Dict, NamedTuple, Sequence, Tuple

WORLD_UP = np.array([0.0, 1.0, 0.0])

DIRECTIONS = ('up', 'down', 'left', 'right')
OPPOSITE = {'up': 'down', 'down': 'up', 'left': 'right', 'right': 'left'}

# Below this length the camera is looking along the up axis
_DEGENERATE_EPS = 1e-9


class FaceControl(NamedTuple):
    """An absolute face: an axis ('x', 'y', 'z') and a side ('min', 'max')."""
    axis: str
    side: str

    @property
    def field(self) -> str:
        return f"{self.side}_{self.axis}"

    def mirror(self) -> 'FaceControl':
        return FaceControl(self.axis, 'min' if self.side == 'max' else 'max')


def camera_forward(angle_x: float, angle_y: float) -> np.ndarray:
    """
    Look direction of an orbit camera aimed at the origin.

    Args:
        angle_x: Elevation in radians
        angle_y: Azimuth in radians

    Returns:
        Unit vector from the camera position towards the origin.
    """
    position = np.array([
        math.sin(angle_y) * math.cos(angle_x),
        math.sin(angle_x),
        math.cos(angle_y) * math.cos(angle_x),
    ])
    return -position / np.linalg.norm(position)


def _normalize(v: np.ndarray) -> np.ndarray:
    length = np.linalg.norm(v)
    if length < _DEGENERATE_EPS:
        return np.zeros(3)
    return v / length


def get_relative_axes(forward: Sequence[float]) -> Dict[str, FaceControl]:
    """
    Map each relative direction to the absolute face it currently denotes.

    right = normalize(forward × up), true_up = normalize(right × forward).
    The right/left axis is whichever of x and z dominates `right`; the
    up/down axis is always y.

    Args:
        forward: Camera look direction

    Returns:
        Dictionary mapping 'up', 'down', 'left', 'right' to FaceControl.
    """
    forward = _normalize(np.asarray(forward, dtype=float))
    right = _normalize(np.cross(forward, WORLD_UP))
    if not right.any():
        # Looking straight along the up axis
        right = np.array([1.0, 0.0, 0.0])
    true_up = _normalize(np.cross(right, forward))

    right_axis = 'x' if abs(right[0]) > abs(right[2]) else 'z'
    right_component = right[0] if right_axis == 'x' else right[2]

    right_face = FaceControl(right_axis, 'max' if right_component > 0 else 'min')
    up_face = FaceControl('y', 'max' if true_up[1] >= 0 else 'min')

    return {
        'right': right_face,
        'left': right_face.mirror(),
        'up': up_face,
        'down': up_face.mirror(),
    }


@dataclass
class HiddenLayers:
    """
    Number of layers hidden from each of the six faces of the cube.

    Invariant after clamp(N): min_a + max_a <= N - 1 on every axis, so at
    least one layer per axis stays visible.
    """
    min_x: int = 0
    max_x: int = 0
    min_y: int = 0
    max_y: int = 0
    min_z: int = 0
    max_z: int = 0

    def as_dict(self) -> Dict[str, int]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def is_default(self) -> bool:
        return not any(self.as_dict().values())

    def reset(self) -> None:
        for f in fields(self):
            setattr(self, f.name, 0)

    def clamp(self, N: int) -> None:
        """
        Clamp every counter into [0, N-1] and restore the per-axis invariant.

        When an axis pair hides all N layers, the max face is reduced if the
        overflow is exactly one, otherwise the min face.
        """
        max_allowed = max(N - 1, 0)
        for f in fields(self):
            setattr(self, f.name, max(0, min(getattr(self, f.name), max_allowed)))

        for axis in ('x', 'y', 'z'):
            lo, hi = f"min_{axis}", f"max_{axis}"
            while getattr(self, lo) + getattr(self, hi) > max_allowed:
                overflow = getattr(self, lo) + getattr(self, hi) - max_allowed
                victim = hi if overflow == 1 else lo
                setattr(self, victim, getattr(self, victim) - 1)

    def request(self, direction: str, forward: Sequence[float], N: int) -> None:
        """
        Hide or reveal a layer in a camera-relative direction.

        If the opposite face already hides a layer, that layer is revealed
        instead of hiding another one on the requested side.

        Args:
            direction: 'up', 'down', 'left', 'right' or 'reset'
            forward: Camera look direction
            N: Board dimension
        """
        if direction == 'reset':
            self.reset()
            return
        if direction not in DIRECTIONS:
            raise ValueError(f"Unknown layer direction: {direction}. "
                             f"Valid options: {list(DIRECTIONS) + ['reset']}")

        axes = get_relative_axes(forward)
        control = axes[direction]
        opposite = axes[OPPOSITE[direction]]

        if getattr(self, opposite.field) > 0:
            setattr(self, opposite.field, getattr(self, opposite.field) - 1)
        else:
            setattr(self, control.field, getattr(self, control.field) + 1)
        self.clamp(N)

    def is_visible(self, x: int, y: int, z: int, N: int) -> bool:
        return (self.min_x <= x < N - self.max_x
                and self.min_y <= y < N - self.max_y
                and self.min_z <= z < N - self.max_z)

    def visibility_mask(self, N: int) -> np.ndarray:
        """Boolean (N, N, N) array of visible cells, indexed [x, y, z]."""
        mask = np.zeros((N, N, N), dtype=bool)
        mask[self.min_x:N - self.max_x,
             self.min_y:N - self.max_y,
             self.min_z:N - self.max_z] = True
        return mask

    def visible_ranges(self, N: int) -> Dict[str, Tuple[int, int]]:
        """First and last visible index on each axis."""
        return {
            'x': (self.min_x, N - self.max_x - 1),
            'y': (self.min_y, N - self.max_y - 1),
            'z': (self.min_z, N - self.max_z - 1),
        }
