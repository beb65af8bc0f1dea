"""
Input adapter for a GameSession.

Translates key codes, camera drags and text commands into session calls.
"""

import math
import numpy as np
from typing import Callable, Dict, Optional

from .layers import camera_forward
from .session import GameSession, SessionSnapshot

# Radians of camera rotation per pixel of drag
DRAG_SENSITIVITY = 0.008


class CommandError(ValueError):
    """Raised for text commands that cannot be parsed."""


class OrbitCamera:
    """
    Camera orbiting the cube centre.

    Attributes:
        angle_x: Elevation in radians, clamped to [-pi/2, pi/2]
        angle_y: Azimuth in radians
    """

    def __init__(self, angle_x: float = math.pi / 6, angle_y: float = math.pi / 4):
        self.angle_x = max(-math.pi / 2, min(math.pi / 2, angle_x))
        self.angle_y = angle_y

    def rotate(self, dx: float, dy: float) -> None:
        """Apply a drag of (dx, dy) pixels."""
        self.angle_y -= dx * DRAG_SENSITIVITY
        self.angle_x += dy * DRAG_SENSITIVITY
        self.angle_x = max(-math.pi / 2, min(math.pi / 2, self.angle_x))

    @property
    def forward(self) -> np.ndarray:
        return camera_forward(self.angle_x, self.angle_y)


KEY_BINDINGS: Dict[str, Callable[[GameSession, np.ndarray], object]] = {
    'ArrowUp': lambda s, f: s.request_layer('up', f),
    'ArrowDown': lambda s, f: s.request_layer('down', f),
    'ArrowLeft': lambda s, f: s.request_layer('left', f),
    'ArrowRight': lambda s, f: s.request_layer('right', f),
    'KeyR': lambda s, f: s.request_layer('reset', f),
    'KeyC': lambda s, f: s.toggle_creative_mode(),
}


def handle_key(session: GameSession, code: str, forward) -> bool:
    """
    Dispatch a key press.

    Returns:
        True if the key is bound, False otherwise.
    """
    action = KEY_BINDINGS.get(code)
    if action is None:
        return False
    action(session, forward)
    return True


def _ints(args, count: int, usage: str):
    if len(args) != count:
        raise CommandError(f"usage: {usage}")
    try:
        return [int(a) for a in args]
    except ValueError:
        raise CommandError(f"usage: {usage}") from None


def execute_command(session: GameSession, camera: OrbitCamera, line: str) -> Optional[SessionSnapshot]:
    """
    Run one text command against a session.

    Commands:
        toggle X Y Z    place or remove a queen
        layer DIR       up, down, left, right or reset
        rotate DX DY    drag the camera by DX, DY pixels
        reset           clear the board
        next            advance if the level is unlocked
        prev            go back one level
        level N         jump to level N
        creative        toggle creative mode
        show            report the current state

    Returns:
        Snapshot after the command, or None for blank lines and comments.
        Completion and record events are set only on the snapshot of the
        toggle, reset or level start that caused them.

    Raises:
        CommandError: If the command is unknown or malformed.
    """
    parts = line.split()
    if not parts or parts[0].startswith('#'):
        return None

    cmd, args = parts[0].lower(), parts[1:]
    result = None

    if cmd == 'toggle':
        x, y, z = _ints(args, 3, "toggle X Y Z")
        result = session.toggle(x, y, z)
    elif cmd == 'layer':
        if len(args) != 1:
            raise CommandError("usage: layer up|down|left|right|reset")
        try:
            session.request_layer(args[0].lower(), camera.forward)
        except ValueError as e:
            raise CommandError(str(e)) from e
    elif cmd == 'rotate':
        if len(args) != 2:
            raise CommandError("usage: rotate DX DY")
        try:
            camera.rotate(float(args[0]), float(args[1]))
        except ValueError:
            raise CommandError("usage: rotate DX DY") from None
    elif cmd == 'reset':
        result = session.reset_level()
    elif cmd == 'next':
        session.next_level()
    elif cmd == 'prev':
        session.navigate_level(-1)
    elif cmd == 'level':
        (level,) = _ints(args, 1, "level N")
        if level < 1:
            raise CommandError(f"Level must be positive, got {level}")
        result = session.start_level(level)
    elif cmd == 'creative':
        result = session.toggle_creative_mode()
    elif cmd != 'show':
        raise CommandError(f"Unknown command: {cmd}")

    return result if result is not None else session.snapshot()
