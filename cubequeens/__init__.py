"""
3D Queens Puzzle Engine

This package provides the game core of a 3D N-Queens puzzle: queens are
placed on an N×N×N lattice, attacking queens are detected along rook lines,
planar diagonals and space diagonals, and progress is tracked against a
per-size target.

Modules:
    - utils: Attack rule, line families and level targets
    - board: N×N×N occupancy state
    - conflicts: Conflict engine (iter, hash and JAX implementations)
    - progress: Level completion state machine
    - layers: Camera-relative layer slicing and visibility
    - interfaces: Abstract persistence collaborator
    - persistence: In-memory and JSON progress stores
    - session: Game session tying the above together
    - controls: Key bindings, orbit camera and text commands
    - config: Configuration management
    - logging_config: Package logger setup
    - visualize: Snapshot rendering with matplotlib
"""

from .utils import check_attack, check_attack_jit, get_level_target, KNOWN_MAX_QUEENS
from .board import Board
from .conflicts import conflicts, analyze, ConflictReport, get_conflict_method
from .progress import ProgressState, ProgressTracker, ProgressUpdate, evaluate_progress
from .layers import HiddenLayers, FaceControl, camera_forward, get_relative_axes
from .interfaces import ProgressStore, PersistenceError
from .persistence import MemoryProgressStore, JsonProgressStore
from .session import GameSession, SessionSnapshot
from .controls import OrbitCamera, handle_key, execute_command, CommandError
from .config import Config
from .logging_config import setup_logging

__all__ = [
    'check_attack',
    'check_attack_jit',
    'get_level_target',
    'KNOWN_MAX_QUEENS',
    'Board',
    'conflicts',
    'analyze',
    'ConflictReport',
    'get_conflict_method',
    'ProgressState',
    'ProgressTracker',
    'ProgressUpdate',
    'evaluate_progress',
    'HiddenLayers',
    'FaceControl',
    'camera_forward',
    'get_relative_axes',
    'ProgressStore',
    'PersistenceError',
    'MemoryProgressStore',
    'JsonProgressStore',
    'GameSession',
    'SessionSnapshot',
    'OrbitCamera',
    'handle_key',
    'execute_command',
    'CommandError',
    'Config',
    'setup_logging',
]
