"""
Snapshot rendering for the 3D Queens puzzle.

This module provides:
- 3D board visualization of a session snapshot (visible cells only)
- Save functionality with metadata and competition-format board text
"""

import json
import numpy as np
import matplotlib.pyplot as plt
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

from .layers import HiddenLayers
from .session import SessionSnapshot


def draw_cube_wireframe(ax, N: int) -> None:
    """Draw the outer cube wireframe for the board."""
    vertices = [
        [0, 0, 0], [N, 0, 0], [N, N, 0], [0, N, 0],  # Bottom face
        [0, 0, N], [N, 0, N], [N, N, N], [0, N, N]   # Top face
    ]

    edges = [
        [0, 1], [1, 2], [2, 3], [3, 0],
        [4, 5], [5, 6], [6, 7], [7, 4],
        [0, 4], [1, 5], [2, 6], [3, 7]
    ]

    for edge in edges:
        points = [vertices[edge[0]], vertices[edge[1]]]
        ax.plot3D(*zip(*points), color='black', linewidth=1.5, alpha=0.6)


def draw_visible_region(ax, snapshot: SessionSnapshot) -> None:
    """Outline the slab left visible by the hidden layers."""
    N = snapshot.N
    layers = HiddenLayers(**snapshot.hidden_layers)
    if layers.is_default():
        return

    ranges = layers.visible_ranges(N)
    (x0, x1), (y0, y1), (z0, z1) = ranges['x'], ranges['y'], ranges['z']
    x1, y1, z1 = x1 + 1, y1 + 1, z1 + 1

    for (a, b) in [((x0, y0, z0), (x1, y0, z0)), ((x1, y0, z0), (x1, y1, z0)),
                   ((x1, y1, z0), (x0, y1, z0)), ((x0, y1, z0), (x0, y0, z0)),
                   ((x0, y0, z1), (x1, y0, z1)), ((x1, y0, z1), (x1, y1, z1)),
                   ((x1, y1, z1), (x0, y1, z1)), ((x0, y1, z1), (x0, y0, z1)),
                   ((x0, y0, z0), (x0, y0, z1)), ((x1, y0, z0), (x1, y0, z1)),
                   ((x1, y1, z0), (x1, y1, z1)), ((x0, y1, z0), (x0, y1, z1))]:
        ax.plot3D(*zip(a, b), color='cyan', linewidth=1.0, alpha=0.8)


def visualize_snapshot(
    snapshot: SessionSnapshot,
    filename: Optional[str] = None,
    show: bool = False
) -> Optional[str]:
    """
    Draw the queens of a session snapshot in 3D.

    Features:
    - Cube wireframe and outline of the visible slab
    - Green spheres: Safe queens
    - Red spheres: Conflicting queens
    - Hidden layers are left out
    - Counts, target and state in the title

    Args:
        snapshot: Session snapshot
        filename: Optional path to save the figure
        show: Whether to display the plot

    Returns:
        Filename if saved, None otherwise
    """
    N = snapshot.N
    layers = HiddenLayers(**snapshot.hidden_layers)

    visible = [q for q in snapshot.queens if layers.is_visible(*q, N)]
    safe = np.array([q for q in visible if q not in snapshot.conflicts]).reshape(-1, 3)
    attacking = np.array([q for q in visible if q in snapshot.conflicts]).reshape(-1, 3)

    fig = plt.figure(figsize=(10, 9))
    ax = fig.add_subplot(111, projection='3d')
    ax.set_facecolor('white')

    draw_cube_wireframe(ax, N)
    draw_visible_region(ax, snapshot)

    marker_size = max(50, min(400, 2000 / N))

    if len(safe) > 0:
        ax.scatter(
            safe[:, 0] + 0.5, safe[:, 1] + 0.5, safe[:, 2] + 0.5,
            s=marker_size, c='limegreen', marker='o',
            label=f'Safe Queens ({len(safe)})',
            edgecolors='darkgreen', linewidths=1.5, alpha=0.9,
        )

    if len(attacking) > 0:
        ax.scatter(
            attacking[:, 0] + 0.5, attacking[:, 1] + 0.5, attacking[:, 2] + 0.5,
            s=marker_size, c='crimson', marker='o',
            label=f'Conflicting Queens ({len(attacking)})',
            edgecolors='darkred', linewidths=1.5, alpha=0.9,
        )

    ax.set_xlim(0, N)
    ax.set_ylim(0, N)
    ax.set_zlim(0, N)
    ax.set_xlabel('X')
    ax.set_ylabel('Y')
    ax.set_zlabel('Z')

    target = '∞' if snapshot.target is None else snapshot.target
    title = (f"Level {N} ({N}×{N}×{N})  Queens: {snapshot.queen_count}  "
             f"Conflicts: {snapshot.conflict_count}  Target: {target}\n"
             f"State: {snapshot.state.value}  Best: {snapshot.best_score}")
    ax.set_title(title, fontsize=11)

    if len(safe) > 0 or len(attacking) > 0:
        ax.legend(loc='upper left')

    plt.tight_layout()

    if filename:
        plt.savefig(filename, dpi=150, bbox_inches='tight')
        if not show:
            plt.close(fig)
        return filename

    if show:
        plt.show()

    plt.close(fig)
    return None


def save_snapshot(
    output_dir: str,
    snapshot: SessionSnapshot,
    board_text: str,
    save_plot: bool = True
) -> Dict[str, str]:
    """
    Save a session snapshot to a timestamped folder.

    Creates: output_dir/N{size}/snapshot_{datetime}/

    Always saves:
    - board.txt: Competition format (x,y,z per line)
    - metadata.json: Counts, target, state and hidden layers

    Optionally saves:
    - board.png: 3D visualization

    Args:
        output_dir: Base output directory
        snapshot: Session snapshot
        board_text: Competition-format board text
        save_plot: Whether to save the visualization

    Returns:
        Dict mapping result type to filename
    """
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    folder = Path(output_dir) / f"N{snapshot.N}" / f"snapshot_{timestamp}"
    folder.mkdir(parents=True, exist_ok=True)

    saved_files = {'folder': str(folder)}

    board_file = folder / "board.txt"
    with open(board_file, 'w') as f:
        f.write(board_text)
    saved_files['board'] = str(board_file)

    metadata = {
        'board_size': snapshot.N,
        'queen_count': snapshot.queen_count,
        'conflict_count': snapshot.conflict_count,
        'target': snapshot.target,
        'target_exact': snapshot.target_exact,
        'state': snapshot.state.value,
        'best_score': snapshot.best_score,
        'creative': snapshot.creative,
        'hidden_layers': snapshot.hidden_layers,
        'conflicts': sorted([list(q) for q in snapshot.conflicts]),
        'timestamp': datetime.now().isoformat(),
    }
    json_file = folder / "metadata.json"
    with open(json_file, 'w') as f:
        json.dump(metadata, f, indent=2)
    saved_files['metadata'] = str(json_file)

    if save_plot:
        png_file = folder / "board.png"
        visualize_snapshot(snapshot, filename=str(png_file))
        saved_files['plot'] = str(png_file)

    return saved_files
