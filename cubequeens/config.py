"""
Configuration management for the 3D Queens puzzle engine.

This module provides a clean interface for loading and validating
configuration from YAML files.
"""

import yaml
from dataclasses import dataclass
from typing import List, Optional

from .conflicts import CONFLICT_METHODS


VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


@dataclass
class Config:
    """
    Configuration container for a game session.

    Attributes:
        start_level: Level (board size N) to start at
        creative_mode: Free placement without targets or scores
        conflict_method: Conflict computation ('iter', 'hash', 'jit')
        unlock_at_n_queens: Also unlock the next level once N
            non-attacking queens are placed, below the target
        progress_file: JSON file for best scores and the last session
            (None keeps progress in memory only)
        log_level: Logging level name
        log_file: Optional log file path
        show: Whether to show board snapshots
        save: Whether to save board snapshots
        output_dir: Directory to save snapshots
    """

    # Game configuration
    start_level: int = 1
    creative_mode: bool = False
    conflict_method: str = 'iter'
    unlock_at_n_queens: bool = False

    # Persistence
    progress_file: Optional[str] = 'progress.json'

    # Logging
    log_level: str = 'INFO'
    log_file: Optional[str] = None

    # Visualization and output
    show: bool = False
    save: bool = False
    output_dir: str = 'results'

    @classmethod
    def from_yaml(cls, path: str) -> 'Config':
        """
        Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Config instance
        """
        with open(path, 'r') as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict) -> 'Config':
        """
        Create configuration from dictionary.

        Args:
            data: Configuration dictionary

        Returns:
            Config instance
        """
        # 'level' is accepted as a short form of 'start_level'
        start_level = data.get('start_level', data.get('level', 1))

        return cls(
            start_level=start_level,
            creative_mode=data.get('creative_mode', False),
            conflict_method=data.get('conflict_method', 'iter'),
            unlock_at_n_queens=data.get('unlock_at_n_queens', False),
            progress_file=data.get('progress_file', 'progress.json'),
            log_level=str(data.get('log_level', 'INFO')).upper(),
            log_file=data.get('log_file'),
            show=data.get('show', False),
            save=data.get('save', False),
            output_dir=data.get('output_dir', 'results'),
        )

    def to_dict(self) -> dict:
        """Convert configuration to dictionary."""
        return {
            'start_level': self.start_level,
            'creative_mode': self.creative_mode,
            'conflict_method': self.conflict_method,
            'unlock_at_n_queens': self.unlock_at_n_queens,
            'progress_file': self.progress_file,
            'log_level': self.log_level,
            'log_file': self.log_file,
            'show': self.show,
            'save': self.save,
            'output_dir': self.output_dir,
        }

    def validate(self) -> List[str]:
        """
        Validate configuration values.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        if isinstance(self.start_level, bool) or not isinstance(self.start_level, int):
            errors.append(f"start_level must be an integer, got {self.start_level!r}")
        elif self.start_level < 1:
            errors.append(f"start_level must be positive, got {self.start_level}")

        valid_methods = list(CONFLICT_METHODS.keys())
        if self.conflict_method not in valid_methods:
            errors.append(f"Invalid conflict_method '{self.conflict_method}', must be one of {valid_methods}")

        if self.log_level not in VALID_LOG_LEVELS:
            errors.append(f"Invalid log_level '{self.log_level}', must be one of {VALID_LOG_LEVELS}")

        return errors

    def print_summary(self) -> None:
        """Print configuration summary."""
        print("=" * 60)
        print("Configuration Summary")
        print("=" * 60)
        print(f"Start level: {self.start_level}")
        print(f"Creative mode: {self.creative_mode}")
        print(f"Conflict method: {self.conflict_method}")
        if self.unlock_at_n_queens:
            print("Unlock at N queens: enabled")
        print(f"Progress file: {self.progress_file or '(memory only)'}")
        print(f"Log level: {self.log_level}" + (f" → {self.log_file}" if self.log_file else ""))
        print(f"Save: {self.save}" + (f" → {self.output_dir}" if self.save else ""))
        print("=" * 60)
