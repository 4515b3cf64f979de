"""
Simultaneous Kelly Configuration Settings

Central configuration for the optimizer, sample slates and logging.
"""

from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass
class OptimizationConfig:
    """Projected gradient ascent configuration."""

    learning_rate: float = 0.01  # Gradient step scale
    max_iterations: int = 10000  # Iteration budget per optimization


@dataclass
class SampleConfig:
    """Built-in bet slates used by the `sample` command."""

    # (win probability, win multiplier)
    bets: List[Tuple[float, float]] = field(default_factory=lambda: [
        (0.3, 12.8),
        (0.4, 6.4),
        (0.5, 3.2),
        (0.6, 1.6),
        (0.7, 0.8),
        (0.8, 0.4),
        (0.9, 0.2)
    ])

    # (win probability, win multiplier, loss fraction)
    defined_loss_bets: List[Tuple[float, float, float]] = field(default_factory=lambda: [
        (0.3, 12.8, 0.5),
        (0.4, 6.4, 0.5),
        (0.5, 3.2, 0.5),
        (0.6, 1.6, 0.5),
        (0.7, 0.8, 0.5),
        (0.8, 0.4, 0.5),
        (0.9, 0.2, 0.5)
    ])


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format_string: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"


@dataclass
class SimultaneousKellyConfig:
    """Master configuration aggregating all subsystems."""

    optimization: OptimizationConfig = field(default_factory=OptimizationConfig)
    sample: SampleConfig = field(default_factory=SampleConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# Global configuration instance
CONFIG = SimultaneousKellyConfig()
