"""Simultaneous Kelly optimization."""

from .kelly import (
    Bet,
    Evaluation,
    OptimizationResult,
    SimultaneousKellySolver,
    expected_log_wealth,
    evaluate,
    clip,
    project_allocation,
    optimize,
    single_kelly_fraction
)

__all__ = [
    'Bet',
    'Evaluation',
    'OptimizationResult',
    'SimultaneousKellySolver',
    'expected_log_wealth',
    'evaluate',
    'clip',
    'project_allocation',
    'optimize',
    'single_kelly_fraction'
]
