"""
Simultaneous Kelly: optimal stakes across independent binary bets

Finds the fraction of wealth to stake on each of a handful of
independent bets that maximizes the expected logarithm of wealth
once every bet has resolved.

Core concepts:
- Exact objective: enumeration of all 2^n joint win/lose outcomes
- Projected gradient ascent: clip to [0, 1], rescale onto Σ f ≤ 1
- Defined loss: a per-bet share of the stake forfeited on a loss

Usage:
    from simultaneous_kelly import Bet, SimultaneousKellySolver

    solver = SimultaneousKellySolver(learning_rate=0.01, max_iterations=10000)
    result = solver.optimize([Bet(0.6, 1.0), Bet(0.3, 12.8)])
    print(result.summary())
"""

__version__ = "0.1.0"

from simultaneous_kelly.optimization.kelly import (
    Bet,
    Evaluation,
    OptimizationResult,
    SimultaneousKellySolver,
    evaluate,
    optimize
)
from simultaneous_kelly.config.settings import CONFIG, SimultaneousKellyConfig

__all__ = [
    'Bet',
    'Evaluation',
    'OptimizationResult',
    'SimultaneousKellySolver',
    'evaluate',
    'optimize',
    'CONFIG',
    'SimultaneousKellyConfig',
    '__version__'
]
