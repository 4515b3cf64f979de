"""
Simultaneous Kelly Criterion Optimizer

Exact expected log-wealth evaluation and projected gradient ascent
for optimal bet sizing across multiple independent binary bets.
"""

import math
import numpy as np
import pandas as pd
from dataclasses import dataclass, field
from typing import Dict, List, NamedTuple, Sequence, Tuple, Any
import logging

from simultaneous_kelly.config.settings import CONFIG

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Bet:
    """A single binary bet."""

    # Probability the bet wins, in (0, 1)
    win_probability: float

    # Profit per unit staked when the bet wins
    win_multiplier: float

    # Share of the stake forfeited when the bet loses (1.0 = full stake)
    loss_fraction: float = 1.0

    def __post_init__(self):
        if not (0.0 < self.win_probability < 1.0):
            raise ValueError(
                f"win_probability must be in (0, 1), got {self.win_probability!r}"
            )
        if not self.win_multiplier >= 0.0:
            raise ValueError(
                f"win_multiplier must be >= 0, got {self.win_multiplier!r}"
            )
        if not (0.0 <= self.loss_fraction <= 1.0):
            raise ValueError(
                f"loss_fraction must be in [0, 1], got {self.loss_fraction!r}"
            )

    @classmethod
    def from_tuple(cls, values: Sequence[float]) -> 'Bet':
        """Build a bet from (p, b) or (p, b, loss_fraction)."""
        if not isinstance(values, (list, tuple, np.ndarray)):
            raise ValueError(f"Bet must be a (p, b[, l]) sequence, got {values!r}")
        if len(values) not in (2, 3):
            raise ValueError(
                f"Bet tuple must have 2 or 3 entries, got {len(values)}"
            )
        try:
            fields = [float(v) for v in values]
        except TypeError:
            raise ValueError(f"Bet entries must be numbers, got {values!r}")
        return cls(*fields)

    @property
    def expected_value(self) -> float:
        """Expected profit per unit wagered."""
        p = self.win_probability
        return p * self.win_multiplier - (1 - p) * self.loss_fraction


class Evaluation(NamedTuple):
    """Objective value and gradient at one allocation."""

    objective_value: float
    gradient: np.ndarray


@dataclass
class OptimizationResult:
    """Result of simultaneous Kelly optimization."""

    objective_value: float
    allocation: np.ndarray

    # Solver info
    iterations: int = 0
    history: List[float] = field(default_factory=list)
    stop_reason: str = ""

    bets: List[Bet] = field(default_factory=list)

    @property
    def total_exposure(self) -> float:
        return float(np.sum(self.allocation))

    def to_frame(self) -> pd.DataFrame:
        """One row per bet with its allocation and the independent Kelly baseline."""
        return pd.DataFrame({
            'win_probability': [b.win_probability for b in self.bets],
            'win_multiplier': [b.win_multiplier for b in self.bets],
            'loss_fraction': [b.loss_fraction for b in self.bets],
            'allocation': np.asarray(self.allocation, dtype=float),
            'independent_kelly': [
                single_kelly_fraction(b.win_probability, b.win_multiplier, b.loss_fraction)
                for b in self.bets
            ],
        })

    def to_dict(self) -> Dict[str, Any]:
        return {
            'objective_value': self.objective_value,
            'allocation': [float(x) for x in self.allocation],
            'total_exposure': self.total_exposure,
            'iterations': self.iterations,
            'stop_reason': self.stop_reason,
            'bets': [
                {
                    'win_probability': b.win_probability,
                    'win_multiplier': b.win_multiplier,
                    'loss_fraction': b.loss_fraction,
                }
                for b in self.bets
            ],
        }

    def summary(self) -> str:
        """Generate human-readable summary."""
        lines = [
            f"Simultaneous Kelly Summary",
            f"==========================",
            f"Expected Log Wealth: {self.objective_value:.6f}",
            f"Total Exposure: {self.total_exposure:.2%}",
            f"Iterations: {self.iterations} ({self.stop_reason})",
            f"",
            f"Allocations:"
        ]

        for i, frac in enumerate(self.allocation):
            lines.append(f"  bet {i}: {frac:.4%}")

        return "\n".join(lines)


def _as_bets(bets: Sequence[Any]) -> List[Bet]:
    return [b if isinstance(b, Bet) else Bet.from_tuple(b) for b in bets]


def expected_log_wealth(
    bets: Sequence[Bet],
    allocation: Sequence[float]
) -> Evaluation:
    """
    Exact expected log wealth and its gradient for one allocation.

    Enumerates every joint win/lose outcome of the bets (2^n of them),
    in binary-counter order with bet 0 as the fastest-varying digit.
    Outcomes that leave non-positive wealth are dropped from both the
    objective and the gradient.

    The per-outcome gradient term is +b_i for a win and -1 for a loss,
    whatever the bet's loss fraction.

    Args:
        bets: Bets in allocation order, as Bet instances or (p, b[, l]) tuples
        allocation: Fraction of wealth staked on each bet

    Returns:
        Evaluation(objective_value, gradient)

    Raises:
        ValueError: If bets and allocation differ in length
    """
    n = len(bets)
    if n != len(allocation):
        raise ValueError(
            f"Expected one allocation entry per bet: "
            f"{n} bets, {len(allocation)} allocations"
        )

    bets = _as_bets(bets)
    fs = [float(x) for x in allocation]
    res = 0.0
    grad = [0.0] * n

    for k in range(1 << n):
        prob = 1.0
        wealth = 1.0
        local_grad = [0.0] * n

        for i, bet in enumerate(bets):
            if (k >> i) & 1 == 0:
                prob *= bet.win_probability
                wealth += fs[i] * bet.win_multiplier
                local_grad[i] = bet.win_multiplier
            else:
                prob *= 1.0 - bet.win_probability
                wealth -= fs[i] * bet.loss_fraction
                local_grad[i] = -1.0

        if wealth > 0.0:
            res += prob * math.log(wealth)
            for i in range(n):
                grad[i] += prob * local_grad[i] / wealth

    return Evaluation(res, np.array(grad, dtype=float))


evaluate = expected_log_wealth


def clip(x: float) -> float:
    """Clamp a stake fraction into [0, 1]."""
    if x > 1.0:
        return 1.0
    elif x < 0.0:
        return 0.0
    return x


def project_allocation(candidate: Sequence[float]) -> np.ndarray:
    """
    Map a candidate allocation back into the feasible region.

    Each entry is clipped into [0, 1]; if the clipped entries then sum
    to more than 1 they are all divided by that sum. Not an exact
    Euclidean projection.
    """
    fs = np.array([clip(float(x)) for x in candidate], dtype=float)

    # Scale weights if total greater than 1
    total = float(fs.sum())
    if total > 1.0:
        fs = fs / total

    return fs


class SimultaneousKellySolver:
    """
    Projected gradient ascent on expected log wealth.

    Mathematical formulation:
    max E[log(1 + Σ f_i * b_i * I_i - Σ f_i * l_i * (1 - I_i))]

    Subject to:
    - 0 ≤ f_i ≤ 1
    - Σ f_i ≤ 1

    Where:
    - f_i = fraction of wealth staked on bet i
    - b_i = win multiplier
    - l_i = loss fraction (1.0 unless a defined loss is given)
    - I_i = indicator that bet i wins

    Starting from the zero allocation, each iteration steps along the
    gradient, clips and rescales the candidate, and accepts it only if
    the objective strictly improves. The first non-improving candidate
    ends the search and the last accepted state is returned.
    """

    def __init__(
        self,
        learning_rate: float = None,
        max_iterations: int = None
    ):
        """
        Initialize Kelly solver.

        Args:
            learning_rate: Gradient step scale (must be > 0)
            max_iterations: Iteration budget (must be >= 0)
        """
        config = CONFIG.optimization

        if learning_rate is None:
            learning_rate = config.learning_rate
        if max_iterations is None:
            max_iterations = config.max_iterations

        if isinstance(learning_rate, bool) or not (
            math.isfinite(learning_rate) and learning_rate > 0
        ):
            raise ValueError(f"learning_rate must be a positive number, got {learning_rate!r}")
        if isinstance(max_iterations, bool) or not isinstance(max_iterations, (int, np.integer)):
            raise ValueError(f"max_iterations must be an integer, got {max_iterations!r}")
        if max_iterations < 0:
            raise ValueError(f"max_iterations must be >= 0, got {max_iterations!r}")

        self.learning_rate = float(learning_rate)
        self.max_iterations = int(max_iterations)

    def optimize(self, bets: Sequence[Bet]) -> OptimizationResult:
        """
        Find the allocation maximizing expected log wealth.

        Args:
            bets: Bets to size, as Bet instances or (p, b[, l]) tuples

        Returns:
            OptimizationResult with the last accepted allocation
        """
        bets = _as_bets(bets)
        n = len(bets)

        logger.info(
            f"Optimizing {n} bets ({1 << n} outcomes) | "
            f"learning_rate={self.learning_rate} max_iterations={self.max_iterations}"
        )

        value_var = 0.0
        fs_var = np.zeros(n)
        history: List[float] = []
        stop_reason = "max_iterations"

        for iteration in range(self.max_iterations):
            value, grad = expected_log_wealth(bets, fs_var)
            fs_candidate = project_allocation(fs_var + self.learning_rate * grad)

            # Stop if no improvement in expectation
            value_candidate, _ = expected_log_wealth(bets, fs_candidate)
            if value_candidate <= value:
                stop_reason = "no_improvement"
                break

            fs_var = fs_candidate
            value_var = value_candidate
            history.append(value_var)

            logger.debug(
                f"Iteration {iteration + 1}: value={value_var:.10f} "
                f"exposure={fs_var.sum():.6f}"
            )

        logger.info(
            f"Stopped after {len(history)} accepted steps ({stop_reason}) | "
            f"value={value_var:.6f} exposure={fs_var.sum():.4f}"
        )

        return OptimizationResult(
            objective_value=value_var,
            allocation=fs_var,
            iterations=len(history),
            history=history,
            stop_reason=stop_reason,
            bets=bets
        )


def optimize(
    bets: Sequence[Bet],
    learning_rate: float,
    max_iterations: int
) -> Tuple[float, np.ndarray]:
    """
    Optimize simultaneous Kelly fractions.

    Returns:
        (best objective value, best allocation)
    """
    result = SimultaneousKellySolver(learning_rate, max_iterations).optimize(bets)
    return result.objective_value, result.allocation


def single_kelly_fraction(
    win_probability: float,
    win_multiplier: float,
    loss_fraction: float = 1.0
) -> float:
    """
    Calculate the independent single-bet Kelly fraction.

    Maximizes p * log(1 + f * b) + (1 - p) * log(1 - f * l), giving
    f* = p / l - (1 - p) / b, clamped to [0, 1].

    Args:
        win_probability: Probability of winning
        win_multiplier: Profit per unit staked on a win
        loss_fraction: Share of the stake lost on a loss

    Returns:
        Optimal bet fraction
    """
    p = win_probability
    q = 1 - p

    if win_multiplier <= 0:
        return 0.0
    if loss_fraction <= 0:
        return 1.0

    full_kelly = p / loss_fraction - q / win_multiplier

    return clip(full_kelly)
