#!/usr/bin/env python3
"""
6-state Markov chain over rebound tier x game result.

- States: HW / HL / MW / ML / LW / LL (High/Medium/Low rebounds x Win/Loss)
- Transition matrices: raw empirical counts, or Laplace (add-one) smoothed
- Steady state: power iteration pi_next = pi @ P from a uniform start
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence

import numpy as np

# --------------------------------------------------
# States
# --------------------------------------------------

REBOUND_HIGH = 41
REBOUND_MEDIUM = 33


class GameState(Enum):
    HIGH_WIN = "HW"
    HIGH_LOSS = "HL"
    MEDIUM_WIN = "MW"
    MEDIUM_LOSS = "ML"
    LOW_WIN = "LW"
    LOW_LOSS = "LL"

    @property
    def code(self) -> str:
        return self.value

    @property
    def index(self) -> int:
        return STATE_INDEX[self]

    @property
    def label(self) -> str:
        tier, result = self.name.split("_")
        return tier.capitalize() + result.capitalize()

    @property
    def is_win(self) -> bool:
        return self.name.endswith("_WIN")


# canonical order: every matrix row/column and every tie-break follows this
STATES: List[GameState] = list(GameState)
STATE_INDEX: Dict[GameState, int] = {s: i for i, s in enumerate(STATES)}
CODE_TO_STATE: Dict[str, GameState] = {s.code: s for s in STATES}
N_STATES = len(STATES)


def classify_game(rebounds: int, is_win: bool) -> GameState:
    """
    Map one game's total rebounds and result to a state.
    Rules are checked in order; the first match wins.
    """
    if rebounds >= REBOUND_HIGH and is_win:
        return GameState.HIGH_WIN
    if rebounds >= REBOUND_HIGH and not is_win:
        return GameState.HIGH_LOSS
    if rebounds >= REBOUND_MEDIUM and is_win:
        return GameState.MEDIUM_WIN
    if rebounds >= REBOUND_MEDIUM and not is_win:
        return GameState.MEDIUM_LOSS
    if is_win:
        return GameState.LOW_WIN
    return GameState.LOW_LOSS


# --------------------------------------------------
# Transition matrices
# --------------------------------------------------

@dataclass(frozen=True, eq=False)
class TransitionMatrix:
    """
    Row-stochastic 6x6 matrix over STATES.

    counts[i, j] : observed i->j transitions, plus the smoothing prior
    probs[i, j]  : counts row-normalized (all-zero row if nothing left state i)
    """
    counts: np.ndarray
    probs: np.ndarray
    prior: float = 0.0
    n_transitions: int = 0

    def __post_init__(self):
        for arr in (self.counts, self.probs):
            if arr.shape != (N_STATES, N_STATES):
                raise ValueError(f"expected a {N_STATES}x{N_STATES} matrix, got {arr.shape}")
            arr.flags.writeable = False

    @property
    def smoothed(self) -> bool:
        return self.prior > 0

    def prob(self, from_state: GameState, to_state: GameState) -> float:
        return float(self.probs[from_state.index, to_state.index])

    def row(self, from_state: GameState) -> np.ndarray:
        return self.probs[from_state.index]

    def row_sums(self) -> np.ndarray:
        return self.probs.sum(axis=1)

    def empty_rows(self) -> List[GameState]:
        """States never seen as a 'from' state (raw mode only can have these)."""
        observed = self.counts.sum(axis=1) - self.prior * N_STATES
        return [s for s in STATES if observed[s.index] == 0]

    @classmethod
    def from_probs(cls, probs) -> "TransitionMatrix":
        """Wrap an explicit probability matrix (no counts behind it)."""
        probs = np.array(probs, dtype=float)
        return cls(counts=probs.copy(), probs=probs)


def count_transitions(states: Sequence[GameState], prior: float = 0.0) -> np.ndarray:
    counts = np.full((N_STATES, N_STATES), prior, dtype=float)
    for t in range(len(states) - 1):
        i, j = states[t].index, states[t + 1].index
        counts[i, j] += 1.0
    return counts


def estimate_transitions(states: Sequence[GameState], prior: float = 0.0) -> TransitionMatrix:
    """
    Count consecutive (s_t, s_t+1) pairs on top of `prior` in every cell,
    then normalize each row by its sum. Rows summing to zero stay zero.
    """
    counts = count_transitions(states, prior=prior)

    probs = counts.copy()
    row_sums = probs.sum(axis=1, keepdims=True)
    nonzero = row_sums[:, 0] > 0
    probs[nonzero] /= row_sums[nonzero]

    return TransitionMatrix(
        counts=counts,
        probs=probs,
        prior=prior,
        n_transitions=max(len(states) - 1, 0),
    )


def raw_transition_matrix(states: Sequence[GameState]) -> TransitionMatrix:
    return estimate_transitions(states, prior=0.0)


def laplace_transition_matrix(states: Sequence[GameState]) -> TransitionMatrix:
    return estimate_transitions(states, prior=1.0)


# --------------------------------------------------
# Steady state
# --------------------------------------------------

DEFAULT_MAX_ITER = 1000
DEFAULT_TOL = 1e-6


@dataclass
class SteadyState:
    pi: np.ndarray
    iterations: int
    max_diff: float
    converged: bool
    # GameState per entry for 6x6 chains, else positional ints 0..n-1
    states: List = field(default_factory=lambda: list(STATES))

    def _pos(self, state) -> int:
        return self.states.index(state)

    def labels(self) -> List[str]:
        return [s.code if isinstance(s, GameState) else str(s) for s in self.states]

    def probability(self, state) -> float:
        return float(self.pi[self._pos(state)])

    def return_times(self) -> List[Optional[float]]:
        """Expected return time 1/pi per state; None where pi is 0 (undefined)."""
        return [None if p == 0 else 1.0 / p for p in self.pi.tolist()]

    def return_time(self, state) -> Optional[float]:
        return self.return_times()[self._pos(state)]


def steady_state(
    matrix,
    max_iter: int = DEFAULT_MAX_ITER,
    tol: float = DEFAULT_TOL,
) -> SteadyState:
    """
    Stationary distribution by power iteration.

    Starts from the uniform vector and repeats pi_next = pi @ P. Stops as soon
    as max |pi_next - pi| < tol (pi_next is returned), otherwise after max_iter
    rounds with the last vector and converged=False.
    """
    P = matrix.probs if isinstance(matrix, TransitionMatrix) else np.asarray(matrix, dtype=float)
    if P.ndim != 2 or P.shape[0] != P.shape[1]:
        raise ValueError(f"transition matrix must be square, got shape {P.shape}")
    if max_iter < 1:
        raise ValueError("max_iter must be at least 1")

    n = P.shape[0]
    pi = np.full(n, 1.0 / n)
    pi_next = pi
    max_diff = float("inf")
    converged = False

    for it in range(1, max_iter + 1):
        pi_next = pi @ P
        max_diff = float(np.max(np.abs(pi_next - pi)))
        if max_diff < tol:
            converged = True
            break
        pi = pi_next

    states = list(STATES) if n == N_STATES else list(range(n))
    return SteadyState(
        pi=pi_next,
        iterations=it,
        max_diff=max_diff,
        converged=converged,
        states=states,
    )
