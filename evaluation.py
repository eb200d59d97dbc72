#!/usr/bin/env python3
"""
One-step-ahead prediction accuracy for the rebound Markov chain, and the
naive "always guess the most frequent state" baseline it is compared to.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd

from ReboundMarkov import STATES, GameState, TransitionMatrix

LOG_COLUMNS = ["Index", "CurrentState", "ActualNext", "PredictedNext", "Correct"]


@dataclass(frozen=True)
class Prediction:
    index: int
    current: GameState
    actual: GameState
    predicted: GameState

    @property
    def correct(self) -> bool:
        return self.predicted == self.actual


@dataclass
class EvaluationResult:
    predictions: List[Prediction] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.predictions)

    @property
    def correct(self) -> int:
        return sum(1 for p in self.predictions if p.correct)

    @property
    def degenerate(self) -> bool:
        # fewer than 2 states in the sequence: nothing to score
        return self.total == 0

    @property
    def accuracy(self) -> float:
        if self.degenerate:
            return 0.0
        return self.correct / self.total

    def to_frame(self) -> pd.DataFrame:
        rows = [
            [p.index, p.current.code, p.actual.code, p.predicted.code, "YES" if p.correct else "NO"]
            for p in self.predictions
        ]
        return pd.DataFrame(rows, columns=LOG_COLUMNS)


def predict_next(matrix: TransitionMatrix, current: GameState) -> GameState:
    """argmax over the current state's row; ties go to the earliest state in STATES."""
    return STATES[int(np.argmax(matrix.row(current)))]


def evaluate_predictions(states: Sequence[GameState], matrix: TransitionMatrix) -> EvaluationResult:
    states = list(states)
    preds = []
    for i in range(len(states) - 1):
        current, actual = states[i], states[i + 1]
        preds.append(Prediction(
            index=i,
            current=current,
            actual=actual,
            predicted=predict_next(matrix, current),
        ))
    return EvaluationResult(predictions=preds)


# --------------------------------------------------
# Naive baseline
# --------------------------------------------------

@dataclass(frozen=True)
class BaselineResult:
    most_frequent: Optional[GameState]
    correct: int
    total: int

    @property
    def degenerate(self) -> bool:
        return self.total == 0

    @property
    def accuracy(self) -> float:
        if self.degenerate:
            return 0.0
        return self.correct / self.total


def most_frequent_state(states: Sequence[GameState]) -> Optional[GameState]:
    """
    Scan STATES in order and keep a state only on a strictly greater count,
    so ties resolve to the earlier state. None for an empty sequence.
    """
    best, best_count = None, 0
    for s in STATES:
        c = sum(1 for x in states if x == s)
        if c > best_count:
            best, best_count = s, c
    return best


def evaluate_baseline(states: Sequence[GameState]) -> BaselineResult:
    states = list(states)
    guess = most_frequent_state(states)
    actual_next = states[1:]
    correct = sum(1 for s in actual_next if s == guess)
    return BaselineResult(most_frequent=guess, correct=correct, total=len(actual_next))
