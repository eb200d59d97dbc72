#!/usr/bin/env python3
"""
Plain-text reports for the rebound Markov chain.

Number formats are kept stable so reports can be diffed across runs:
raw matrix %5.2f, smoothed matrix %5.4f, steady state %.6f, accuracy %.2f%%.
"""

import csv
import os
from typing import Dict

from ReboundMarkov import STATES, SteadyState, TransitionMatrix
from evaluation import BaselineResult, EvaluationResult

RAW_MATRIX_FILE = "transition_matrix_output.txt"
LAPLACE_MATRIX_FILE = "laplace_matrix_output.txt"
STEADY_STATE_FILE = "steady_state_output.txt"
PREDICTION_FILE = "prediction_accuracy_output.txt"
BASELINE_FILE = "naive_baseline_accuracy.txt"
TRANSITIONS_CSV = "laplace_transitions.csv"

MATRIX_HEADER = "    " + "     ".join(s.code for s in STATES)


def render_matrix(matrix: TransitionMatrix, title: str, decimals: int) -> str:
    lines = [title, MATRIX_HEADER]
    for s in STATES:
        cells = "".join(f"{p:5.{decimals}f} " for p in matrix.row(s))
        lines.append(f"{s.code} {cells}")
    return "\n".join(lines) + "\n"


def render_raw_matrix(matrix: TransitionMatrix) -> str:
    return render_matrix(matrix, "Transition Matrix (From → To):", decimals=2)


def render_laplace_matrix(matrix: TransitionMatrix) -> str:
    return render_matrix(
        matrix, "Normalized Laplace-Smoothed Transition Matrix (From → To):", decimals=4
    )


def render_steady_state(ss: SteadyState) -> str:
    lines = ["Steady-State Distribution (Laplace-smoothed):"]
    for label, p, rt in zip(ss.labels(), ss.pi.tolist(), ss.return_times()):
        lines.append(f"{label}: {p:.6f}")
        if rt is None:
            lines.append("Expected Return Time: undefined")
        else:
            lines.append(f"Expected Return Time: {rt:.6f}")
    if not ss.converged:
        lines.append(
            f"WARNING: possibly not converged after {ss.iterations} iterations "
            f"(max diff {ss.max_diff:.3e})"
        )
    return "\n".join(lines) + "\n"


def render_predictions(result: EvaluationResult) -> str:
    log = result.to_frame().to_csv(index=False, lineterminator="\n")
    out = "Prediction Accuracy Evaluation:\n" + log
    out += (
        f"\nTotal Predictions: {result.total}\n"
        f"Correct Predictions: {result.correct}\n"
        f"Accuracy: {result.accuracy * 100:.2f}%\n"
    )
    if result.degenerate:
        out += "WARNING: fewer than 2 games, no predictions scored\n"
    return out


def render_baseline(result: BaselineResult) -> str:
    label = result.most_frequent.code if result.most_frequent is not None else "none"
    out = (
        "Naive Baseline Accuracy:\n"
        f"Most Frequent State: {label}\n"
        f"Accuracy: {result.accuracy * 100:.2f}% ({result.correct}/{result.total})\n"
    )
    if result.degenerate:
        out += "WARNING: fewer than 2 games, no predictions scored\n"
    return out


# --------------------------------------------------
# Writers
# --------------------------------------------------

def write_report(text: str, path: str) -> str:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)
    print(f"Saved: {path}")
    return path


def write_transitions_csv(matrix: TransitionMatrix, path: str) -> str:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", newline="") as f:
        w = csv.writer(f)
        w.writerow(["from_state", "to_state", "from_label", "to_label", "count", "P_to_given_from"])
        for s_from in STATES:
            for s_to in STATES:
                w.writerow([
                    s_from.code, s_to.code, s_from.label, s_to.label,
                    float(matrix.counts[s_from.index, s_to.index]),
                    float(matrix.prob(s_from, s_to)),
                ])
    print(f"Saved: {path}")
    return path


def write_all_reports(
    outdir: str,
    raw: TransitionMatrix,
    laplace: TransitionMatrix,
    ss: SteadyState,
    predictions: EvaluationResult,
    baseline: BaselineResult,
) -> Dict[str, str]:
    paths = {
        "raw": write_report(render_raw_matrix(raw), os.path.join(outdir, RAW_MATRIX_FILE)),
        "laplace": write_report(render_laplace_matrix(laplace), os.path.join(outdir, LAPLACE_MATRIX_FILE)),
        "steady_state": write_report(render_steady_state(ss), os.path.join(outdir, STEADY_STATE_FILE)),
        "predictions": write_report(render_predictions(predictions), os.path.join(outdir, PREDICTION_FILE)),
        "baseline": write_report(render_baseline(baseline), os.path.join(outdir, BASELINE_FILE)),
        "transitions_csv": write_transitions_csv(laplace, os.path.join(outdir, TRANSITIONS_CSV)),
    }
    return paths
