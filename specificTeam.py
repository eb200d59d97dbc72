#!/usr/bin/env python3
"""
Run the rebound Markov analysis for one season of box scores.

Either point it at a box-score CSV:
    python specificTeam.py --in duke2025.csv
or pull an NBA team's game log first:
    python specificTeam.py --team SAC --season 2024-25
"""

import argparse
import sys
from dataclasses import dataclass
from typing import Optional

from ReboundMarkov import (
    DEFAULT_MAX_ITER,
    DEFAULT_TOL,
    SteadyState,
    TransitionMatrix,
    laplace_transition_matrix,
    raw_transition_matrix,
    steady_state,
)
from boxScores import DEFAULT_SCHEMA, RecordSchema, StateSequence, load_state_sequence
from evaluation import BaselineResult, EvaluationResult, evaluate_baseline, evaluate_predictions
from reports import write_all_reports


@dataclass
class SeasonAnalysis:
    sequence: StateSequence
    raw: TransitionMatrix
    laplace: TransitionMatrix
    steady_state: SteadyState
    predictions: EvaluationResult
    baseline: BaselineResult


def analyze_sequence(seq: StateSequence,
                     max_iter: int = DEFAULT_MAX_ITER,
                     tol: float = DEFAULT_TOL) -> SeasonAnalysis:
    """Raw + smoothed matrices, then steady state and both evaluators on the smoothed one."""
    states = list(seq)

    raw = raw_transition_matrix(states)
    laplace = laplace_transition_matrix(states)

    return SeasonAnalysis(
        sequence=seq,
        raw=raw,
        laplace=laplace,
        steady_state=steady_state(laplace, max_iter=max_iter, tol=tol),
        predictions=evaluate_predictions(states, laplace),
        baseline=evaluate_baseline(states),
    )


def print_summary(res: SeasonAnalysis) -> None:
    print("State frequencies:")
    for code, n in res.sequence.frequencies().items():
        print(f"  {code}: {n}")

    if len(res.sequence) < 2:
        print("  [WARN] fewer than 2 games; transitions and accuracies are empty.")
    else:
        empty = res.raw.empty_rows()
        if empty:
            print(f"  [WARN] no outgoing transitions from: {', '.join(s.code for s in empty)} "
                  f"(raw rows left at zero)")

    ss = res.steady_state
    if ss.converged:
        print(f"  [markov] steady state converged in {ss.iterations} iterations")
    else:
        print(f"  [WARN] steady state not converged after {ss.iterations} iterations "
              f"(max diff {ss.max_diff:.3e})")

    print(f"  [eval] model accuracy:    {res.predictions.accuracy * 100:.2f}% "
          f"({res.predictions.correct}/{res.predictions.total})")
    label = res.baseline.most_frequent.code if res.baseline.most_frequent else "none"
    print(f"  [eval] baseline accuracy: {res.baseline.accuracy * 100:.2f}% "
          f"({res.baseline.correct}/{res.baseline.total}, always {label})")


def run_for_file(path: str,
                 outdir: str = ".",
                 schema: Optional[RecordSchema] = None,
                 max_iter: int = DEFAULT_MAX_ITER,
                 tol: float = DEFAULT_TOL,
                 write: bool = True) -> SeasonAnalysis:
    print(f"  [markov] reading box scores from {path} ...")
    seq = load_state_sequence(path, schema=schema or DEFAULT_SCHEMA)
    print(f"Loaded {len(seq)} games from {path}")

    res = analyze_sequence(seq, max_iter=max_iter, tol=tol)
    print_summary(res)

    if write:
        write_all_reports(
            outdir,
            raw=res.raw,
            laplace=res.laplace,
            ss=res.steady_state,
            predictions=res.predictions,
            baseline=res.baseline,
        )
    return res


def run_for_team(team_abbr: str,
                 season: str = "2024-25",
                 outdir: Optional[str] = None,
                 max_iter: int = DEFAULT_MAX_ITER,
                 tol: float = DEFAULT_TOL,
                 write: bool = True) -> SeasonAnalysis:
    # imported here so file-only runs don't need nba_api
    from gamePull import NBA_GAME_LOG_SCHEMA, save_game_log_csv

    team_abbr = team_abbr.upper()
    outdir = outdir or f"{team_abbr}_{season.replace('-', '')}_outputs"

    path = save_game_log_csv(team_abbr, season=season, out_dir=outdir)
    return run_for_file(path, outdir=outdir, schema=NBA_GAME_LOG_SCHEMA,
                        max_iter=max_iter, tol=tol, write=write)


def _parse_field(value: str):
    return int(value) if value.isdigit() else value


def main():
    ap = argparse.ArgumentParser(description="Rebound-tier x win/loss Markov chain for one season.")
    src = ap.add_mutually_exclusive_group(required=True)
    src.add_argument("--in", dest="in_path", help="Box-score CSV (header row, W/L in field 6, TRB in field 25).")
    src.add_argument("--team", help="NBA team abbreviation to pull via nba_api (e.g., SAC, LAL, BOS).")
    ap.add_argument("--season", default="2024-25", help="Season for --team (default: 2024-25).")
    ap.add_argument("--outdir", default=None, help="Directory for report files (default: current dir for --in).")
    ap.add_argument("--iter", type=int, default=DEFAULT_MAX_ITER,
                    help=f"Max steady-state iterations (default {DEFAULT_MAX_ITER}).")
    ap.add_argument("--tol", type=float, default=DEFAULT_TOL,
                    help=f"Steady-state convergence tolerance (default {DEFAULT_TOL}).")
    ap.add_argument("--result-field", default=str(DEFAULT_SCHEMA.result_field),
                    help="Column index or header name of the W/L marker (default 6).")
    ap.add_argument("--rebounds-field", default=str(DEFAULT_SCHEMA.rebounds_field),
                    help="Column index or header name of total rebounds (default 25).")
    ap.add_argument("--strict-result", action="store_true",
                    help="Reject result markers other than W/L instead of treating them as losses.")
    args = ap.parse_args()

    try:
        if args.team:
            print(f"=== Rebound Markov for {args.team.upper()}, season {args.season} ===")
            run_for_team(args.team, season=args.season, outdir=args.outdir,
                         max_iter=args.iter, tol=args.tol)
        else:
            schema = RecordSchema(
                result_field=_parse_field(args.result_field),
                rebounds_field=_parse_field(args.rebounds_field),
                strict_result=args.strict_result,
            )
            print(f"=== Rebound Markov for {args.in_path} ===")
            run_for_file(args.in_path, outdir=args.outdir or ".", schema=schema,
                         max_iter=args.iter, tol=args.tol)
    except (OSError, ValueError) as e:
        print(f"[ERROR] {e}")
        sys.exit(1)

    print("[OK] done")


if __name__ == "__main__":
    main()
