#!/usr/bin/env python3

import argparse
import os

import pandas as pd

from gamePull import TEAM_ABBR_TO_ID
from specificTeam import run_for_team
from ReboundMarkov import STATES, DEFAULT_MAX_ITER, DEFAULT_TOL

SUMMARY_COLS = (
    ["team", "season", "n_games", "n_transitions",
     "model_correct", "model_accuracy",
     "baseline_state", "baseline_correct", "baseline_accuracy",
     "lift", "steady_converged", "steady_iterations"]
    + [f"pi_{s.code}" for s in STATES]
)


def summarize_team(team_abbr: str, season: str, res) -> dict:
    """One summary row: model vs baseline accuracy plus the stationary vector."""
    pred, base, ss = res.predictions, res.baseline, res.steady_state
    row = {
        "team": team_abbr,
        "season": season,
        "n_games": len(res.sequence),
        "n_transitions": pred.total,
        "model_correct": pred.correct,
        "model_accuracy": pred.accuracy,
        "baseline_state": base.most_frequent.code if base.most_frequent else None,
        "baseline_correct": base.correct,
        "baseline_accuracy": base.accuracy,
        "lift": pred.accuracy - base.accuracy,
        "steady_converged": ss.converged,
        "steady_iterations": ss.iterations,
    }
    for s in STATES:
        row[f"pi_{s.code}"] = ss.probability(s)
    return row


def run(teams, season: str, out_root: str = "outputs",
        max_iter: int = DEFAULT_MAX_ITER, tol: float = DEFAULT_TOL) -> pd.DataFrame:
    rows = []
    for team in teams:
        print(f"\n======================")
        print(f"TEAM: {team}, SEASON: {season}")
        print(f"======================")

        outdir = os.path.join(out_root, f"{team}_{season.replace('-', '')}")
        try:
            res = run_for_team(team, season=season, outdir=outdir, max_iter=max_iter, tol=tol)
        except Exception as e:
            print(f"[ERROR] team {team} failed: {e}")
            continue

        if res.predictions.degenerate:
            print(f"[WARN] fewer than 2 games for {team}; left out of the summary.")
            continue
        rows.append(summarize_team(team, season, res))

    return pd.DataFrame(rows, columns=SUMMARY_COLS)


def main():
    ap = argparse.ArgumentParser(description="Run the rebound Markov pipeline for ALL 30 NBA teams.")
    ap.add_argument(
        "season",
        nargs="?",
        default="2024-25",
        help="Season string, e.g. '2024-25' (default: 2024-25).",
    )
    ap.add_argument("--out", default="outputs", help="Root directory for per-team reports (default: outputs).")
    ap.add_argument("--iter", type=int, default=DEFAULT_MAX_ITER, help="Max steady-state iterations.")
    ap.add_argument("--tol", type=float, default=DEFAULT_TOL, help="Steady-state convergence tolerance.")
    args = ap.parse_args()

    team_list = sorted(TEAM_ABBR_TO_ID.keys())
    print(f"Running for {len(team_list)} teams: {', '.join(team_list)}")

    summary = run(team_list, args.season, out_root=args.out, max_iter=args.iter, tol=args.tol)
    if summary.empty:
        print("No teams produced a usable sequence. Nothing to summarize.")
        return

    summary = summary.sort_values("lift", ascending=False).reset_index(drop=True)
    print(summary[["team", "n_games", "model_accuracy", "baseline_state", "baseline_accuracy", "lift"]]
          .to_string(index=False, float_format=lambda x: f"{x:.3f}"))

    os.makedirs(args.out, exist_ok=True)
    out_path = os.path.join(args.out, f"rebound_markov_summary_{args.season.replace('-', '')}.csv")
    summary.to_csv(out_path, index=False)
    print(f"Saved: {out_path}")

    print("\n[DONE] All teams processed.")


if __name__ == "__main__":
    main()
