import os
import sys

import pandas as pd
import pytest

import allTeams
import gamePull
import specificTeam
from boxScores import sequence_from_codes
from reports import PREDICTION_FILE, STEADY_STATE_FILE
from conftest import FakeFinder, box_row


def run_main(monkeypatch, module, *args):
    monkeypatch.setattr(sys, "argv", [f"{module.__name__}.py", *args])
    module.main()


def test_parse_field():
    assert specificTeam._parse_field("6") == 6
    assert specificTeam._parse_field("25") == 25
    assert specificTeam._parse_field("WL") == "WL"
    assert specificTeam._parse_field("-1") == "-1"


def test_main_writes_reports(monkeypatch, write_box_scores, tmp_path, capsys):
    path = write_box_scores([box_row("W", t) for t in (45, 38, 20, 44)])
    outdir = tmp_path / "out"
    run_main(monkeypatch, specificTeam, "--in", path, "--outdir", str(outdir))

    assert (outdir / PREDICTION_FILE).exists()
    assert (outdir / STEADY_STATE_FILE).exists()
    out = capsys.readouterr().out
    assert "Loaded 4 games" in out
    assert "[OK] done" in out


def test_main_missing_file_exits_1(monkeypatch, tmp_path, capsys):
    missing = str(tmp_path / "nope.csv")
    with pytest.raises(SystemExit) as exc:
        run_main(monkeypatch, specificTeam, "--in", missing, "--outdir", str(tmp_path))
    assert exc.value.code == 1
    out = capsys.readouterr().out
    assert "[ERROR] Box score file not found" in out
    assert "nope.csv" in out


def test_main_malformed_file_exits_1(monkeypatch, write_box_scores, tmp_path, capsys):
    path = write_box_scores([box_row("W", 40), box_row("W", "abc")])
    with pytest.raises(SystemExit) as exc:
        run_main(monkeypatch, specificTeam, "--in", path, "--outdir", str(tmp_path))
    assert exc.value.code == 1
    out = capsys.readouterr().out
    assert "[ERROR] 1 malformed row(s)" in out
    assert "line 3" in out
    assert not (tmp_path / PREDICTION_FILE).exists()


def test_main_undecodable_file_exits_1(monkeypatch, tmp_path, capsys):
    path = tmp_path / "latin.csv"
    path.write_bytes(b"Rk,Opp\n1,Montr\xe9al\n")
    with pytest.raises(SystemExit) as exc:
        run_main(monkeypatch, specificTeam, "--in", str(path), "--outdir", str(tmp_path))
    assert exc.value.code == 1
    assert "latin.csv" in capsys.readouterr().out


def test_main_strict_result(monkeypatch, write_box_scores, tmp_path, capsys):
    path = write_box_scores([box_row("W", 40), box_row("T", 40), box_row("L", 40)])

    run_main(monkeypatch, specificTeam, "--in", path, "--outdir", str(tmp_path / "lenient"))
    assert "Loaded 3 games" in capsys.readouterr().out

    with pytest.raises(SystemExit) as exc:
        run_main(monkeypatch, specificTeam, "--in", path, "--outdir", str(tmp_path / "strict"),
                 "--strict-result")
    assert exc.value.code == 1
    out = capsys.readouterr().out
    assert "[ERROR]" in out
    assert "result 'T' is neither 'W' nor 'L'" in out


def test_main_header_name_fields(monkeypatch, tmp_path, capsys):
    path = tmp_path / "log.csv"
    path.write_text("GAME_ID,WL,REB\n1,W,44\n2,L,30\n3,W,35\n")
    outdir = tmp_path / "out"
    run_main(monkeypatch, specificTeam, "--in", str(path), "--outdir", str(outdir),
             "--result-field", "WL", "--rebounds-field", "REB")

    text = (outdir / PREDICTION_FILE).read_text()
    assert "0,HW,LL," in text
    assert "1,LL,MW," in text

    # same file read by index
    run_main(monkeypatch, specificTeam, "--in", str(path), "--outdir", str(outdir),
             "--result-field", "1", "--rebounds-field", "2")
    assert "Loaded 3 games" in capsys.readouterr().out

    with pytest.raises(SystemExit) as exc:
        run_main(monkeypatch, specificTeam, "--in", str(path), "--outdir", str(outdir),
                 "--rebounds-field", "TRB")
    assert exc.value.code == 1
    assert "Column 'TRB' not found" in capsys.readouterr().out


def test_main_passes_iter_and_tol(monkeypatch, write_box_scores, tmp_path, capsys):
    seen = {}
    real = specificTeam.steady_state

    def spy(matrix, max_iter, tol):
        seen["max_iter"], seen["tol"] = max_iter, tol
        return real(matrix, max_iter=max_iter, tol=tol)

    monkeypatch.setattr(specificTeam, "steady_state", spy)
    path = write_box_scores([box_row("W", t) for t in (45, 38, 20, 44, 30)])
    run_main(monkeypatch, specificTeam, "--in", path, "--outdir", str(tmp_path),
             "--iter", "1", "--tol", "1e-9")

    assert seen == {"max_iter": 1, "tol": 1e-9}
    assert "[WARN] steady state not converged after 1 iterations" in capsys.readouterr().out
    assert "possibly not converged" in (tmp_path / STEADY_STATE_FILE).read_text()


def test_main_team_pull(monkeypatch, tmp_path, capsys):
    monkeypatch.setattr(gamePull.leaguegamefinder, "LeagueGameFinder", FakeFinder)
    outdir = tmp_path / "sac"
    run_main(monkeypatch, specificTeam, "--team", "sac", "--outdir", str(outdir))

    assert os.path.exists(gamePull.game_log_path("SAC", "2024-25", str(outdir)))
    assert (outdir / PREDICTION_FILE).exists()
    assert "Loaded 3 games" in capsys.readouterr().out


def test_game_pull_main(monkeypatch, tmp_path, capsys):
    monkeypatch.setattr(gamePull.leaguegamefinder, "LeagueGameFinder", FakeFinder)
    monkeypatch.chdir(tmp_path)

    run_main(monkeypatch, gamePull, "sac", "2024-25")
    log = pd.read_csv(tmp_path / "SAC_202425_gamelog.csv")
    assert log["WL"].tolist() == ["W", "W", "L"]

    with pytest.raises(SystemExit) as exc:
        run_main(monkeypatch, gamePull)
    assert exc.value.code == 1
    assert "Usage:" in capsys.readouterr().out

    with pytest.raises(SystemExit) as exc:
        run_main(monkeypatch, gamePull, "XYZ")
    assert exc.value.code == 1
    assert "[ERROR] Unknown team abbreviation 'XYZ'" in capsys.readouterr().out


def test_all_teams_main(monkeypatch, tmp_path, capsys):
    def fake_run_for_team(team, season, outdir, max_iter, tol):
        codes = {"ATL": "HW HW HL HW", "BOS": "LL LW LL LL"}[team]
        return specificTeam.analyze_sequence(sequence_from_codes(codes.split()), max_iter=max_iter, tol=tol)

    monkeypatch.setattr(allTeams, "TEAM_ABBR_TO_ID", {"ATL": 1, "BOS": 2})
    monkeypatch.setattr(allTeams, "run_for_team", fake_run_for_team)
    run_main(monkeypatch, allTeams, "2024-25", "--out", str(tmp_path))

    summary = pd.read_csv(tmp_path / "rebound_markov_summary_202425.csv")
    assert sorted(summary["team"]) == ["ATL", "BOS"]
    out = capsys.readouterr().out
    assert "[DONE] All teams processed." in out


def test_all_teams_main_nothing_usable(monkeypatch, tmp_path, capsys):
    def failing(team, season, outdir, max_iter, tol):
        raise OSError("offline")

    monkeypatch.setattr(allTeams, "TEAM_ABBR_TO_ID", {"ATL": 1})
    monkeypatch.setattr(allTeams, "run_for_team", failing)
    run_main(monkeypatch, allTeams, "--out", str(tmp_path))

    out = capsys.readouterr().out
    assert "[ERROR] team ATL failed: offline" in out
    assert "Nothing to summarize" in out
    assert not list(tmp_path.glob("*.csv"))
