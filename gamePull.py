# pip install nba_api pandas
import os
import sys

import pandas as pd
from nba_api.stats.endpoints import leaguegamefinder

from boxScores import RecordSchema

TEAM_ABBR_TO_ID = {
    "ATL": 1610612737, "BOS": 1610612738, "CLE": 1610612739, "NOP": 1610612740,
    "CHI": 1610612741, "DAL": 1610612742, "DEN": 1610612743, "GSW": 1610612744,
    "HOU": 1610612745, "LAC": 1610612746, "LAL": 1610612747, "MIA": 1610612748,
    "MIL": 1610612749, "MIN": 1610612750, "BKN": 1610612751, "NYK": 1610612752,
    "ORL": 1610612753, "IND": 1610612754, "PHI": 1610612755, "PHX": 1610612756,
    "POR": 1610612757, "SAC": 1610612758, "SAS": 1610612759, "OKC": 1610612760,
    "TOR": 1610612761, "UTA": 1610612762, "MEM": 1610612763, "WAS": 1610612764,
    "DET": 1610612765, "CHA": 1610612766,
}

# nba_api game logs carry WL ("W"/"L") and REB (total rebounds) by name
NBA_GAME_LOG_SCHEMA = RecordSchema(result_field="WL", rebounds_field="REB", strict_result=True)

GAME_LOG_COLS = ["GAME_ID", "GAME_DATE", "TEAM_ABBREVIATION", "MATCHUP", "WL", "PTS", "OREB", "DREB", "REB"]


def get_team_game_log(team_abbr: str,
                      season: str = "2024-25",
                      season_type: str = "Regular Season") -> pd.DataFrame:
    """
    Use nba_api to get every game a team played in a season,
    oldest first (LeagueGameFinder returns newest first).
    """
    team_abbr = team_abbr.upper()
    if team_abbr not in TEAM_ABBR_TO_ID:
        raise ValueError(f"Unknown team abbreviation '{team_abbr}'")

    gf = leaguegamefinder.LeagueGameFinder(
        team_id_nullable=TEAM_ABBR_TO_ID[team_abbr],
        season_nullable=season,
        season_type_nullable=season_type,
    )
    games = gf.get_data_frames()[0]

    # unfinished games come back with an empty WL
    games = games[games["WL"].isin(["W", "L"])].copy()
    games["REB"] = games["REB"].astype(int)
    games = games.sort_values(["GAME_DATE", "GAME_ID"]).reset_index(drop=True)
    return games[[c for c in GAME_LOG_COLS if c in games.columns]]


def game_log_path(team_abbr: str, season: str, out_dir: str = ".") -> str:
    return os.path.join(out_dir, f"{team_abbr.upper()}_{season.replace('-', '')}_gamelog.csv")


def save_game_log_csv(team_abbr: str,
                      season: str = "2024-25",
                      out_dir: str = ".",
                      season_type: str = "Regular Season") -> str:
    games = get_team_game_log(team_abbr, season=season, season_type=season_type)

    os.makedirs(out_dir, exist_ok=True)
    path = game_log_path(team_abbr, season, out_dir)
    games.to_csv(path, index=False)
    print(f"  [pull] {len(games)} games for {team_abbr.upper()} {season}")
    print(f"Saved: {path}")
    return path


# --- command-line usage ---
def main():
    if len(sys.argv) < 2:
        print("Usage: python gamePull.py <TEAM> [SEASON]")
        sys.exit(1)

    team = sys.argv[1]
    season = sys.argv[2] if len(sys.argv) > 2 else "2024-25"

    print(f"\n=== Pulling game log for {team.upper()} {season} ===")
    try:
        save_game_log_csv(team, season)
    except Exception as e:
        print(f"[ERROR] {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
