import pandas as pd
import pytest

N_FIELDS = 26


def box_row(result, trb, game=1):
    """A 26-field box score row with the result in field 6 and TRB in field 25."""
    values = [str(game), "2024-11-0%d" % (game % 9 + 1), "", "Opp", "", "", result]
    values += [str(i) for i in range(7, N_FIELDS - 1)]
    values.append(str(trb))
    return values


HEADER = ["Rk", "Date", "Site", "Opp", "Type", "Col5", "Rslt"] + \
         [f"c{i}" for i in range(7, N_FIELDS - 1)] + ["TRB"]


@pytest.fixture
def write_box_scores(tmp_path):
    """Write rows (lists of fields or raw strings) under a header; return the path."""
    def _write(rows, name="season.csv", header=True):
        path = tmp_path / name
        lines = [",".join(HEADER)] if header else []
        for r in rows:
            lines.append(r if isinstance(r, str) else ",".join(r))
        path.write_text("\n".join(lines) + "\n")
        return str(path)
    return _write


class FakeFinder:
    """Stands in for nba_api's LeagueGameFinder endpoint."""

    def __init__(self, team_id_nullable=None, season_nullable=None, season_type_nullable=None):
        self.team_id = team_id_nullable

    def get_data_frames(self):
        # newest first, like the real endpoint, plus one unplayed game
        return [pd.DataFrame({
            "GAME_ID": ["0022400003", "0022400009", "0022400002", "0022400001"],
            "GAME_DATE": ["2024-10-26", "2024-10-28", "2024-10-24", "2024-10-22"],
            "TEAM_ABBREVIATION": ["SAC"] * 4,
            "MATCHUP": ["SAC vs. LAL", "SAC @ POR", "SAC @ MIN", "SAC vs. MIN"],
            "WL": ["L", None, "W", "W"],
            "PTS": [100, None, 110, 120],
            "REB": [34, None, 48, 30],
        })]
