#!/usr/bin/env python3
"""
Read a season of box-score rows and turn them into an ordered state sequence.

Default layout (sports-reference team game log export):
  - row 0 is a header and is skipped
  - field 6  : result marker, "W" for a win
  - field 25 : total rebounds (TRB)

Fields can also be addressed by header name (e.g. the nba_api game log,
see gamePull.NBA_GAME_LOG_SCHEMA).
"""

import csv
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Union

import pandas as pd

from ReboundMarkov import STATES, GameState, classify_game

Field = Union[int, str]


@dataclass(frozen=True)
class RecordSchema:
    result_field: Field = 6
    rebounds_field: Field = 25
    win_marker: str = "W"
    loss_marker: str = "L"
    # lenient: anything that is not win_marker is a loss
    strict_result: bool = False

    def resolve(self, header: Sequence[str]):
        """Return (result_idx, rebounds_idx), looking names up in the header row."""
        return (
            _field_index(self.result_field, header),
            _field_index(self.rebounds_field, header),
        )


DEFAULT_SCHEMA = RecordSchema()

# plain ASCII integers only: int() alone also takes "4_5" and non-ASCII digits
_INT_RE = re.compile(r"-?[0-9]+")


def _field_index(f: Field, header: Sequence[str]) -> int:
    if isinstance(f, int):
        return f
    names = [h.strip() for h in header]
    if f not in names:
        raise ValueError(f"Column '{f}' not found in header: {names}")
    return names.index(f)


@dataclass(frozen=True)
class GameRecord:
    line: int
    rebounds: int
    is_win: bool


@dataclass(frozen=True)
class RowError:
    line: int
    field: str
    reason: str
    raw: str

    def __str__(self):
        return f"line {self.line}, field {self.field}: {self.reason}: {self.raw}"


class MalformedRowsError(ValueError):
    """One or more rows could not be parsed; carries every failing row."""

    def __init__(self, path: str, errors: List[RowError]):
        self.path = path
        self.errors = list(errors)
        lines = "\n".join(f"  {e}" for e in self.errors)
        super().__init__(f"{len(self.errors)} malformed row(s) in {path}:\n{lines}")


# --------------------------------------------------
# Record reader
# --------------------------------------------------

def parse_row(
    values: Sequence[str],
    line: int,
    result_idx: int,
    rebounds_idx: int,
    schema: RecordSchema = DEFAULT_SCHEMA,
):
    """
    Parse one split row. Returns (GameRecord, []) or (None, [RowError, ...]).
    Both fields are checked so a row reports all of its problems at once.
    """
    raw = ",".join(values)
    errors = []

    rebounds = None
    if rebounds_idx >= len(values):
        errors.append(RowError(line, str(schema.rebounds_field), f"missing (row has {len(values)} fields)", raw))
    else:
        text = values[rebounds_idx].strip()
        if not _INT_RE.fullmatch(text):
            errors.append(RowError(line, str(schema.rebounds_field), f"rebounds '{text}' is not an integer", raw))
        else:
            rebounds = int(text)
            if rebounds < 0:
                errors.append(RowError(line, str(schema.rebounds_field), f"rebounds {rebounds} is negative", raw))

    is_win = None
    if result_idx >= len(values):
        errors.append(RowError(line, str(schema.result_field), f"missing (row has {len(values)} fields)", raw))
    else:
        marker = values[result_idx].strip()
        if marker == schema.win_marker:
            is_win = True
        elif marker == schema.loss_marker or not schema.strict_result:
            is_win = False
        else:
            errors.append(RowError(
                line, str(schema.result_field),
                f"result '{marker}' is neither '{schema.win_marker}' nor '{schema.loss_marker}'", raw,
            ))

    if errors:
        return None, errors
    return GameRecord(line=line, rebounds=rebounds, is_win=is_win), []


def read_game_records(path: str, schema: RecordSchema = DEFAULT_SCHEMA) -> List[GameRecord]:
    """
    Read every data row of `path` in file order.

    Raises FileNotFoundError if the file is missing, ValueError naming the
    file and line if it cannot be decoded or split, and MalformedRowsError
    (listing all bad rows) if any row fails to parse. Blank lines are ignored.
    """
    try:
        f = open(path, "r", encoding="utf-8", newline="")
    except FileNotFoundError:
        raise FileNotFoundError(f"Box score file not found: {path}")

    records: List[GameRecord] = []
    errors: List[RowError] = []
    with f:
        reader = csv.reader(f)
        try:
            header = next(reader, None)
            if header is None:
                return records
            result_idx, rebounds_idx = schema.resolve(header)

            for values in reader:
                if not any(v.strip() for v in values):
                    continue
                rec, errs = parse_row(values, reader.line_num, result_idx, rebounds_idx, schema)
                if errs:
                    errors.extend(errs)
                else:
                    records.append(rec)
        except (UnicodeDecodeError, csv.Error) as e:
            raise ValueError(f"Cannot read {path} near line {reader.line_num + 1}: {e}") from e

    if errors:
        raise MalformedRowsError(path, errors)
    return records


# --------------------------------------------------
# Sequence builder
# --------------------------------------------------

@dataclass(frozen=True)
class StateSequence:
    states: tuple

    def __len__(self):
        return len(self.states)

    def __iter__(self):
        return iter(self.states)

    def __getitem__(self, i):
        return self.states[i]

    def frequencies(self) -> pd.Series:
        """Occurrences per state in canonical order, zeros included."""
        counts = pd.Series([s.code for s in self.states], dtype=object).value_counts()
        return (
            counts.reindex([s.code for s in STATES], fill_value=0)
                  .astype(int)
                  .rename("count")
        )

    def codes(self) -> List[str]:
        return [s.code for s in self.states]


def build_state_sequence(records: Iterable[GameRecord]) -> StateSequence:
    return StateSequence(states=tuple(classify_game(r.rebounds, r.is_win) for r in records))


def load_state_sequence(path: str, schema: Optional[RecordSchema] = None) -> StateSequence:
    records = read_game_records(path, schema=schema or DEFAULT_SCHEMA)
    return build_state_sequence(records)


def sequence_from_codes(codes: Iterable[str]) -> StateSequence:
    """Build a sequence directly from codes like ['HW', 'HL', ...]."""
    return StateSequence(states=tuple(GameState(c) for c in codes))
