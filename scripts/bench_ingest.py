#!/usr/bin/env python3
"""Ingest pytest-benchmark JSON results into DuckDB.

Usage:
    uv run pytest tests/bench --benchmark-only --benchmark-json bench/raw/cpython-3.12.json
    uv run scripts/bench_ingest.py [--db bench/tagged_bench.duckdb] [--notes "initial baseline"]

Every JSON file in bench/raw/ is one interpreter/build label (the file stem).
Each invocation records a new bench_runs row tagged with the current commit SHA.
"""

from __future__ import annotations

import json
import platform
import subprocess
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import click
import duckdb

DB_DEFAULT = "bench/tagged_bench.duckdb"
RAW_DIR = Path("bench/raw")

# Benchmark names follow test_bench_{scenario}_{phase}.
KNOWN_PHASES = frozenset({"construct", "assign", "dispatch", "assemble"})

SCHEMA = """
CREATE TABLE IF NOT EXISTS bench_runs (
    id          INTEGER PRIMARY KEY,
    commit_sha  VARCHAR NOT NULL,
    timestamp   TIMESTAMP NOT NULL,
    machine     VARCHAR,
    notes       VARCHAR
);

CREATE TABLE IF NOT EXISTS bench_results (
    run_id      INTEGER NOT NULL REFERENCES bench_runs(id),
    label       VARCHAR NOT NULL,
    scenario    VARCHAR NOT NULL,
    phase       VARCHAR NOT NULL,
    mean_ns     DOUBLE NOT NULL,
    stddev_ns   DOUBLE,
    min_ns      DOUBLE,
    max_ns      DOUBLE,
    rounds      BIGINT,
    PRIMARY KEY (run_id, label, scenario, phase)
);
"""

INSERT_RESULT = """
INSERT INTO bench_results
    (run_id, label, scenario, phase, mean_ns, stddev_ns, min_ns, max_ns, rounds)
VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
"""


def get_commit_sha() -> str:
    """Short SHA of HEAD, or "unknown" outside a git checkout."""
    result = subprocess.run(
        ["git", "rev-parse", "--short", "HEAD"],
        capture_output=True,
        text=True,
        check=False,
    )
    return result.stdout.strip() if result.returncode == 0 else "unknown"


def get_machine() -> str:
    return f"{platform.node()}/{platform.machine()}/{platform.python_implementation()}"


def create_run(con: duckdb.DuckDBPyConnection, notes: str | None) -> int:
    """Create a new benchmark run entry, return its ID."""
    con.execute(SCHEMA)

    max_id = con.execute("SELECT COALESCE(MAX(id), 0) FROM bench_runs").fetchone()[0]
    run_id = max_id + 1

    con.execute(
        "INSERT INTO bench_runs (id, commit_sha, timestamp, machine, notes) VALUES (?, ?, ?, ?, ?)",
        [run_id, get_commit_sha(), datetime.now(timezone.utc), get_machine(), notes],
    )
    return run_id


def split_name(name: str) -> tuple[str, str]:
    """test_bench_scalar_text_dispatch -> ("scalar_text", "dispatch")."""
    clean = name.removeprefix("test_bench_")
    scenario, _, phase = clean.rpartition("_")
    if scenario and phase in KNOWN_PHASES:
        return scenario, phase
    return clean, "dispatch"


def parse_results(data: dict[str, Any], label: str) -> list[dict[str, Any]]:
    """Normalize pytest-benchmark JSON (seconds) into rows (nanoseconds)."""
    to_ns = 1_000_000_000
    rows = []
    for bench in data.get("benchmarks", []):
        scenario, phase = split_name(bench.get("name", ""))
        stats = bench.get("stats", {})
        rows.append(
            {
                "label": label,
                "scenario": scenario,
                "phase": phase,
                "mean_ns": stats.get("mean", 0) * to_ns,
                "stddev_ns": (stats.get("stddev") or 0) * to_ns,
                "min_ns": stats.get("min", 0) * to_ns,
                "max_ns": stats.get("max", 0) * to_ns,
                "rounds": stats.get("rounds"),
            }
        )
    return rows


@click.command()
@click.option("--db", default=DB_DEFAULT, help="DuckDB database path")
@click.option("--notes", default=None, help="Notes for this benchmark run")
@click.option("--raw-dir", default=str(RAW_DIR), help="Directory with pytest-benchmark JSON files")
def main(db: str, notes: str | None, raw_dir: str) -> None:
    """Ingest benchmark results into DuckDB."""
    raw_path = Path(raw_dir)

    if not raw_path.exists():
        click.echo(f"Raw directory {raw_path} does not exist", err=True)
        sys.exit(1)

    json_files = sorted(raw_path.glob("*.json"))
    if not json_files:
        click.echo(f"No JSON files found in {raw_path}", err=True)
        sys.exit(1)

    con = duckdb.connect(db)
    run_id = create_run(con, notes)
    total = 0

    for json_file in json_files:
        label = json_file.stem
        rows = parse_results(json.loads(json_file.read_text()), label)
        for row in rows:
            con.execute(
                INSERT_RESULT,
                [
                    run_id,
                    row["label"],
                    row["scenario"],
                    row["phase"],
                    row["mean_ns"],
                    row["stddev_ns"],
                    row["min_ns"],
                    row["max_ns"],
                    row["rounds"],
                ],
            )
        total += len(rows)
        click.echo(f"  Ingested {len(rows)} results from {json_file.name} ({label})")

    con.close()
    click.echo(f"\nRun #{run_id}: {total} results ingested into {db}")


if __name__ == "__main__":
    main()
