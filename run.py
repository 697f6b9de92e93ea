"""CLI entrypoint: load puzzle(s), run propagation, and report each round."""

import argparse
import csv
import json
import os
from pathlib import Path
from typing import List, Optional

from solver import solve_puzzle
from src.futoshiki.loader import load_puzzles
from src.futoshiki.model import EmptyDomainError, Snapshot, StalledError
from src.futoshiki.puzzles import DEFAULT_PUZZLE, PUZZLES, get_puzzle
from src.futoshiki.render import print_round, render_board, snapshot_rows
from src.utils.io import save_json
from src.utils.trace import get_tracer, reset_tracer

PUZZLE_SUFFIXES = [".json", ".jsonl", ".parquet"]


def parse_args(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="Solve Futoshiki puzzles by constraint propagation")
    parser.add_argument(
        "input",
        type=Path,
        nargs="?",
        default=None,
        help="Puzzle file or directory of puzzles (defaults to $FUTOSHIKI_DATA_PATH, then the built-in puzzle)",
    )
    parser.add_argument(
        "--puzzle",
        choices=sorted(PUZZLES),
        default=None,
        help="Solve a built-in puzzle by id instead of reading files",
    )
    parser.add_argument("--output", type=Path, default=None, help="Optional .csv or .json path to write results")
    parser.add_argument("--trace-dir", type=Path, default=None, help="Write one trace CSV per puzzle here")
    parser.add_argument(
        "--max-rounds",
        type=int,
        default=None,
        help="Give up after this many rounds even if propagation is still making progress",
    )
    parser.add_argument("--quiet", action="store_true", help="Do not print the board after every round")
    return parser.parse_args(argv)


def collect_puzzles(input_path: Optional[Path], puzzle_id: Optional[str] = None) -> List[dict]:
    if input_path is None:
        if puzzle_id:
            return [get_puzzle(puzzle_id)]
        env_path = os.environ.get("FUTOSHIKI_DATA_PATH")
        if not env_path:
            return [get_puzzle(DEFAULT_PUZZLE["id"])]
        input_path = Path(env_path)

    if input_path.is_file():
        return load_puzzles(str(input_path))
    if input_path.is_dir():
        puzzles = []
        for file_path in sorted(input_path.iterdir()):
            if file_path.suffix in PUZZLE_SUFFIXES:
                puzzles.extend(load_puzzles(str(file_path)))
        return puzzles
    raise ValueError(f"Input path {input_path} is neither file nor directory")


def format_solution(snapshot: Optional[Snapshot], status: str) -> dict:
    if snapshot is None:
        return {"status": status, "rows": []}
    return {"status": status, "rows": snapshot_rows(snapshot)}


def write_results_csv(results, output_path: Path):
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["id", "status", "grid_solution", "rounds", "steps"])

        for r in results:
            writer.writerow([
                r["id"],
                r["status"],
                json.dumps(r["grid_solution"], ensure_ascii=False, separators=(",", ":")),
                r["rounds"],
                r["steps"],
            ])


def solve_one(puzzle: dict, max_rounds: Optional[int] = None, quiet: bool = False) -> dict:
    """Solve a single raw puzzle; failures become a status rather than an exception."""
    puzzle_id = puzzle.get("id", "unknown")
    on_round = None if quiet else print_round
    snapshot: Optional[Snapshot] = None
    rounds = 0

    try:
        result = solve_puzzle(puzzle, max_rounds=max_rounds, on_round=on_round)
        status = "solved"
        snapshot = result.solution
        rounds = result.rounds
    except StalledError as e:
        print(f"STALLED: puzzle {puzzle_id}: {e}")
        status = "stalled"
        snapshot = e.snapshot
        rounds = e.rounds
    except EmptyDomainError as e:
        print(f"CONTRADICTION: puzzle {puzzle_id}: {e}")
        status = "contradiction"
        snapshot = e.snapshot
        rounds = e.rounds
    except (ValueError, TypeError) as e:
        print(f"ERROR: Failed to read puzzle {puzzle_id}: {e}")
        status = "error"
        rounds = -1

    summary = get_tracer().summary()
    return {
        "id": puzzle_id,
        "status": status,
        "grid_solution": format_solution(snapshot, status),
        "rounds": rounds,
        "steps": summary["num_eliminations"] + summary["num_hidden_singles"],
    }


def main(argv: Optional[List[str]] = None):
    args = parse_args(argv)
    puzzles = collect_puzzles(args.input, args.puzzle)
    results = []

    for puzzle in puzzles:
        reset_tracer()
        tracer = get_tracer()

        result = solve_one(puzzle, max_rounds=args.max_rounds, quiet=args.quiet)
        results.append(result)

        if args.trace_dir:
            tracer.to_csv(args.trace_dir / f"{result['id']}.csv")

        rows = result["grid_solution"]["rows"]
        if rows and args.quiet:
            print(f"\n{result['id']} ({result['status']}):")
            print(render_board(tuple(tuple(row) for row in rows)))

    if args.output:
        if args.output.suffix == ".json":
            save_json(args.output, results)
        else:
            write_results_csv(results, args.output)
    else:
        print(results)
    return results


if __name__ == "__main__":
    main()
