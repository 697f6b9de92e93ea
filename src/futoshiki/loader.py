import json
import os
import re
from typing import Any, Dict, List, Optional

import pandas as pd

from src.utils.io import load_json


def load_puzzles(file_path: str) -> List[Dict[str, Any]]:
    """
    Reads puzzles from a file. Handles .json, .jsonl and .parquet formats.
    Returns a list of raw puzzle dictionaries.
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"File not found: {file_path}")

    def _infer_size(value: Any) -> Optional[int]:
        if isinstance(value, str):
            match = re.search(r"(\d+)x(\d+)", value)
            if match and match.group(1) == match.group(2):
                return int(match.group(1))
        return None

    def _normalize_record(record: Dict[str, Any]) -> Dict[str, Any]:
        record = _coerce_jsonable(record)
        if record.get("id") in (None, ""):
            stem = os.path.splitext(os.path.basename(file_path))[0]
            record["id"] = stem

        board = record.get("board")
        if not (isinstance(board, str) and board.strip()) and record.get("size") in (None, ""):
            inferred = _infer_size(record.get("id"))
            if inferred:
                record["size"] = inferred
        return record

    # Case 1: Parquet File (Binary)
    if file_path.endswith(".parquet"):
        try:
            df = pd.read_parquet(file_path)
        except (OSError, ValueError, ImportError) as e:
            print(f"Error reading parquet: {e}")
            return []
        records = df.to_dict(orient="records")
        return [_normalize_record(r) for r in records]

    # Case 2: JSON File (Text; array or object)
    if file_path.endswith(".json"):
        try:
            payload = load_json(file_path)
        except json.JSONDecodeError:
            # Some sources use ".json" but actually store JSONL; fall back to line-delimited parsing.
            return _read_jsonl(file_path, _normalize_record)
        if isinstance(payload, list):
            return [_normalize_record(p) for p in payload if isinstance(p, dict)]
        if isinstance(payload, dict):
            return [_normalize_record(payload)]
        return []

    # Case 3: JSONL File (Text)
    return _read_jsonl(file_path, _normalize_record)


def _read_jsonl(file_path: str, normalize) -> List[Dict[str, Any]]:
    data = []
    with open(file_path, "r", encoding="utf-8") as f:
        for line in f:
            if not line.strip():
                continue
            try:
                obj = json.loads(line)
            except json.JSONDecodeError:
                continue
            if isinstance(obj, dict):
                data.append(normalize(obj))
    return data


def _coerce_jsonable(value):
    if isinstance(value, dict):
        return {k: _coerce_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_coerce_jsonable(v) for v in value]
    if hasattr(value, "tolist"):
        # numpy arrays and scalars coming out of parquet columns
        return _coerce_jsonable(value.tolist())
    if isinstance(value, float) and value != value:
        return None  # NaN from missing parquet cells
    return value
