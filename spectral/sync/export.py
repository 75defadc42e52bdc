"""Snapshot export and raw document loading.

The catalog only produces in-memory snapshots; these helpers move them to
and from files.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

JSON_SUFFIXES = {".json"}
NDJSON_SUFFIXES = {".ndjson", ".jsonl"}
YAML_SUFFIXES = {".yaml", ".yml"}


def write_ndjson(snapshot: list[dict[str, Any]], path: str | Path) -> Path:
    """Write one JSON object per line."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        for entry in snapshot:
            f.write(json.dumps(entry) + "\n")
    return path


def write_json(snapshot: list[dict[str, Any]], path: str | Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(snapshot, f, indent=2)
    return path


def write_snapshot(snapshot: list[dict[str, Any]], path: str | Path, fmt: str = "ndjson") -> Path:
    if fmt == "ndjson":
        return write_ndjson(snapshot, path)
    if fmt == "json":
        return write_json(snapshot, path)
    raise ValueError(f"Unknown export format: {fmt}")


def load_documents(path: str | Path) -> list[dict[str, Any]]:
    """Read raw record documents from a JSON, NDJSON, or YAML file.

    A file may hold a single document or a list of them.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix in NDJSON_SUFFIXES:
        documents = []
        with open(path) as f:
            for line in f:
                line = line.strip()
                if line:
                    documents.append(json.loads(line))
        return documents

    if suffix in JSON_SUFFIXES:
        with open(path) as f:
            data = json.load(f)
    elif suffix in YAML_SUFFIXES:
        with open(path) as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}")
    else:
        raise ValueError(f"Unsupported document file: {path}")

    if data is None:
        return []
    return data if isinstance(data, list) else [data]
