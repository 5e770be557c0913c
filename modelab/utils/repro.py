"""Run directories and JSON result files for benchmark runs."""
from __future__ import annotations

import json
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any


def utc_timestamp() -> str:
    # e.g. 2026-01-08T12-34-56Z (safe for filenames)
    return time.strftime("%Y-%m-%dT%H-%M-%SZ", time.gmtime())


@dataclass(frozen=True)
class RunPaths:
    run_dir: Path
    results_json: Path
    roundtrip_json: Path


def make_run_dir(runs_root: str | Path, run_name: str) -> RunPaths:
    """Create ``<runs_root>/<timestamp>_<run_name>`` with unsafe characters replaced."""
    runs_root = Path(runs_root)
    safe = "".join(ch if ch.isalnum() or ch in "-_" else "_" for ch in run_name.strip())[:60]
    run_dir = runs_root / f"{utc_timestamp()}_{safe}"
    run_dir.mkdir(parents=True, exist_ok=True)
    return RunPaths(
        run_dir=run_dir,
        results_json=run_dir / "results.json",
        roundtrip_json=run_dir / "roundtrip.json",
    )


def _to_jsonable(obj: Any) -> Any:
    # Result dataclasses (RoundtripResult, BenchmarkResult) expose to_dict()
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    raise TypeError(f"{type(obj).__name__} is not JSON serializable")


def write_json(path: str | Path, obj: Any) -> None:
    """Write ``obj`` as sorted, indented JSON, serializing result objects via ``to_dict``."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    text = json.dumps(obj, indent=2, sort_keys=True, default=_to_jsonable)
    path.write_text(text, encoding="utf-8")


def read_json(path: str | Path) -> Any:
    return json.loads(Path(path).read_text(encoding="utf-8"))
