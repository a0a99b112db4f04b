# calcdesk/runner.py
from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, List, Optional
from datetime import datetime
import csv
import json
import logging

from .config import ConfigError, load_run_config
from .registry import run_calculator
from .validate import ValidationError

logger = logging.getLogger(__name__)

RUN_FILE_PATTERNS = ("*.yaml", "*.yml", "*.json")


@dataclass
class RunResult:
    summary: Dict[str, Any]
    summary_path: Path
    results_path: Optional[Path] = None
    failed: List[str] = field(default_factory=list)


def _write_jsonl(path: Path, rows: List[Dict[str, Any]]) -> None:
    with path.open("w", encoding="utf-8") as f:
        for row in rows:
            f.write(json.dumps(row, ensure_ascii=False) + "\n")


def _write_csv(path: Path, rows: List[Dict[str, Any]]) -> None:
    if not rows:
        path.write_text("", encoding="utf-8")
        return
    hdr = sorted(rows[0].keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=hdr)
        w.writeheader()
        w.writerows(rows)


def _run_files(cfg_path: Path) -> List[Path]:
    if cfg_path.is_dir():
        files: List[Path] = []
        for pattern in RUN_FILE_PATTERNS:
            files.extend(p for p in cfg_path.glob(pattern) if p.is_file())
        if not files:
            raise ValueError(f"{cfg_path}: no run files found")
        return sorted(files)
    if not cfg_path.is_file():
        raise ValueError(f"{cfg_path}: no such file or directory")
    return [cfg_path]


def run_dir(
    config: str | Path,
    out_dir: str | Path,
    *,
    fmt: str = "jsonl",
    strict: bool = False,
) -> RunResult:
    """
    Run one calculator file, or every run file in a directory.

    Writes out_dir/summary.json ({file stem: headline}) and a timestamped
    results_<stamp>.jsonl|csv holding every headline and secondary value.
    Files that fail to load or validate are logged and listed in RunResult.failed.
    """
    if fmt not in ("jsonl", "csv"):
        raise ValueError(f"unknown fmt: {fmt}")
    cfg_path = Path(config)
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)
    mode = "strict" if strict else None

    summary: Dict[str, Any] = {}
    rows: List[Dict[str, Any]] = []
    failed: List[str] = []

    for f in _run_files(cfg_path):
        try:
            slug, inputs = load_run_config(f)
            result = run_calculator(slug, inputs, mode=mode)
        except (ConfigError, ValidationError) as e:
            logger.error("%s: %s", f.name, e)
            summary[f.stem] = {"error": str(e)}
            failed.append(f.name)
            continue

        logger.info("%s: %s -> %s", f.name, slug, result.headline.value)
        for w in result.warnings:
            logger.warning("%s: %s", f.name, w)

        summary[f.stem] = {
            "calculator": slug,
            "key": result.headline.key,
            "value": result.headline.value,
            "format": result.headline.format,
            "warnings": list(result.warnings),
        }
        for role, value in [("headline", result.headline)] + [("secondary", s) for s in result.secondary]:
            rows.append({
                "file": f.name,
                "calculator": slug,
                "role": role,
                "key": value.key,
                "label": value.label,
                "value": value.value,
                "format": value.format,
            })

    summary_path = out / "summary.json"
    summary_path.write_text(json.dumps(summary, indent=2, ensure_ascii=False), encoding="utf-8")

    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    results_path = out / f"results_{stamp}.{fmt}"
    if fmt == "jsonl":
        _write_jsonl(results_path, rows)
    else:
        _write_csv(results_path, rows)

    return RunResult(summary=summary, summary_path=summary_path, results_path=results_path, failed=failed)


__all__ = ["RunResult", "run_dir"]
