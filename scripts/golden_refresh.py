from __future__ import annotations
import json, os, sys
from pathlib import Path

from calcdesk import cli

ROOT = Path(__file__).resolve().parents[1]
SCENARIOS = ROOT / "calcdesk" / "inputs" / "scenarios"
OUTDIR = ROOT / "_out_golden_baseline"
BASELINE = ROOT / "tests" / "golden" / "summary.json"

def main() -> int:
    if not SCENARIOS.is_dir():
        print(f"[x] Missing scenarios dir: {SCENARIOS}", file=sys.stderr)
        return 2

    os.environ["VALIDATION_MODE"] = "relaxed"
    rc = cli.main(["--config", str(SCENARIOS), "--outputs-dir", str(OUTDIR), "--format", "csv", "--quiet"])
    if rc != 0:
        print(f"[x] calcdesk run failed with exit code {rc}", file=sys.stderr)
        return rc

    sj = OUTDIR / "summary.json"
    if not sj.exists():
        print("[x] summary.json not produced; check CLI/run_dir", file=sys.stderr)
        return 3

    data = json.loads(sj.read_text(encoding="utf-8"))
    # Headline values only, keyed by scenario file stem
    minimal = {stem: entry["value"] for stem, entry in data.items()}
    missing = sorted(stem for stem, v in minimal.items() if v is None)
    if missing:
        print(f"[x] headline not available for {missing}", file=sys.stderr)
        return 4

    BASELINE.parent.mkdir(parents=True, exist_ok=True)
    BASELINE.write_text(json.dumps(minimal, indent=2, sort_keys=True), encoding="utf-8")
    print(f"[ok] Wrote baseline {BASELINE}")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
