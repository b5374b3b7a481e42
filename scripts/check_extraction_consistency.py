#!/usr/bin/env python3
# ============================================================================
# scripts/check_extraction_consistency.py
# ============================================================================
"""
Check Extraction Consistency

Runs the text extraction pipeline several times on the same lab report
and reports how much the results vary between runs:
- analyte count per run (min / max / average)
- analytes that were not found in every run
- failed runs

Needs OPENAI_API_KEY (or the Azure settings) in the environment or .env.

Usage:
    python scripts/check_extraction_consistency.py
    python scripts/check_extraction_consistency.py --runs 10
    python scripts/check_extraction_consistency.py --file report.txt --delay 2
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Dict, List, Set

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from lab_ingestion.config import logging_settings
from lab_ingestion.constants import SAMPLE_COMPREHENSIVE_LAB_TEXT
from lab_ingestion.core.pipeline import LabReportPipeline
from lab_ingestion.utils import LabIngestionError, setup_logging


def summarize_runs(runs: List[List[str]]) -> Dict[str, object]:
    """
    Summarize analyte names found per successful run.

    Returns:
        Dict with counts, min/max/avg and the names missing from some runs
    """
    counts = [len(names) for names in runs]
    name_sets: List[Set[str]] = [set(names) for names in runs]
    all_names = set().union(*name_sets) if name_sets else set()
    common = set.intersection(*name_sets) if name_sets else set()

    return {
        "counts": counts,
        "min": min(counts) if counts else 0,
        "max": max(counts) if counts else 0,
        "avg": (sum(counts) / len(counts)) if counts else 0.0,
        "inconsistent_names": sorted(all_names - common),
    }


async def run_checks(text: str, runs: int, delay: float) -> int:
    pipeline = LabReportPipeline()
    found: List[List[str]] = []
    failures: List[str] = []

    print(f"Running {runs} extraction(s) on {len(text)} chars of text...\n")

    for i in range(1, runs + 1):
        try:
            outcome = await pipeline.extract_from_text(text)
        except LabIngestionError as e:
            failures.append(f"Run {i}: {e.error_code}: {e.message}")
            print(f"Run {i}/{runs}: FAILED ({e.error_code})")
        else:
            names = sorted(a.name for a in outcome.analytes)
            found.append(names)
            print(
                f"Run {i}/{runs}: {len(names)} analytes "
                f"({outcome.extraction_meta.extraction_quality.value}) "
                f"first: {', '.join(names[:5])}"
            )

        if i < runs and delay > 0:
            await asyncio.sleep(delay)

    print(f"\n{'='*60}")
    print("CONSISTENCY SUMMARY")
    print(f"{'='*60}")
    print(f"Successful runs: {len(found)}/{runs}")

    if found:
        summary = summarize_runs(found)
        print(f"Analyte count: min {summary['min']}, max {summary['max']}, avg {summary['avg']:.1f}")
        print(f"Count consistency: {'stable' if summary['min'] == summary['max'] else 'variable'}")
        if summary["inconsistent_names"]:
            print("Analytes not found in every run:")
            for name in summary["inconsistent_names"]:
                hits = sum(1 for names in found if name in names)
                print(f"  {name}: {hits}/{len(found)}")
        else:
            print("Same analyte names in every run")

    for failure in failures:
        print(f"  {failure}")

    return 0 if not failures else 1


def main():
    parser = argparse.ArgumentParser(description="Check run-to-run extraction consistency")
    parser.add_argument("--runs", type=int, default=5, help="Number of extraction runs")
    parser.add_argument("--file", type=Path, help="Text file with the lab report (default: built-in sample)")
    parser.add_argument("--delay", type=float, default=0.0, help="Seconds to wait between runs")
    args = parser.parse_args()

    setup_logging(level=logging_settings.LOG_LEVEL, format_json=logging_settings.LOG_JSON)

    if args.file:
        if not args.file.exists():
            print(f"ERROR: File not found: {args.file}")
            sys.exit(1)
        text = args.file.read_text(encoding="utf-8")
    else:
        text = SAMPLE_COMPREHENSIVE_LAB_TEXT

    sys.exit(asyncio.run(run_checks(text, max(1, args.runs), args.delay)))


if __name__ == "__main__":
    main()
