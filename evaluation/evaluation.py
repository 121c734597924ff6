#!/usr/bin/env python3
"""
Evaluation runner for the Huffman compressor.

This evaluation script:
- Runs the pytest suite in tests/ and collects per-test outcomes
- Measures compression ratios of a small built-in corpus
- Writes a structured JSON report with environment metadata

Run with:
    python evaluation/evaluation.py [--output report.json]
"""
import argparse
import json
import os
import platform
import random
import subprocess
import sys
import time
import uuid
from datetime import datetime
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from huffman_service import HuffmanService  # noqa: E402

STATUS_WORDS = {
    " PASSED": "passed",
    " FAILED": "failed",
    " ERROR": "error",
    " SKIPPED": "skipped",
}


def generate_run_id():
    """Generate a short unique run ID."""
    return uuid.uuid4().hex[:8]


def get_git_info():
    """Get git commit and branch, or "unknown" outside a checkout."""
    git_info = {"git_commit": "unknown", "git_branch": "unknown"}
    queries = {
        "git_commit": ["git", "rev-parse", "HEAD"],
        "git_branch": ["git", "rev-parse", "--abbrev-ref", "HEAD"],
    }
    for key, cmd in queries.items():
        try:
            result = subprocess.run(
                cmd, capture_output=True, text=True, timeout=5, cwd=str(PROJECT_ROOT)
            )
        except (OSError, subprocess.SubprocessError):
            continue
        if result.returncode == 0:
            value = result.stdout.strip()
            git_info[key] = value[:8] if key == "git_commit" else value
    return git_info


def get_environment_info():
    """Collect environment information for the report."""
    git_info = get_git_info()

    return {
        "python_version": platform.python_version(),
        "platform": platform.platform(),
        "os": platform.system(),
        "architecture": platform.machine(),
        "hostname": platform.node(),
        "git_commit": git_info["git_commit"],
        "git_branch": git_info["git_branch"],
    }


def parse_pytest_verbose_output(output):
    """Parse `pytest -v` output into a list of {nodeid, name, outcome}."""
    tests = []
    for line in output.splitlines():
        line = line.strip()
        if "::" not in line:
            continue
        for status_word, outcome in STATUS_WORDS.items():
            if status_word in line:
                nodeid = line.split(status_word)[0].strip()
                tests.append({
                    "nodeid": nodeid,
                    "name": nodeid.split("::")[-1],
                    "outcome": outcome,
                })
                break
    return tests


def summarize(tests):
    summary = {"total": len(tests)}
    for outcome in STATUS_WORDS.values():
        summary[outcome] = sum(1 for t in tests if t["outcome"] == outcome)
    return summary


def run_tests(tests_dir=None, timeout=300):
    """
    Run pytest on the tests/ folder.

    Returns:
        dict with success flag, exit code, parsed tests and a summary
    """
    tests_dir = Path(tests_dir or PROJECT_ROOT / "tests")
    print(f"\n{'=' * 60}")
    print("RUNNING TESTS")
    print(f"{'=' * 60}")
    print(f"Tests directory: {tests_dir}")

    cmd = [sys.executable, "-m", "pytest", str(tests_dir), "-v", "--tb=short"]
    env = os.environ.copy()
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(PROJECT_ROOT), env.get("PYTHONPATH")]))

    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            cwd=str(PROJECT_ROOT),
            env=env,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        print("❌ Test execution timed out")
        return {
            "success": False,
            "exit_code": -1,
            "tests": [],
            "summary": {"error": "Test execution timed out"},
            "stdout": "",
            "stderr": "",
        }

    tests = parse_pytest_verbose_output(result.stdout)
    summary = summarize(tests)
    print(
        f"\nResults: {summary['passed']} passed, {summary['failed']} failed, "
        f"{summary['error']} errors, {summary['skipped']} skipped (total: {summary['total']})"
    )
    for test in tests:
        status_icon = {
            "passed": "✅",
            "failed": "❌",
            "error": "💥",
            "skipped": "⏭️",
        }.get(test["outcome"], "❓")
        print(f"  {status_icon} {test['nodeid']}: {test['outcome']}")

    return {
        "success": result.returncode == 0,
        "exit_code": result.returncode,
        "tests": tests,
        "summary": summary,
        "stdout": result.stdout[-3000:],
        "stderr": result.stderr[-1000:],
    }


def build_corpus(seed=1234):
    rng = random.Random(seed)
    return {
        "empty": b"",
        "single_byte": b"A",
        "repeated_symbol": b"A" * 100000,
        "text": b"the quick brown fox jumps over the lazy dog\n" * 2000,
        "skewed": bytes(rng.choice(b"aaaaaaaabbbbccd") for _ in range(50000)),
        "uniform_random": bytes(rng.getrandbits(8) for _ in range(50000)),
    }


def measure_corpus(corpus=None, table_mode="frequencies"):
    """Compress and restore every corpus sample, recording sizes and timings."""
    service = HuffmanService(table_mode=table_mode)
    results = {}
    for name, data in (corpus or build_corpus()).items():
        t0 = time.perf_counter()
        compressed = service.compress(data)
        t1 = time.perf_counter()
        restored = service.decompress(compressed)
        t2 = time.perf_counter()
        results[name] = {
            "original_size": len(data),
            "compressed_size": len(compressed),
            "ratio": round(len(compressed) / len(data), 4) if data else None,
            "round_trip": restored == data,
            "compress_seconds": round(t1 - t0, 6),
            "decompress_seconds": round(t2 - t1, 6),
        }
    return results


def generate_output_path():
    """Generate output path in format: evaluation/YYYY-MM-DD/HH-MM-SS/report.json"""
    now = datetime.now()
    output_dir = PROJECT_ROOT / "evaluation" / now.strftime("%Y-%m-%d") / now.strftime("%H-%M-%S")
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir / "report.json"


def main(argv=None):
    """Main entry point for evaluation."""
    parser = argparse.ArgumentParser(description="Run the Huffman compressor evaluation")
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output JSON file path (default: evaluation/YYYY-MM-DD/HH-MM-SS/report.json)",
    )
    parser.add_argument(
        "--skip-tests",
        action="store_true",
        help="only measure the corpus, do not run pytest",
    )
    args = parser.parse_args(argv)

    run_id = generate_run_id()
    started_at = datetime.now()
    print(f"Run ID: {run_id}")
    print(f"Started at: {started_at.isoformat()}")

    tests = None if args.skip_tests else run_tests()
    corpus = {mode: measure_corpus(table_mode=mode) for mode in ("frequencies", "codes")}
    round_trips_ok = all(r["round_trip"] for results in corpus.values() for r in results.values())
    success = round_trips_ok and (tests is None or tests["success"])

    finished_at = datetime.now()
    duration = (finished_at - started_at).total_seconds()

    report = {
        "run_id": run_id,
        "started_at": started_at.isoformat(),
        "finished_at": finished_at.isoformat(),
        "duration_seconds": round(duration, 6),
        "success": success,
        "environment": get_environment_info(),
        "tests": tests,
        "corpus": corpus,
    }

    output_path = Path(args.output) if args.output else generate_output_path()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        json.dump(report, f, indent=2)
    print(f"\n✅ Report saved to: {output_path}")

    print(f"\n{'=' * 60}")
    print("EVALUATION COMPLETE")
    print(f"{'=' * 60}")
    print(f"Run ID: {run_id}")
    print(f"Duration: {duration:.2f}s")
    print(f"Success: {'✅ YES' if success else '❌ NO'}")

    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
