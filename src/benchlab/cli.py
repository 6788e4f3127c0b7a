from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
import time
from pathlib import Path

from benchlab.analysis import compare_runs, variant_frame, variant_scores
from benchlab.config import DEFAULT_BASE_URL, DEFAULT_METRICS_PATH, BenchmarkConfig, TargetConfig
from benchlab.errors import BenchlabError, RunNotFoundError
from benchlab.formatting import format_bytes, format_clock, format_duration
from benchlab.log import configure_logging
from benchlab.orchestrator import ProgressState, Variant, describe_progress, run_and_save
from benchlab.storage import ResultStore

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path(".benchlab/benchlab.duckdb")
DEFAULT_ENDPOINT_TEMPLATE = "/api/scenarios/{scenario}/{variant}"
PROGRESS_LOG_INTERVAL_SEC = 5.0


class ConsoleProgress:
    """Logs a progress line on each transition and periodically in between."""

    def __init__(self, interval_sec: float = PROGRESS_LOG_INTERVAL_SEC) -> None:
        self._interval = interval_sec
        self._last_key: tuple[str, bool, bool] | None = None
        self._last_logged = 0.0

    def __call__(self, state: ProgressState) -> None:
        now = time.monotonic()
        key = (state.current_variant, state.is_warming_up, state.is_running)
        if key == self._last_key and now - self._last_logged < self._interval:
            return
        self._last_key = key
        self._last_logged = now
        if not state.is_running:
            logger.info("Benchmark finished: %d variants completed", len(state.completed_variants))
            return
        report = describe_progress(state, now)
        phase = "warming up" if state.is_warming_up else "testing"
        logger.info(
            "[%3d%%] %s %s (%d of %d), elapsed %s, remaining ~%s",
            round(report.overall_fraction * 100),
            phase,
            state.current_variant,
            state.current_variant_index + 1,
            state.total_variants,
            format_clock(report.elapsed_ms),
            format_clock(report.remaining_ms),
        )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Benchmark endpoint variants under concurrent load")
    parser.add_argument("--db", type=Path, default=DEFAULT_DB_PATH, help="Result store path")
    parser.add_argument("--log-level", default="INFO")
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Benchmark variants and save the run")
    run.add_argument("--name", required=True)
    run.add_argument("--scenario", required=True)
    run.add_argument("--variant", action="append", required=True, dest="variants")
    run.add_argument(
        "--base-url",
        default=os.environ.get("BENCHLAB_WEBAPI_URL", DEFAULT_BASE_URL),
    )
    run.add_argument("--endpoint-template", default=DEFAULT_ENDPOINT_TEMPLATE)
    run.add_argument("--duration", default="10s")
    run.add_argument("--concurrency", type=int, default=5)
    run.add_argument("--warmup", type=int, default=1)
    run.add_argument("--timeout", type=int, default=60, help="Per-request timeout (sec)")
    run.add_argument("--metrics-path", default=DEFAULT_METRICS_PATH)
    run.add_argument("--no-metrics", action="store_true")

    sub.add_parser("list", help="List stored runs")
    show = sub.add_parser("show", help="Show one stored run")
    show.add_argument("run_id")
    delete = sub.add_parser("delete", help="Delete a stored run")
    delete.add_argument("run_id")
    export = sub.add_parser("export", help="Export a run as JSON")
    export.add_argument("run_id")
    export.add_argument("--output", type=Path)
    imp = sub.add_parser("import", help="Import a run from a JSON file")
    imp.add_argument("path", type=Path)
    compare = sub.add_parser("compare", help="Compare two stored runs")
    compare.add_argument("base_id")
    compare.add_argument("candidate_id")
    return parser


def _cmd_run(args: argparse.Namespace, store: ResultStore) -> int:
    target = TargetConfig(
        base_url=args.base_url,
        metrics_path=None if args.no_metrics else args.metrics_path,
    )
    config = BenchmarkConfig(
        duration=args.duration,
        concurrency=args.concurrency,
        warmup_requests=args.warmup,
        http_timeout_seconds=args.timeout,
    )
    variants = [
        Variant(
            name=name,
            endpoint=args.endpoint_template.format(scenario=args.scenario, variant=name),
            scenario=args.scenario,
        )
        for name in args.variants
    ]
    run = asyncio.run(
        run_and_save(args.name, variants, config, store, target=target, observer=ConsoleProgress())
    )
    print(f"Run complete: {run.id}")
    _print_run(store, run.id)
    return 0


def _print_run(store: ResultStore, run_id: str) -> None:
    run = store.get_run(run_id)
    if run is None:
        raise RunNotFoundError(f"Benchmark run {run_id} not found")
    print(f"{run.name} ({run.created_at})")
    print(f"  {run.hardware.os} | {run.hardware.cpu} | {run.hardware.memory}")
    for endpoint_run in run.runs:
        results = endpoint_run.results
        print(
            f"  {endpoint_run.variant}: {results.requests_per_second:.1f} req/s, "
            f"p50 {format_duration(results.latency_p50)}, "
            f"p95 {format_duration(results.latency_p95)}, "
            f"p99 {format_duration(results.latency_p99)}, "
            f"{results.errors}/{results.total_requests} errors"
        )
        if results.peak_memory_mb is not None:
            print(f"    peak memory {format_bytes(results.peak_memory_mb * 1024 * 1024)}")
    frame = variant_frame(run)
    if not frame.empty:
        print(variant_scores(run).to_string(index=False))


def _cmd_list(store: ResultStore) -> int:
    runs = store.list_runs()
    if not runs:
        print("No runs yet.")
        return 0
    for run in runs:
        variants = ", ".join(endpoint_run.variant for endpoint_run in run.runs)
        print(f"{run.id}  {run.created_at}  {run.name}  [{variants}]")
    return 0


def _cmd_export(args: argparse.Namespace, store: ResultStore) -> int:
    document = store.export_run(args.run_id)
    if args.output is None:
        print(document)
    else:
        args.output.write_text(document, encoding="utf-8")
        print(f"Exported {args.run_id} to {args.output}")
    return 0


def _cmd_compare(args: argparse.Namespace, store: ResultStore) -> int:
    base = store.get_run(args.base_id)
    candidate = store.get_run(args.candidate_id)
    for run_id, run in ((args.base_id, base), (args.candidate_id, candidate)):
        if run is None:
            raise RunNotFoundError(f"Benchmark run {run_id} not found")
    assert base is not None and candidate is not None
    regressions = compare_runs(base, candidate)
    if not regressions:
        print("No regressions detected")
        return 0
    for reg in regressions:
        print(f"{reg.variant}: {reg.message} ({reg.delta_pct:.1f}% on {reg.metric})")
    return 1


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    configure_logging(args.log_level)
    store = ResultStore(args.db)
    try:
        if args.command == "run":
            return _cmd_run(args, store)
        if args.command == "list":
            return _cmd_list(store)
        if args.command == "show":
            _print_run(store, args.run_id)
            return 0
        if args.command == "delete":
            if not store.delete_run(args.run_id):
                raise RunNotFoundError(f"Benchmark run {args.run_id} not found")
            print(f"Deleted {args.run_id}")
            return 0
        if args.command == "export":
            return _cmd_export(args, store)
        if args.command == "import":
            run = store.import_run(args.path.read_text(encoding="utf-8"))
            print(f"Imported as {run.id}")
            return 0
        return _cmd_compare(args, store)
    except BenchlabError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
