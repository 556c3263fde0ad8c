from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from edgebench.analysis import compare_reports, read_attempt_log, worker_breakdown
from edgebench.config import (
    DEFAULT_PORT,
    ConfigError,
    RunConfig,
    Scheme,
    TargetConfig,
    TransportConfig,
    load_environment_label,
)
from edgebench.loadgen.attempt_log import AttemptLog
from edgebench.loadgen.runner import run_benchmark_sync
from edgebench.metrics import InsufficientDataError, aggregate
from edgebench.report import ReportWriteError, build_report, load_report, write_report

LOGGER = logging.getLogger("edgebench")

DEFAULT_ENV_FILE = "../machine_type/infra.txt"


def _build_config(args: argparse.Namespace) -> RunConfig:
    transport = TransportConfig(
        scheme=Scheme.HTTPS if args.https else Scheme.HTTP,
        verify_tls=args.verify_tls,
        reuse_connections=args.agent_reuse,
        timeout_ms=args.timeout,
    )
    return RunConfig(
        target=TargetConfig(host=args.host, path=args.function, port=args.port),
        transport=transport,
        workers=args.workers,
        ops_per_worker=args.ops,
        attempt_log_path=Path(args.log_file),
        report_path=Path(args.output),
    )


def _cmd_run(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    try:
        config = _build_config(args)
        label = load_environment_label(args.env_file, args.env_key)
    except ConfigError as exc:
        parser.error(str(exc))

    with AttemptLog(config.attempt_log_path) as attempt_log:
        run = run_benchmark_sync(config, attempt_log)
    if attempt_log.write_errors:
        LOGGER.warning(
            "%d attempt(s) could not be written to %s",
            attempt_log.write_errors,
            config.attempt_log_path,
        )

    try:
        stats = aggregate(run)
    except InsufficientDataError as exc:
        LOGGER.error("%s (%d attempted, all failed)", exc, run.attempted)
        return 1
    report = build_report(stats, config, label, created_at=run.started_at)
    try:
        write_report(report, config.report_path)
    except ReportWriteError as exc:
        LOGGER.error("%s (cause: %r)", exc, exc.__cause__)
        return 1
    print(
        f"{stats.total_requests} ops, {stats.success_count} ok, "
        f"throughput {stats.throughput_ops:.2f} ops/s, "
        f"avg {stats.mean_ms:.2f} ms, p50 {stats.median_ms:.2f} ms, "
        f"p95 {stats.p95_ms:.2f} ms, p99 {stats.p99_ms:.2f} ms"
    )
    return 0


def _cmd_compare(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    try:
        base = load_report(args.base)
        candidate = load_report(args.candidate)
    except (OSError, ValueError) as exc:
        parser.error(f"cannot load report: {exc}")
    regressions = compare_reports(base, candidate)
    for reg in regressions:
        print(f"{reg.metric}: {reg.delta_pct:+.1f}% {reg.message}")
    if not regressions:
        print("no regressions")
    return 1 if regressions else 0


def _cmd_attempts(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    try:
        frame = read_attempt_log(args.log)
    except (OSError, ValueError) as exc:
        parser.error(f"cannot read attempt log: {exc}")
    print(worker_breakdown(frame).to_string(index=False))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="edgebench", description="HTTP endpoint load generator")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Run a benchmark against one endpoint")
    run.add_argument("--host", required=True, help="Target host")
    run.add_argument("--function", required=True, help="Target path, e.g. /function/hello")
    run.add_argument("--port", type=int, default=DEFAULT_PORT)
    run.add_argument("--workers", "--threads", dest="workers", type=int, default=1)
    run.add_argument("--ops", type=int, default=1, help="Sequential requests per worker")
    run.add_argument("--agent-reuse", action="store_true", help="Reuse connections within a worker")
    run.add_argument("--timeout", type=float, default=None, help="Per-request timeout in milliseconds")
    run.add_argument("--https", action="store_true")
    run.add_argument("--verify-tls", action="store_true", help="Validate the target's TLS certificate")
    run.add_argument(
        "--env-file",
        default=os.environ.get("EDGEBENCH_ENV_FILE", DEFAULT_ENV_FILE),
        help="KEY=VALUE file with the environment label",
    )
    run.add_argument("--env-key", default=None)
    run.add_argument("--log-file", default="log.txt", help="Append-only attempt log")
    run.add_argument("--output", default="results.json", help="Report destination")
    run.set_defaults(handler=_cmd_run)

    compare = sub.add_parser("compare", help="Compare two reports")
    compare.add_argument("base")
    compare.add_argument("candidate")
    compare.set_defaults(handler=_cmd_compare)

    attempts = sub.add_parser("attempts", help="Summarize an attempt log per worker")
    attempts.add_argument("log")
    attempts.set_defaults(handler=_cmd_attempts)
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    sys.exit(args.handler(parser, args))


if __name__ == "__main__":
    main()
