from __future__ import annotations

import argparse
import sys
from typing import Dict, List, Optional

import structlog
import uvicorn
from pydantic import ValidationError

from globscan.ast_parse import PythonGlobalsAnalyzer
from globscan.config import Settings, get_settings
from globscan.errors import ConfigurationError, JoinTimeoutError
from globscan.fs_scan import read_unit_list, scan_units
from globscan.logs import configure_logging
from globscan.pipeline import run_pipeline

logger = structlog.get_logger()

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG = 2
EXIT_TIMEOUT = 3


def collect_units(args: argparse.Namespace, settings: Settings) -> List[str]:
	units: List[str] = list(args.paths)
	if args.list:
		units.extend(read_unit_list(args.list))
	if args.root:
		units.extend(scan_units(args.root, settings.extension_list()))
	return units


def settings_from_args(args: argparse.Namespace) -> Settings:
	overrides: Dict[str, object] = {}
	if args.workers is not None:
		overrides["workers"] = args.workers
	if args.output is not None:
		overrides["output_path"] = args.output
	if args.shard_dir is not None:
		overrides["shard_dir"] = args.shard_dir
	if args.keep_shards:
		overrides["keep_shards"] = True
	if args.join_timeout is not None:
		overrides["join_timeout"] = args.join_timeout
	if args.ext:
		overrides["extensions"] = ",".join(args.ext)
	if args.log_level is not None:
		overrides["log_level"] = args.log_level
	if args.log_format is not None:
		overrides["log_format"] = args.log_format
	return get_settings().model_copy(update=overrides)


def cmd_analyze(args: argparse.Namespace) -> int:
	try:
		settings = settings_from_args(args)
	except ValidationError as e:
		print(f"invalid settings: {e}", file=sys.stderr)
		return EXIT_CONFIG
	configure_logging(settings.log_level, settings.log_format)
	try:
		units = collect_units(args, settings)
		result = run_pipeline(units, PythonGlobalsAnalyzer(), settings)
	except ConfigurationError as e:
		logger.error("configuration_error", error=str(e))
		return EXIT_CONFIG
	except JoinTimeoutError as e:
		logger.error("pipeline_timed_out", error=str(e))
		return EXIT_TIMEOUT

	if result.output_path is None:
		sys.stdout.write(result.report.render())
	if result.ok:
		return EXIT_OK
	for worker in result.workers:
		if worker.fatal_error is not None:
			print(f"shard {worker.shard}: {worker.fatal_error}", file=sys.stderr)
		elif worker.cancelled:
			print(f"shard {worker.shard}: cancelled", file=sys.stderr)
	for failure in result.failed_units:
		print(f"shard {failure.shard}: {failure.unit}: {failure.message}", file=sys.stderr)
	return EXIT_FAILED


def cmd_serve(args: argparse.Namespace) -> int:
	settings = get_settings()
	configure_logging(settings.log_level, settings.log_format)
	uvicorn.run("api:app", host=args.host, port=args.port, reload=args.reload)
	return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(prog="globscan")
	sub = parser.add_subparsers(dest="cmd", required=True)

	pa = sub.add_parser("analyze", help="List the global variables of every source file")
	pa.add_argument("paths", nargs="*", help="Source files to analyze")
	pa.add_argument("--root", help="Also analyze every matching file under this directory")
	pa.add_argument("--list", help="File listing one source path per line")
	pa.add_argument("--ext", action="append", help="File extension picked up by --root (repeatable)")
	pa.add_argument("-j", "--workers", type=int, help="Number of worker threads")
	pa.add_argument("-o", "--output", help="Report path; '-' prints the report to stdout")
	pa.add_argument("--shard-dir", help="Directory for the per-worker shard files")
	pa.add_argument("--keep-shards", action="store_true", help="Do not delete shard files after merging")
	pa.add_argument(
		"--join-timeout",
		type=float,
		help="Seconds to wait for the workers before giving up (exit status 3). Workers stop at their next "
		"unit, but a unit still being analyzed keeps the process alive until it returns",
	)
	pa.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
	pa.add_argument("--log-format", choices=["console", "json"])
	pa.set_defaults(func=cmd_analyze)

	ps = sub.add_parser("serve", help="Run FastAPI server")
	ps.add_argument("--host", default="127.0.0.1")
	ps.add_argument("--port", type=int, default=8000)
	ps.add_argument("--reload", action="store_true")
	ps.set_defaults(func=cmd_serve)
	return parser


def main(argv: Optional[List[str]] = None) -> int:
	args = build_parser().parse_args(argv)
	if getattr(args, "output", None) == "-":
		args.output = ""
	return args.func(args)


if __name__ == "__main__":
	sys.exit(main())
