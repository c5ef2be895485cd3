from __future__ import annotations

import logging
import sys

import structlog


def configure_logging(level: str = "INFO", fmt: str = "console") -> None:
	"""Route structlog output to stderr so a report printed on stdout stays clean."""
	processors = [
		structlog.contextvars.merge_contextvars,
		structlog.stdlib.add_log_level,
		structlog.processors.TimeStamper(fmt="iso"),
	]
	if fmt == "json":
		processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
	else:
		processors.append(structlog.dev.ConsoleRenderer())
	structlog.configure(
		processors=processors,
		wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level.upper())),
		logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
		cache_logger_on_first_use=False,
	)
