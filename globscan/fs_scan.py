from __future__ import annotations

import os
from typing import Iterable, List, Set

from .errors import ConfigurationError


IGNORED_DIRS: Set[str] = {
	".git",
	"node_modules",
	"dist",
	"build",
	"__pycache__",
	".venv",
	"venv",
	".tox",
}


def display_name(unit: str) -> str:
	return unit.rsplit("/", 1)[-1]


def has_extension(filename: str, extensions: Iterable[str]) -> bool:
	_, ext = os.path.splitext(filename)
	return ext.lower() in {e.lower() for e in extensions}


def scan_units(root: str, extensions: Iterable[str] = (".py",)) -> List[str]:
	if not os.path.isdir(root):
		raise ConfigurationError(f"Invalid root path: {root}")
	extensions = list(extensions)
	units: List[str] = []
	for dirpath, dirnames, filenames in os.walk(root):
		dirnames[:] = [d for d in dirnames if d not in IGNORED_DIRS]
		for filename in filenames:
			if has_extension(filename, extensions):
				units.append(os.path.join(dirpath, filename))
	return sorted(units)


def read_unit_list(path: str) -> List[str]:
	"""One unit per line; blank lines and ``#`` comments are ignored."""
	try:
		with open(path, "r", encoding="utf-8") as fh:
			lines = fh.read().splitlines()
	except (OSError, UnicodeDecodeError) as e:
		raise ConfigurationError(f"Cannot read unit list {path}: {e}") from e
	return [line.strip() for line in lines if line.strip() and not line.lstrip().startswith("#")]
