from __future__ import annotations

import ast
from typing import Iterator, List, Sequence, Set

from pydantic import BaseModel, ConfigDict

from .errors import UnitAnalysisError


class AnalyzerOptions(BaseModel):
	"""Read-only configuration shared by every worker."""

	model_config = ConfigDict(frozen=True)

	skip_final: bool = True
	skip_dunder: bool = True
	include_global_declarations: bool = True
	encoding: str = "utf-8"


def _is_final(annotation: ast.expr) -> bool:
	if isinstance(annotation, ast.Subscript):
		annotation = annotation.value
	if isinstance(annotation, ast.Name):
		return annotation.id == "Final"
	if isinstance(annotation, ast.Attribute):
		return annotation.attr == "Final"
	return False


def _is_dunder(name: str) -> bool:
	return len(name) > 4 and name.startswith("__") and name.endswith("__")


def _target_names(target: ast.expr) -> Iterator[str]:
	# Attribute and subscript targets bind nothing at module scope
	if isinstance(target, ast.Name):
		yield target.id
	elif isinstance(target, (ast.Tuple, ast.List)):
		for elt in target.elts:
			yield from _target_names(elt)
	elif isinstance(target, ast.Starred):
		yield from _target_names(target.value)


def _module_level_blocks(stmt: ast.stmt) -> List[List[ast.stmt]]:
	if isinstance(stmt, (ast.If, ast.While)):
		return [stmt.body, stmt.orelse]
	if isinstance(stmt, (ast.For, ast.AsyncFor)):
		return [stmt.body, stmt.orelse]
	if isinstance(stmt, (ast.With, ast.AsyncWith)):
		return [stmt.body]
	if isinstance(stmt, (ast.Try, ast.TryStar)):
		blocks = [stmt.body, stmt.orelse, stmt.finalbody]
		blocks.extend(h.body for h in stmt.handlers)
		return blocks
	return []


def _collect(body: Sequence[ast.stmt], names: List[str], final: Set[str]) -> None:
	for stmt in body:
		if isinstance(stmt, ast.Assign):
			for target in stmt.targets:
				names.extend(_target_names(target))
		elif isinstance(stmt, ast.AnnAssign):
			targets = list(_target_names(stmt.target))
			if _is_final(stmt.annotation):
				final.update(targets)
			names.extend(targets)
		elif isinstance(stmt, ast.AugAssign):
			names.extend(_target_names(stmt.target))
		elif isinstance(stmt, (ast.For, ast.AsyncFor)):
			names.extend(_target_names(stmt.target))
		elif isinstance(stmt, (ast.With, ast.AsyncWith)):
			for item in stmt.items:
				if item.optional_vars is not None:
					names.extend(_target_names(item.optional_vars))
		for block in _module_level_blocks(stmt):
			_collect(block, names, final)


def extract_global_names(text: str, path: str, options: AnalyzerOptions = AnalyzerOptions()) -> List[str]:
	"""Names of the module-level variables defined in ``text``.

	Classes, functions and imports are not variables. Names annotated
	``Final`` are constants and are dropped when ``options.skip_final`` is set,
	even if they are assigned again elsewhere.
	"""
	tree = ast.parse(text, filename=path)
	names: List[str] = []
	final: Set[str] = set()
	_collect(tree.body, names, final)

	if options.include_global_declarations:
		for node in ast.walk(tree):
			if isinstance(node, ast.Global):
				names.extend(node.names)

	seen: Set[str] = set()
	result: List[str] = []
	for name in names:
		if name in seen:
			continue
		seen.add(name)
		if options.skip_final and name in final:
			continue
		if options.skip_dunder and _is_dunder(name):
			continue
		result.append(name)
	return result


class PythonGlobalsAnalyzer:
	"""Capability reporting the global variables of one Python source file."""

	def __init__(self, options: AnalyzerOptions = AnalyzerOptions()) -> None:
		self.options = options

	def analyze(self, unit: str) -> List[str]:
		try:
			with open(unit, "r", encoding=self.options.encoding) as fh:
				text = fh.read()
		except (OSError, UnicodeDecodeError) as e:
			raise UnitAnalysisError(unit, f"cannot read source: {e}", e) from e
		try:
			return extract_global_names(text, unit, self.options)
		except (SyntaxError, ValueError) as e:
			raise UnitAnalysisError(unit, f"cannot parse source: {e}", e) from e
