from __future__ import annotations

from typing import Iterable, List, Tuple

from .fs_scan import display_name
from .model import Record


def fact_sort_key(fact: str) -> Tuple[str, int, str]:
	# Raw text last so that case variants ("Ab", "aB") still sort the same way every run
	return (fact.casefold(), len(fact), fact)


def normalize_facts(facts: Iterable[str]) -> List[str]:
	return sorted(facts, key=fact_sort_key)


def make_record(unit: str, facts: Iterable[str]) -> Record:
	return Record(unit=unit, display_name=display_name(unit), facts=normalize_facts(facts))
