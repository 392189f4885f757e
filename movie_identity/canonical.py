"""
Canonical title selection.
Picks or derives the single representative title of a cluster of title variations.
"""

from collections import Counter  # title frequencies
from typing import Iterable, List, Optional, Sequence  # type annotations

from loguru import logger  # console logging

from .models import UNKNOWN  # placeholder for missing values
from .normalizer import TitleNormalizer  # comparison form of titles


def most_frequent_title(titles: Sequence[str]) -> str:
	"""Most common exact title string; ties go to the one encountered first."""
	if not titles:
		return ''
	counts = Counter(titles)
	best = max(counts.values())
	# Counter keeps insertion order, so the first title at the max count wins
	return next(title for title, count in counts.items() if count == best)


def first_known_value(values: Iterable[Optional[str]], default: str = UNKNOWN) -> str:
	"""First value that is a non-empty string other than 'Unknown' (any case)."""
	for value in values:
		if isinstance(value, str) and value and value.lower() != UNKNOWN.lower():
			return value
	return default


def select_canonical_title(variations: List[str], noise_strings: Optional[Iterable[str]] = None) -> str:
	"""
	Longest substring of the normalized first variation contained in every other
	normalized variation. Candidates are scanned longest-first and, within a length,
	from the smallest start index.

	Falls back to the whole normalized first variation when there is a single
	variation or no common substring; that may be '' if the first title is all noise.
	"""
	if not variations:
		return ''

	normalizer = TitleNormalizer(noise_strings)
	base = normalizer.normalize(variations[0])
	if len(variations) < 2 or not base:
		return base

	others = [normalizer.normalize(v) for v in variations[1:]]
	for length in range(len(base), 0, -1):
		for start in range(0, len(base) - length + 1):
			candidate = base[start:start + length]
			if not candidate.strip():
				continue
			if all(candidate in other for other in others):
				logger.debug(f"[Canonical] Common substring '{candidate.strip()}' across {len(variations)} variations")
				return candidate.strip()

	logger.debug(f"[Canonical] No common substring across {len(variations)} variations, keeping '{base}'")
	return base
