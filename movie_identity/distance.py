"""
String distance module.
Levenshtein edit distance between titles, ignoring case and spaces.
"""

from rapidfuzz.distance import Levenshtein  # unit-cost insert/delete/substitute


def _compact(text: str) -> str:
	return (text or '').lower().replace(' ', '')  # case and spacing never count


def edit_distance(a: str, b: str) -> int:
	"""
	Classic Levenshtein distance after lowercasing and removing spaces.
	Callers normalize diacritics and noise first; this only compares characters.
	"""
	return Levenshtein.distance(_compact(a), _compact(b))


def relative_distance(a: str, b: str, denominator: int) -> float:
	"""
	Edit distance between `a` and `b` divided by `denominator`.
	A zero denominator yields infinity so that empty titles never match anything.
	"""
	if denominator <= 0:
		return float('inf')
	return edit_distance(a, b) / denominator
