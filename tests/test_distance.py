"""
Unit tests for edit distance.
Run: pytest tests/test_distance.py
"""

import math

from movie_identity.distance import edit_distance, relative_distance


def test_classic_example():
	assert edit_distance("kitten", "sitting") == 3


def test_symmetry():
	pairs = [("kitten", "sitting"), ("dune", "dune part two"), ("", "abc"), ("gladiator 2", "gladiator ii")]
	for a, b in pairs:
		assert edit_distance(a, b) == edit_distance(b, a)


def test_zero_distance_ignores_case_and_spaces():
	assert edit_distance("transformers one", "transformers one") == 0
	assert edit_distance("ABC", "abc") == 0
	assert edit_distance("a b c", "abc") == 0


def test_empty_strings():
	assert edit_distance("", "abc") == 3
	assert edit_distance("abc", "") == 3
	assert edit_distance("", "") == 0


def test_triangle_inequality():
	a, b, c = "moana", "moana 2", "mona"
	assert edit_distance(a, c) <= edit_distance(a, b) + edit_distance(b, c)


def test_relative_distance():
	assert relative_distance("joker", "joker2", 7) == 1 / 7
	assert math.isinf(relative_distance("", "", 0))
