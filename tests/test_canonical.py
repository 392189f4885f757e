"""
Unit tests for canonical title selection.
Run: pytest tests/test_canonical.py
"""

from movie_identity.canonical import first_known_value, most_frequent_title, select_canonical_title


def test_most_frequent_title_first_wins_ties():
	assert most_frequent_title(["A", "B", "B", "A"]) == "A"
	assert most_frequent_title(["A", "B", "B"]) == "B"
	assert most_frequent_title([]) == ""


def test_first_known_value():
	assert first_known_value(["unknown", "", None, "English", "Malay"]) == "English"
	assert first_known_value(["Unknown", "UNKNOWN"]) == "Unknown"
	assert first_known_value([], default="2D") == "2D"


def test_common_substring_across_variations():
	variations = [
		"Spider-Man: No Way Home",
		"Spiderman No Way Home (Eng Sub)",
		"SPIDER-MAN NO WAY HOME PG13",
	]
	assert select_canonical_title(variations) == "spiderman no way home"


def test_common_substring_drops_prefixes():
	variations = ["Inside Out 2", "Inside Out 2 Atmos", "Disney's Inside Out 2"]
	assert select_canonical_title(variations) == "inside out 2"


def test_longest_then_leftmost():
	# "ab" and "cd" are both common; the leftmost of the longest wins
	assert select_canonical_title(["abcd", "abxcd"]) == "ab"


def test_single_variation_is_normalized():
	assert select_canonical_title(["Dune: Part Two"]) == "dune part two"


def test_no_common_substring_keeps_first():
	assert select_canonical_title(["abc", "xyz"]) == "abc"


def test_degenerate_inputs():
	assert select_canonical_title([]) == ""
	assert select_canonical_title(["PG13", "Dune"]) == ""


def test_noise_list_is_applied():
	assert select_canonical_title(["Wicked Fan Screening", "Wicked"], ["Fan Screening"]) == "wicked"
