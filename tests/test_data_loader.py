"""
Unit tests for DataLoader: JSONL ingestion, noise lists, and output records.
Run: pytest tests/test_data_loader.py
"""

import json

import pytest

from movie_identity.data_loader import DataLoader
from movie_identity.models import CanonicalMovie, StandardShowtime


def write_lines(path, lines):
	path.write_text("\n".join(lines) + "\n", encoding="utf-8")
	return str(path)


def test_load_movies_skips_bad_lines(tmp_path):
	path = write_lines(tmp_path / "movies.jsonl", [
		json.dumps({"id": "gv:1", "filmTitle": "Wicked", "language": "English", "format": "2D",
			"source": {"chain": "gv", "id": "1", "details": {"rating": "PG"}}}),
		"{not json",
		json.dumps({"filmTitle": "No id"}),
		"",
		json.dumps({"id": "shaw:2", "filmTitle": None}),
	])
	movies = DataLoader().load_movies_from_jsonl(path)

	assert [m.id for m in movies] == ["gv:1", "shaw:2"]
	assert movies[0].film_title == "Wicked"
	assert movies[0].source.chain == "gv"
	assert movies[0].source.details == {"rating": "PG"}
	assert movies[1].film_title == ""
	assert movies[1].language == "Unknown"


def test_load_showtimes(tmp_path):
	path = write_lines(tmp_path / "showtimes.jsonl", [
		json.dumps({
			"id": "s1", "filmId": "shaw:9", "cinemaId": "c1", "unixTime": 1700000000,
			"link": "https://example.com", "ticketType": {"label": "Standard", "type": "standard"},
			"movieFormat": "2D", "details": {"movieTitle": "Wicked"},
		}),
	])
	(showtime,) = DataLoader().load_showtimes_from_jsonl(path)

	assert showtime.film_id == "shaw:9"
	assert showtime.unix_time == 1700000000
	assert showtime.ticket_type.type == "standard"
	assert showtime.fallback_title == "Wicked"


def test_missing_file_raises(tmp_path):
	with pytest.raises(FileNotFoundError):
		DataLoader().load_movies_from_jsonl(str(tmp_path / "nope.jsonl"))
	with pytest.raises(FileNotFoundError):
		DataLoader().load_noise_list(str(tmp_path / "nope.txt"))


def test_load_noise_list(tmp_path):
	path = write_lines(tmp_path / "noise.txt", [
		"# promo banners",
		"Sneak Preview",
		"",
		"Fan Screening",
		"Sneak Preview",
	])
	assert DataLoader().load_noise_list(path) == ["Sneak Preview", "Fan Screening"]


def test_write_and_reload_canonical_movies(tmp_path):
	loader = DataLoader()
	movies = [CanonicalMovie(title_variations=["Wicked", "WICKED"], movie_ids=["gv:1", "shaw:1"], language="English", title="Wicked")]
	out = tmp_path / "out" / "movies.jsonl"

	assert loader.write_jsonl(movies, str(out)) == 1
	record = json.loads(out.read_text(encoding="utf-8").splitlines()[0])
	assert record["id"] == "gv:1"
	assert record["titleVariations"] == ["Wicked", "WICKED"]
	assert record["movieIds"] == ["gv:1", "shaw:1"]

	(reloaded,) = loader.load_canonical_movies_from_jsonl(str(out))
	assert reloaded == movies[0]


def test_showtime_details_keep_their_keys():
	showtime = StandardShowtime(id="s1", film_id="gv:1", details={"movieTitle": "Dune", "hall_name": "Hall 1"})
	record = DataLoader().to_record(showtime)
	assert record["filmId"] == "gv:1"
	assert record["details"] == {"movieTitle": "Dune", "hall_name": "Hall 1"}
