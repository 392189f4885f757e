"""
Unit tests for catalog reconciliation and showtime linking.
Run: pytest tests/test_catalog_linking.py
"""

from movie_identity.catalog import CatalogMovie, reconcile_with_catalog
from movie_identity.linking import find_unscreened_movies, link_showtimes
from movie_identity.models import CanonicalMovie, StandardShowtime, TicketType
from movie_identity.normalizer import generate_string_id


def existing_catalog():
	return [CatalogMovie(id="c1", title="Wicked", title_variations=["Wicked"], movie_ids=["gv:1"])]


def test_title_match_becomes_update():
	merged = [CanonicalMovie(title_variations=["WICKED"], movie_ids=["shaw:5"], title="WICKED")]
	plan = reconcile_with_catalog(merged, existing_catalog())

	assert plan.new_movies == []
	assert len(plan.updates) == 1
	assert plan.updates[0].id == "c1"
	assert plan.updates[0].title_variations == ["WICKED"]
	assert plan.updates[0].movie_ids == ["shaw:5"]


def test_nothing_new_is_unchanged():
	merged = [CanonicalMovie(title_variations=["Wicked"], movie_ids=["gv:1"])]
	plan = reconcile_with_catalog(merged, existing_catalog())
	assert plan.updates == []
	assert plan.unchanged == 1


def test_shared_movie_id_matches():
	merged = [CanonicalMovie(title_variations=["Wicked: Part One"], movie_ids=["gv:1", "cathay:3"])]
	plan = reconcile_with_catalog(merged, existing_catalog())
	assert plan.updates[0].id == "c1"
	assert plan.updates[0].movie_ids == ["cathay:3"]
	assert plan.updates[0].title_variations == ["Wicked: Part One"]


def test_unmatched_movie_is_new_with_generated_id():
	merged = [CanonicalMovie(title_variations=["Moana 2"], movie_ids=["gv:9"], language="English")]
	plan = reconcile_with_catalog(merged, existing_catalog())

	(new,) = plan.new_movies
	assert new.id == generate_string_id("Moana 2")
	assert new.title == "Moana 2"
	assert new.movie_ids == ["gv:9"]
	assert new.language == "English"


def test_generated_id_matches_previous_insert():
	catalog = [CatalogMovie(id=generate_string_id("Moana 2"), title="Moana 2", movie_ids=["gv:9"])]
	merged = [CanonicalMovie(title_variations=["moana 2"], movie_ids=["shaw:9"], title="moana 2")]
	plan = reconcile_with_catalog(merged, catalog)
	assert plan.updates[0].id == generate_string_id("Moana 2")


def test_titles_differing_only_in_case_share_one_insert():
	merged = [
		CanonicalMovie(title_variations=["Wicked"], movie_ids=["a"]),
		CanonicalMovie(title_variations=["wicked"], movie_ids=["b"], title="Wicked"),
	]
	plan = reconcile_with_catalog(merged, [])

	(new,) = plan.new_movies
	assert new.id == generate_string_id("Wicked")
	assert new.title_variations == ["Wicked", "wicked"]
	assert new.movie_ids == ["a", "b"]
	assert plan.updates == []


def test_artifact_only_title_difference_shares_one_insert():
	merged = [
		CanonicalMovie(title_variations=["Up"], movie_ids=["gv:1"]),
		CanonicalMovie(title_variations=["UP*"], movie_ids=["shaw:1"]),
	]
	plan = reconcile_with_catalog(merged, [])

	assert len(plan.new_movies) == 1
	assert plan.new_movies[0].movie_ids == ["gv:1", "shaw:1"]


def test_new_movie_ids_are_unique_across_the_plan():
	merged = [
		CanonicalMovie(title_variations=["Moana 2"], movie_ids=["gv:9"]),
		CanonicalMovie(title_variations=["Dune"], movie_ids=["gv:10"]),
		CanonicalMovie(title_variations=["MOANA 2"], movie_ids=["cathay:9"]),
		CanonicalMovie(title_variations=["Moana 2"], movie_ids=["gv:9"]),
	]
	plan = reconcile_with_catalog(merged, [])

	ids = [m.id for m in plan.new_movies]
	assert len(ids) == len(set(ids)) == 2
	assert plan.unchanged == 1


def test_updates_to_one_entry_are_folded():
	merged = [
		CanonicalMovie(title_variations=["WICKED"], movie_ids=["shaw:5"], title="WICKED"),
		CanonicalMovie(title_variations=["Wicked: Part One"], movie_ids=["gv:1", "cathay:3"]),
		CanonicalMovie(title_variations=["wicked"], movie_ids=["shaw:5"], title="wicked"),
	]
	plan = reconcile_with_catalog(merged, existing_catalog())

	assert plan.new_movies == []
	(update,) = plan.updates
	assert update.id == "c1"
	assert update.title_variations == ["WICKED", "Wicked: Part One", "wicked"]
	assert update.movie_ids == ["shaw:5", "cathay:3"]


def test_link_showtimes():
	movies = [CanonicalMovie(title_variations=["Dune"], movie_ids=["gv:1", "shaw:2"])]
	showtimes = [
		StandardShowtime(id="s1", film_id="shaw:2", cinema_id="c1", unix_time=100),
		StandardShowtime(id="s2", film_id="", cinema_id="c1", unix_time=100),
		StandardShowtime(id="s3", film_id="gv:1", cinema_id="c1", unix_time=None),
		StandardShowtime(id="s4", film_id="x:9", cinema_id="c1", unix_time=100),
		StandardShowtime(
			id="s5", film_id="gv:1", cinema_id="c2", unix_time=200,
			ticket_type=TicketType(label="Premium", type="premium"),
		),
	]
	result = link_showtimes(showtimes, movies)

	assert [s.id for s in result.linked] == ["s1", "s5"]
	assert result.linked[0].film_id == "gv:1"
	assert result.linked[0].theatre_film_id == "shaw:2"
	assert result.linked[0].ticket_type == "Standard"
	assert result.linked[1].ticket_type == "premium"
	assert [(s.id, reason) for s, reason in result.skipped] == [
		("s2", "missing film id"),
		("s3", "missing timestamp"),
		("s4", "unknown film id"),
	]


def test_find_unscreened_movies():
	movies = [
		CanonicalMovie(title_variations=["Dune"], movie_ids=["gv:1", "shaw:2"]),
		CanonicalMovie(title_variations=["Wicked"], movie_ids=["gv:3"]),
	]
	showtimes = [StandardShowtime(id="s1", film_id="shaw:2")]
	unscreened = find_unscreened_movies(movies, showtimes)
	assert [m.id for m in unscreened] == ["gv:3"]
