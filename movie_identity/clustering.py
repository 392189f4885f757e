"""
Greedy edit-distance clustering.
Groups standardized movies whose normalized titles are within a length-relative
edit distance of a cluster's first title, in a single pass over the input.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from loguru import logger  # console logging

from .canonical import first_known_value, most_frequent_title
from .distance import edit_distance
from .models import CanonicalMovie, StandardMovie
from .normalizer import TitleNormalizer


@dataclass
class _Cluster:
	movie: CanonicalMovie  # the canonical record being built
	anchor_raw: str  # first raw title seen, used for the threshold denominator
	anchor_clean: str  # normalized form of anchor_raw
	titles_seen: List[str] = field(default_factory=list)  # raw titles with repeats, for frequency


class GreedyTitleClusterer:
	"""
	First-match-wins clustering over edit distance.

	A title joins the first existing cluster (in creation order) for which
	distance / min(len(clean title), len(cluster's first raw title)) < threshold.
	The denominator uses the raw length of the cluster's first title while the
	distance is computed on normalized strings; this asymmetry is kept on purpose
	so results stay compatible with the clusters already in the catalog.

	Membership depends on input order: there is no search for the best cluster.
	"""

	def __init__(self, noise_strings: Optional[Iterable[str]] = None, threshold: float = 0.2):
		self.normalizer = TitleNormalizer(noise_strings)
		self.threshold = threshold

	def _matches(self, clean_title: str, cluster: _Cluster) -> bool:
		shortest = min(len(clean_title), len(cluster.anchor_raw))
		if shortest == 0:
			return False  # empty titles always stay on their own
		distance = edit_distance(clean_title, cluster.anchor_clean)
		return distance / shortest < self.threshold

	def _find_cluster(self, clean_title: str, clusters: List[_Cluster]) -> Optional[_Cluster]:
		for cluster in clusters:
			if self._matches(clean_title, cluster):
				return cluster
		return None

	def cluster(self, movies: List[StandardMovie]) -> List[CanonicalMovie]:
		"""Cluster movies in input order and return one CanonicalMovie per cluster."""
		if movies is None:
			raise ValueError("movies cannot be None")

		clusters: List[_Cluster] = []
		for movie in movies:
			title = movie.film_title or ''
			clean_title = self.normalizer.normalize(title)
			target = self._find_cluster(clean_title, clusters)

			if target is not None:
				target.movie.absorb_id(movie.id)
				target.movie.absorb_title(title)
				target.titles_seen.append(title)
				logger.debug(f"[Clusterer] '{title}' ({movie.id}) joined cluster '{target.anchor_raw}'")
				continue

			clusters.append(_Cluster(
				movie=CanonicalMovie(
					title_variations=[title],
					movie_ids=[movie.id],
					language=movie.language,
					format=movie.format,
				),
				anchor_raw=title,
				anchor_clean=clean_title,
				titles_seen=[title],
			))
			logger.debug(f"[Clusterer] '{title}' ({movie.id}) opened cluster #{len(clusters)}")

		result = []
		for c in clusters:
			c.movie.title = most_frequent_title(c.titles_seen)
			result.append(c.movie)
		logger.info(f"[Clusterer] Greedy clustering: {len(movies)} movies -> {len(result)} clusters")
		return result

	def merge_canonical_sets(self, canonical_sets: List[List[CanonicalMovie]]) -> List[CanonicalMovie]:
		"""
		Merge canonical movies produced by separate runs (e.g. one per cinema chain).
		Each movie is matched by its representative title with the same rule as `cluster`;
		matches absorb the other's ids and variations. Inputs are left untouched.
		"""
		if canonical_sets is None:
			raise ValueError("canonical_sets cannot be None")

		clusters: List[_Cluster] = []
		total = 0
		for canonical_set in canonical_sets:
			for incoming in canonical_set:
				total += 1
				title = incoming.representative_title
				clean_title = self.normalizer.normalize(title)
				target = self._find_cluster(clean_title, clusters)

				if target is None:
					clusters.append(_Cluster(
						movie=incoming.copy(),
						anchor_raw=title,
						anchor_clean=clean_title,
					))
					continue

				merged = target.movie
				for movie_id in incoming.movie_ids:
					merged.absorb_id(movie_id)
				for variation in incoming.title_variations:
					merged.absorb_title(variation)
				merged.language = first_known_value([merged.language, incoming.language])
				merged.format = first_known_value([merged.format, incoming.format])
				logger.debug(f"[Clusterer] Merged '{title}' into '{target.anchor_raw}'")

		result = [c.movie for c in clusters]
		logger.info(f"[Clusterer] Merged {len(canonical_sets)} sets: {total} movies -> {len(result)} clusters")
		return result


def cluster_by_edit_distance(
	movies: List[StandardMovie],
	noise_strings: Optional[Iterable[str]] = None,
	threshold: float = 0.2,
) -> List[CanonicalMovie]:
	"""Functional entry point for greedy clustering."""
	return GreedyTitleClusterer(noise_strings, threshold=threshold).cluster(movies)


def merge_canonical_sets(
	canonical_sets: List[List[CanonicalMovie]],
	noise_strings: Optional[Iterable[str]] = None,
	threshold: float = 0.2,
) -> List[CanonicalMovie]:
	"""Functional entry point for merging per-chain canonical sets."""
	return GreedyTitleClusterer(noise_strings, threshold=threshold).merge_canonical_sets(canonical_sets)
