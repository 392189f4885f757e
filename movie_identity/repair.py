"""
Reference repair module.
Points each showtime's film id at the primary id of the canonical movie that owns it,
absorbing unknown ids into clusters whose title matches the showtime's own title exactly.
"""

from dataclasses import dataclass, field  # lightweight containers for results
from typing import Dict, Iterable, List, Optional, Tuple  # type annotations

from loguru import logger  # console logging

from .distance import edit_distance  # exact-match check
from .models import CanonicalMovie, StandardShowtime  # record types
from .normalizer import TitleNormalizer  # title cleanup


@dataclass
class RepairResult:
	showtimes: List[StandardShowtime]  # corrected copies of the input showtimes
	movies: List[CanonicalMovie]  # working copy of the clusters, with absorbed ids
	orphaned: List[StandardShowtime] = field(default_factory=list)  # no cluster owns their film id
	absorbed: List[Tuple[str, str]] = field(default_factory=list)  # (film id, canonical id) pairs
	rewritten: int = 0  # film id rewrites across all passes
	iterations: int = 0  # resolve passes performed
	converged: bool = True  # False when the iteration cap stopped the loop

	@property
	def orphaned_film_ids(self) -> List[str]:
		"""Distinct film ids of orphaned showtimes, first-seen order."""
		return list(dict.fromkeys(s.film_id for s in self.orphaned))


class ReferenceRepairEngine:
	"""
	Fixed-point repair of showtime -> movie references.

	Each pass resolves every showtime through the clusters' id lists, then tries to
	absorb the still-unknown ids by exact normalized title match. Passes repeat while
	absorptions happen; each one grows a cluster, so the loop ends on its own. The
	iteration cap only guards against pathological input.
	"""

	def __init__(self, noise_strings: Optional[Iterable[str]] = None, max_iterations: int = 100):
		if max_iterations < 0:
			raise ValueError(f"max_iterations must be >= 0, got {max_iterations}")
		self.normalizer = TitleNormalizer(noise_strings)
		self.max_iterations = max_iterations

	def _build_id_index(self, movies: List[CanonicalMovie]) -> Dict[str, int]:
		index: Dict[str, int] = {}
		for position, movie in enumerate(movies):
			for movie_id in movie.movie_ids:
				index.setdefault(movie_id, position)  # earlier clusters win
		return index

	def _resolve_pass(
		self,
		showtimes: List[StandardShowtime],
		movies: List[CanonicalMovie],
	) -> Tuple[Dict[str, str], int]:
		"""Rewrite resolvable film ids; return (missing id -> fallback title, rewrites)."""
		id_index = self._build_id_index(movies)
		missing: Dict[str, str] = {}
		rewritten = 0

		for showtime in showtimes:
			position = id_index.get(showtime.film_id)
			if position is None:
				if not missing.get(showtime.film_id):
					missing[showtime.film_id] = showtime.fallback_title
				continue
			primary = movies[position].id
			if showtime.film_id != primary:
				logger.debug(f"[Repair] Showtime {showtime.id}: {showtime.film_id} -> {primary}")
				showtime.film_id = primary
				rewritten += 1

		return missing, rewritten

	def _find_absorptions(self, missing: Dict[str, str], clean_titles: List[str]) -> List[Tuple[str, int]]:
		"""(missing id, cluster position) pairs whose titles match exactly; nothing is modified."""
		matches = []
		for missing_id, title in missing.items():
			clean = self.normalizer.normalize(title)
			if not clean:
				continue
			for position, movie_title in enumerate(clean_titles):
				if movie_title and edit_distance(movie_title, clean) == 0:
					matches.append((missing_id, position))
					break  # first matching cluster wins
		return matches

	def _absorb_missing(
		self,
		missing: Dict[str, str],
		movies: List[CanonicalMovie],
		clean_titles: List[str],
	) -> List[Tuple[str, str]]:
		absorbed = []
		for missing_id, position in self._find_absorptions(missing, clean_titles):
			movie = movies[position]
			if movie.absorb_id(missing_id):
				absorbed.append((missing_id, movie.id))
				logger.debug(f"[Repair] Absorbed {missing_id} ('{missing[missing_id]}') into {movie.id}")
		return absorbed

	def repair(self, showtimes: List[StandardShowtime], movies: List[CanonicalMovie]) -> RepairResult:
		"""
		Resolve every showtime to a canonical movie id.
		Neither input list is modified; the result holds independent copies.
		"""
		if showtimes is None or movies is None:
			raise ValueError("showtimes and movies cannot be None")

		working_showtimes = [s.copy() for s in showtimes]
		working_movies = [m.copy() for m in movies]
		# Representative titles do not change during repair, so normalize them once
		clean_titles = [self.normalizer.normalize(m.representative_title) for m in working_movies]

		result = RepairResult(showtimes=working_showtimes, movies=working_movies)
		while True:
			result.iterations += 1
			missing, rewritten = self._resolve_pass(working_showtimes, working_movies)
			result.rewritten += rewritten

			if result.iterations > self.max_iterations:
				pending = self._find_absorptions(missing, clean_titles)
				if pending:  # cap reached with absorbable ids left over
					result.converged = False
					logger.warning(
						f"[Repair] Stopped after {self.max_iterations} absorption passes with {len(pending)} ids still absorbable"
					)
				break

			absorbed = self._absorb_missing(missing, working_movies, clean_titles)
			result.absorbed.extend(absorbed)
			if not absorbed:
				break

		id_index = self._build_id_index(working_movies)
		result.orphaned = [s for s in working_showtimes if s.film_id not in id_index]
		logger.info(
			f"[Repair] {len(working_showtimes)} showtimes | rewritten={result.rewritten} | "
			f"absorbed={len(result.absorbed)} | orphaned={len(result.orphaned)} | passes={result.iterations}"
		)
		return result


def repair_references(
	showtimes: List[StandardShowtime],
	movies: List[CanonicalMovie],
	noise_strings: Optional[Iterable[str]] = None,
	max_iterations: int = 100,
) -> RepairResult:
	"""Functional entry point for reference repair."""
	return ReferenceRepairEngine(noise_strings, max_iterations=max_iterations).repair(showtimes, movies)
