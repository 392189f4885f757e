"""
Identity resolution engine.
Runs normalize -> cluster -> select canonical title -> repair references, in that order.
"""

from dataclasses import dataclass  # lightweight containers for results
from typing import List, Optional  # type annotations for clarity

# Import project modules for data structures and components
from .canonical import select_canonical_title  # common-substring titles
from .clustering import GreedyTitleClusterer  # edit-distance strategy
from .config import ResolverConfig  # explicit configuration
from .models import CanonicalMovie, StandardMovie, StandardShowtime  # core data classes
from .normalizer import TitleNormalizer  # title cleanup
from .repair import ReferenceRepairEngine, RepairResult  # fixed-point repair
from .tfidf import TfIdfDuplicateClassifier  # cosine strategy

# Import loguru for console logging
from loguru import logger  # simple structured logger


@dataclass
class ResolutionResult:
	movies: List[CanonicalMovie]  # canonical movies, including ids absorbed during repair
	showtimes: List[StandardShowtime]  # showtimes with resolved film ids
	repair: RepairResult  # full repair report (orphans, absorptions, passes)

	@property
	def orphaned(self) -> List[StandardShowtime]:
		return self.repair.orphaned


class IdentityResolutionEngine:
	"""
	High-level API tying the normalizer, a clusterer and the repair engine together.
	Holds configuration only; every call works on its own copies of the data.
	"""
	def __init__(self, config: Optional[ResolverConfig] = None):
		self.config = (config or ResolverConfig()).validate()  # fail fast on bad settings
		noise = self.config.noise_strings

		self.normalizer = TitleNormalizer(noise)  # shared cleanup rules
		self.greedy = GreedyTitleClusterer(noise, threshold=self.config.edit_distance_threshold)
		self.tfidf = TfIdfDuplicateClassifier(
			noise,
			threshold=self.config.tfidf_threshold,
			min_token_length=self.config.min_token_length,
		)
		self.repairer = ReferenceRepairEngine(noise, max_iterations=self.config.max_repair_iterations)
		logger.info(
			f"[Engine] Ready | strategy={self.config.clustering_strategy} | titles={self.config.title_strategy} | "
			f"noise={len(noise)}"
		)

	def normalize(self, raw: Optional[str]) -> str:
		"""Normalize a single title with the configured noise list."""
		return self.normalizer.normalize(raw)

	def _apply_title_strategy(self, movies: List[CanonicalMovie]) -> List[CanonicalMovie]:
		if self.config.title_strategy != 'common_substring':
			return movies  # clusterers already pick the most frequent title
		for movie in movies:
			movie.title = select_canonical_title(movie.title_variations, self.config.noise_strings)
		return movies

	def cluster(self, movies: List[StandardMovie]) -> List[CanonicalMovie]:
		"""Cluster standardized movies with the configured strategy."""
		if movies is None:
			raise ValueError("movies cannot be None")
		logger.info(f"[Engine] Clustering {len(movies)} movies ({self.config.clustering_strategy})")

		if self.config.clustering_strategy == 'tfidf':
			clustered = self.tfidf.merge_duplicates(movies)
		else:
			clustered = self.greedy.cluster(movies)
		return self._apply_title_strategy(clustered)

	def merge_canonical_sets(self, canonical_sets: List[List[CanonicalMovie]]) -> List[CanonicalMovie]:
		"""Merge per-chain canonical sets into one."""
		return self.greedy.merge_canonical_sets(canonical_sets)

	def repair(self, showtimes: List[StandardShowtime], movies: List[CanonicalMovie]) -> RepairResult:
		"""Resolve showtime film ids against canonical movies."""
		return self.repairer.repair(showtimes, movies)

	def resolve(self, movies: List[StandardMovie], showtimes: List[StandardShowtime]) -> ResolutionResult:
		"""Full pass: cluster the movies, then repair the showtimes against the clusters."""
		canonical = self.cluster(movies)
		report = self.repair(showtimes, canonical)
		logger.info(
			f"[Engine] Resolved {len(movies)} movies into {len(report.movies)} canonical movies | "
			f"{len(report.showtimes)} showtimes, {len(report.orphaned)} orphaned"
		)
		return ResolutionResult(movies=report.movies, showtimes=report.showtimes, repair=report)
