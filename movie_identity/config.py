"""
Configuration for the identity resolution engine.
All tunables live here and are passed explicitly; nothing is read from global state.
"""

from dataclasses import dataclass, field  # settings container
from typing import List  # type annotations


CLUSTERING_STRATEGIES = ('greedy', 'tfidf')  # edit distance or cosine similarity
TITLE_STRATEGIES = ('most_frequent', 'common_substring')  # representative title choice


@dataclass
class ResolverConfig:
	"""
	Knobs for one resolution run.
	- noise_strings: operator-supplied strings stripped from titles before comparison
	- clustering_strategy: 'greedy' (edit distance) or 'tfidf' (cosine)
	- edit_distance_threshold: relative distance below which titles are merged
	- tfidf_threshold: cosine similarity at or above which titles are merged
	- min_token_length: tokens shorter than this are dropped before TF-IDF
	- title_strategy: how a cluster's representative title is chosen
	- max_repair_iterations: safety cap on the reference repair loop
	"""
	noise_strings: List[str] = field(default_factory=list)  # matched case-insensitively
	clustering_strategy: str = 'greedy'
	edit_distance_threshold: float = 0.2  # strict: distance / length < threshold
	tfidf_threshold: float = 0.85  # inclusive: cosine >= threshold
	min_token_length: int = 3
	title_strategy: str = 'most_frequent'
	max_repair_iterations: int = 100  # absorption passes before giving up

	def validate(self) -> 'ResolverConfig':
		"""Raise ValueError on settings no run could use; return self for chaining."""
		if self.noise_strings is None:
			raise ValueError("noise_strings cannot be None (use an empty list)")
		if self.clustering_strategy not in CLUSTERING_STRATEGIES:
			raise ValueError(
				f"Unknown clustering strategy '{self.clustering_strategy}', expected one of {CLUSTERING_STRATEGIES}"
			)
		if self.title_strategy not in TITLE_STRATEGIES:
			raise ValueError(
				f"Unknown title strategy '{self.title_strategy}', expected one of {TITLE_STRATEGIES}"
			)
		if not 0.0 < self.edit_distance_threshold <= 1.0:
			raise ValueError(f"edit_distance_threshold must be in (0, 1], got {self.edit_distance_threshold}")
		if not 0.0 < self.tfidf_threshold <= 1.0:
			raise ValueError(f"tfidf_threshold must be in (0, 1], got {self.tfidf_threshold}")
		if self.min_token_length < 1:
			raise ValueError(f"min_token_length must be >= 1, got {self.min_token_length}")
		if self.max_repair_iterations < 1:
			raise ValueError(f"max_repair_iterations must be >= 1, got {self.max_repair_iterations}")
		return self
