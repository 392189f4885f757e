"""
TF-IDF duplicate detection module.
Builds a term-frequency / inverse-document-frequency model over tokenized titles
and groups records whose cosine similarity clears a threshold.
"""

# Import NumPy for the document-term matrix and similarity maths
import numpy as np  # numeric arrays
# Typing hints for clarity of public API
from typing import Dict, Iterable, List, Optional  # type hints

# Import our models and shared helpers
from .canonical import first_known_value, most_frequent_title  # cluster merge policy
from .models import CanonicalMovie, StandardMovie  # record types
from .normalizer import TitleNormalizer  # title cleanup

# Console logging
from loguru import logger  # console logger


class TfIdfIndex:
	"""
	Small in-memory TF-IDF model.
	- tf(term, doc) is the raw count of the term in the document
	- idf(term) = 1 + ln(N / (1 + df)), where df is the number of documents holding the term
	"""

	def __init__(self):
		self.documents: List[List[str]] = []  # tokenized documents, row order
		self.vocabulary: Dict[str, int] = {}  # term -> column index
		self._matrix: Optional[np.ndarray] = None  # cached tf-idf matrix (rows=docs)

	def add_document(self, tokens: List[str]) -> int:
		"""Add one tokenized document and return its row index."""
		self.documents.append(list(tokens))  # keep our own copy
		for term in tokens:  # register unseen terms
			if term not in self.vocabulary:
				self.vocabulary[term] = len(self.vocabulary)
		self._matrix = None  # invalidate cache
		return len(self.documents) - 1

	def size(self) -> int:
		"""Number of documents in the index."""
		return len(self.documents)

	def _term_counts(self) -> np.ndarray:
		counts = np.zeros((len(self.documents), len(self.vocabulary)), dtype=np.float64)
		for row, tokens in enumerate(self.documents):
			for term in tokens:
				counts[row, self.vocabulary[term]] += 1.0
		return counts

	def idf_vector(self) -> np.ndarray:
		"""IDF weight per vocabulary column."""
		counts = self._term_counts()
		df = (counts > 0).sum(axis=0)  # documents containing each term
		return 1.0 + np.log(len(self.documents) / (1.0 + df))

	def matrix(self) -> np.ndarray:
		"""Document x term TF-IDF matrix (computed once per set of documents)."""
		if self._matrix is None:
			if not self.documents or not self.vocabulary:
				self._matrix = np.zeros((len(self.documents), len(self.vocabulary)))
			else:
				self._matrix = self._term_counts() * self.idf_vector()
		return self._matrix

	def tfidf(self, term: str, doc_index: int) -> float:
		"""Weight of a single term in a single document (0 for unknown terms)."""
		column = self.vocabulary.get(term)
		if column is None:
			return 0.0
		return float(self.matrix()[doc_index, column])

	def similarity_matrix(self) -> np.ndarray:
		"""
		Pairwise cosine similarity between all documents.
		Documents without any terms have zero similarity to everything, themselves included.
		"""
		weights = self.matrix()
		norms = np.linalg.norm(weights, axis=1)
		safe = np.where(norms > 0, norms, 1.0)  # avoid division by zero
		unit = weights / safe[:, None]
		sims = unit @ unit.T
		empty = norms == 0
		sims[empty, :] = 0.0
		sims[:, empty] = 0.0
		return sims

	def cosine_similarity(self, doc_a: int, doc_b: int) -> float:
		"""Cosine similarity of two documents over the terms either of them holds."""
		weights = self.matrix()
		a, b = weights[doc_a], weights[doc_b]
		denom = np.linalg.norm(a) * np.linalg.norm(b)
		if denom == 0:
			return 0.0
		return float(np.dot(a, b) / denom)


class TfIdfDuplicateClassifier:
	"""
	Groups standardized movies whose tokenized titles are TF-IDF cosine-similar.
	"""

	def __init__(
		self,
		noise_strings: Optional[Iterable[str]] = None,
		threshold: float = 0.85,
		min_token_length: int = 3,
	):
		self.normalizer = TitleNormalizer(noise_strings)  # shared cleanup rules
		self.threshold = threshold  # cosine cut-off (inclusive)
		self.min_token_length = min_token_length  # shorter tokens are dropped
		self.index = TfIdfIndex()  # rebuilt per call to find_duplicates

	def tokenize(self, title: str) -> List[str]:
		"""Normalized title split on whitespace, short tokens dropped."""
		return self.normalizer.tokenize(title, min_length=self.min_token_length)

	def find_duplicates(self, records: List[StandardMovie]) -> Dict[str, List[StandardMovie]]:
		"""
		Group records by cosine similarity.
		Each unprocessed record seeds a group and pulls in every later unprocessed
		record at or above the threshold. Groups are keyed by the seed's sorted tokens
		joined with '_'; the key only identifies the group.
		"""
		if records is None:
			raise ValueError("records cannot be None")

		# Fresh model for every batch
		self.index = TfIdfIndex()
		token_lists = [self.tokenize(r.film_title or '') for r in records]
		for tokens in token_lists:
			self.index.add_document(tokens)
		logger.info(
			f"[TfIdf] Indexed {self.index.size()} titles | vocabulary={len(self.index.vocabulary)}"
		)

		sims = self.index.similarity_matrix() if records else np.zeros((0, 0))
		groups: Dict[str, List[StandardMovie]] = {}
		processed = set()

		for i, record in enumerate(records):
			if i in processed:
				continue
			group = [record]
			processed.add(i)

			for j, other in enumerate(records):
				if j == i or j in processed:
					continue
				if sims[i, j] >= self.threshold:
					group.append(other)
					processed.add(j)
					logger.debug(
						f"[TfIdf] '{other.film_title}' grouped with '{record.film_title}' (sim={sims[i, j]:.3f})"
					)

			key = '_'.join(sorted(token_lists[i]))
			if key in groups:
				# Seeds with identical token sets only happen for titles with no usable tokens
				key = f"{key}#{i}"
			groups[key] = group

		logger.info(f"[TfIdf] {len(records)} records -> {len(groups)} groups")
		return groups

	def merge_duplicates(self, records: List[StandardMovie]) -> List[CanonicalMovie]:
		"""Find duplicate groups and merge each into one CanonicalMovie."""
		return merge_groups(self.find_duplicates(records))


def merge_groups(groups: Dict[str, List[StandardMovie]]) -> List[CanonicalMovie]:
	"""
	Merge each group into a CanonicalMovie:
	- title: most frequent exact title (first encountered wins ties)
	- movie_ids / title_variations: unique, in encounter order
	- language / format: first value that is not 'Unknown'
	"""
	merged: List[CanonicalMovie] = []
	for group in groups.values():
		if not group:
			continue
		titles = [m.film_title or '' for m in group]
		movie = CanonicalMovie(
			title_variations=[],
			movie_ids=[],
			language=first_known_value(m.language for m in group),
			format=first_known_value((m.format for m in group), default='2D'),
			title=most_frequent_title(titles),
		)
		for m, title in zip(group, titles):
			movie.absorb_id(m.id)
			movie.absorb_title(title)
		merged.append(movie)
	return merged


def cluster_by_tfidf(
	movies: List[StandardMovie],
	noise_strings: Optional[Iterable[str]] = None,
	threshold: float = 0.85,
) -> Dict[str, List[StandardMovie]]:
	"""Functional entry point returning the raw groups keyed by cluster key."""
	return TfIdfDuplicateClassifier(noise_strings, threshold=threshold).find_duplicates(movies)


def merge_movie_duplicates(
	movies: List[StandardMovie],
	noise_strings: Optional[Iterable[str]] = None,
	threshold: float = 0.85,
) -> List[CanonicalMovie]:
	"""Functional entry point returning merged canonical movies."""
	return TfIdfDuplicateClassifier(noise_strings, threshold=threshold).merge_duplicates(movies)
