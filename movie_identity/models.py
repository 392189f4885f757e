"""
Data models for the Movie Identity Resolution Engine.
Defines the standardized records consumed from the transform layer and the
canonical movie clusters produced by the engine.
"""

# Import dataclass to define simple "record-like" classes without boilerplate
import copy  # deep copies of free-form details dicts
from dataclasses import dataclass, field  # auto-generates __init__, __repr__, etc.
# Import typing helpers for precise and self-documenting types
from typing import Any, Dict, List, Optional  # lists, optional values, and free-form dicts


UNKNOWN = 'Unknown'  # placeholder used by transformers when a value is missing


@dataclass
class MovieSource:
	"""Where a standardized movie came from (chain + chain-native id)."""
	chain: str  # cinema chain key, e.g. "gv" or "shaw"
	id: str  # raw id as used by the chain
	details: Any = None  # chain-specific payload, passed through untouched


@dataclass
class StandardMovie:
	"""
	A single movie record as emitted by a per-chain transformer.
	Immutable input to the engine: clustering never writes to it.
	"""
	id: str  # source-qualified id, e.g. "gv:123"
	film_title: str  # raw title as listed by the chain
	language: str = UNKNOWN  # spoken language or "Unknown"
	format: str = UNKNOWN  # screening format or "Unknown"
	source: Optional[MovieSource] = None  # provenance


@dataclass
class TicketType:
	label: str
	type: str


@dataclass
class StandardShowtime:
	"""
	A single screening. `film_id` is the pre-merge join key into the movie clusters.
	"""
	id: str  # showtime id
	film_id: str  # raw source film id (rewritten to a canonical id by repair)
	cinema_id: str = ''  # cinema id
	unix_time: Optional[int] = None  # start time in seconds since epoch
	link: str = ''  # booking link
	ticket_type: Optional[TicketType] = None  # optional ticket class
	movie_format: str = ''  # e.g. "2D", "IMAX"
	details: Dict[str, Any] = field(default_factory=dict)  # chain-specific extras

	@property
	def fallback_title(self) -> str:
		"""Human-readable title carried on the showtime, used when the id matches nothing."""
		details = self.details or {}
		title = details.get('movieTitle')
		if not title:
			chain_specific = details.get('chainSpecific') or {}
			title = chain_specific.get('movieTitle') if isinstance(chain_specific, dict) else None
		return title or ''

	def copy(self) -> 'StandardShowtime':
		"""Return an independent copy (details dict included)."""
		return StandardShowtime(
			id=self.id,
			film_id=self.film_id,
			cinema_id=self.cinema_id,
			unix_time=self.unix_time,
			link=self.link,
			ticket_type=copy.copy(self.ticket_type),
			movie_format=self.movie_format,
			details=copy.deepcopy(self.details),
		)


@dataclass
class CanonicalMovie:
	"""
	One real-world film: the cluster of all source records judged to be the same movie.
	Clusters only grow: ids and title variations are appended, never removed.
	"""
	title_variations: List[str]  # every raw title seen for this cluster, insertion order
	movie_ids: List[str]  # every absorbed StandardMovie.id / showtime film id, insertion order
	language: str = UNKNOWN  # resolved language
	format: str = UNKNOWN  # resolved format
	title: Optional[str] = None  # representative title when one has been selected

	@property
	def id(self) -> str:
		"""Primary id: the id the rest of the system uses to look up the cluster."""
		return self.movie_ids[0] if self.movie_ids else ''

	@property
	def representative_title(self) -> str:
		"""Selected title, falling back to the first variation seen."""
		if self.title is not None:
			return self.title
		return self.title_variations[0] if self.title_variations else ''

	def absorb_id(self, movie_id: str) -> bool:
		"""Append a movie id if it is new; return True when the cluster grew."""
		if not movie_id or movie_id in self.movie_ids:
			return False
		self.movie_ids.append(movie_id)
		return True

	def absorb_title(self, title: str) -> bool:
		"""Append a raw title variation if it is new."""
		if title is None or title in self.title_variations:
			return False
		self.title_variations.append(title)
		return True

	def copy(self) -> 'CanonicalMovie':
		"""Return a copy that shares no lists with the original."""
		return CanonicalMovie(
			title_variations=list(self.title_variations),
			movie_ids=list(self.movie_ids),
			language=self.language,
			format=self.format,
			title=self.title,
		)
