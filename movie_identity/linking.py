"""
Showtime linking.
Maps resolved showtimes onto canonical movie ids for the downstream showtime table,
and finds canonical movies nothing is screening.
"""

from dataclasses import dataclass, field  # plain record containers
from typing import Any, Dict, List, Optional, Tuple  # type annotations

from loguru import logger  # console logging

from .models import CanonicalMovie, StandardShowtime  # resolved records


DEFAULT_TICKET_TYPE = 'Standard'  # when the chain reports no ticket type


@dataclass
class LinkedShowtime:
	id: str
	theatre_film_id: str  # film id as the chain reported it
	film_id: str  # canonical movie id
	cinema_id: str  # chain-prefixed cinema id
	unix_time: int  # seconds since epoch
	link: str  # booking url
	ticket_type: str
	movie_format: str
	details: Dict[str, Any] = field(default_factory=dict)  # chain details, passed through


@dataclass
class LinkResult:
	linked: List[LinkedShowtime] = field(default_factory=list)  # in input order
	skipped: List[Tuple[StandardShowtime, str]] = field(default_factory=list)  # (showtime, reason)


def build_movie_id_map(movies: List[CanonicalMovie]) -> Dict[str, str]:
	"""Every absorbed movie id -> the primary id of its cluster (first cluster wins)."""
	mapping: Dict[str, str] = {}
	for movie in movies:
		for movie_id in movie.movie_ids:
			mapping.setdefault(movie_id, movie.id)
	return mapping


def link_showtimes(showtimes: List[StandardShowtime], movies: List[CanonicalMovie]) -> LinkResult:
	"""
	Link showtimes to canonical movies.
	Showtimes with no film id, no timestamp, or a film id no cluster owns are skipped.
	"""
	if showtimes is None or movies is None:
		raise ValueError("showtimes and movies cannot be None")

	id_map = build_movie_id_map(movies)
	result = LinkResult()

	for showtime in showtimes:
		if not showtime.film_id:
			result.skipped.append((showtime, 'missing film id'))
			continue
		if not showtime.unix_time:
			result.skipped.append((showtime, 'missing timestamp'))
			continue
		canonical_id: Optional[str] = id_map.get(showtime.film_id)
		if canonical_id is None:
			logger.debug(f"[Linker] Film id {showtime.film_id} unknown, skipping showtime {showtime.id}")
			result.skipped.append((showtime, 'unknown film id'))
			continue

		ticket_type = showtime.ticket_type.type if showtime.ticket_type and showtime.ticket_type.type else DEFAULT_TICKET_TYPE
		result.linked.append(LinkedShowtime(
			id=showtime.id,
			theatre_film_id=showtime.film_id,
			film_id=canonical_id,
			cinema_id=showtime.cinema_id,
			unix_time=int(showtime.unix_time),
			link=showtime.link,
			ticket_type=ticket_type,
			movie_format=showtime.movie_format,
			details=dict(showtime.details or {}),
		))

	movies_covered = len({s.film_id for s in result.linked})
	cinemas_covered = len({s.cinema_id for s in result.linked})
	logger.info(
		f"[Linker] Linked {len(result.linked)} showtimes ({len(result.skipped)} skipped) "
		f"covering {movies_covered} movies across {cinemas_covered} cinemas"
	)
	return result


def find_unscreened_movies(movies: List[CanonicalMovie], showtimes: List[StandardShowtime]) -> List[CanonicalMovie]:
	"""Canonical movies that no showtime references through any of their ids."""
	if movies is None or showtimes is None:
		raise ValueError("movies and showtimes cannot be None")
	screened = {s.film_id for s in showtimes}
	unscreened = [m for m in movies if not any(i in screened for i in m.movie_ids)]
	logger.info(f"[Linker] {len(unscreened)} of {len(movies)} movies have no showtimes")
	return unscreened
