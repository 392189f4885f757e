"""
Catalog reconciliation.
Decides which freshly merged canonical movies are new to the persisted catalog and
which only add title variations or ids to an entry that already exists.
"""

from dataclasses import dataclass, field  # plain record containers
from typing import Dict, List, Optional  # type annotations

from loguru import logger  # console logging

from .models import CanonicalMovie, UNKNOWN  # merged movies and the placeholder value
from .normalizer import generate_string_id  # catalog ids derived from titles


@dataclass
class CatalogMovie:
	"""A movie as persisted downstream, keyed by a generated catalog id."""
	id: str  # generate_string_id of the title when created here
	title: str
	title_variations: List[str] = field(default_factory=list)
	movie_ids: List[str] = field(default_factory=list)  # chain-prefixed film ids
	language: str = UNKNOWN
	format: str = UNKNOWN


@dataclass
class CatalogUpdate:
	"""Only what is missing from an existing catalog entry."""
	id: str  # catalog id of the entry to extend
	title_variations: List[str]
	movie_ids: List[str]


@dataclass
class CatalogPlan:
	new_movies: List[CatalogMovie] = field(default_factory=list)  # one row per catalog id
	updates: List[CatalogUpdate] = field(default_factory=list)  # one row per existing catalog id
	unchanged: int = 0  # merged movies that added nothing


class CatalogReconciler:
	"""
	Matches merged movies against an existing catalog.

	Lookup order for each merged movie: catalog id, representative title,
	any title variation (both case-insensitive), then any shared movie id.

	Planned inserts and updates are registered in the lookup maps as the plan is
	built, so later merged movies match them too and every catalog id appears at
	most once among the new movies and at most once among the updates.
	"""

	def __init__(self, existing: List[CatalogMovie]):
		if existing is None:
			raise ValueError("existing catalog cannot be None (use an empty list)")
		self.by_id: Dict[str, CatalogMovie] = {}  # catalog id -> entry
		self.by_title: Dict[str, str] = {}  # lowercased title -> catalog id
		self.by_movie_id: Dict[str, str] = {}  # film id -> catalog id

		for movie in existing:
			self._register(movie)
		logger.debug(
			f"[Catalog] Indexed {len(self.by_id)} catalog movies | titles={len(self.by_title)} | ids={len(self.by_movie_id)}"
		)

	def _register(self, movie: CatalogMovie):
		self.by_id[movie.id] = movie
		self._register_titles(movie.id, [movie.title])
		self._register_titles(movie.id, movie.title_variations or [])
		self._register_movie_ids(movie.id, movie.movie_ids or [])

	def _register_titles(self, catalog_id: str, titles: List[str]):
		for title in titles:
			if title:
				self.by_title.setdefault(title.lower(), catalog_id)

	def _register_movie_ids(self, catalog_id: str, movie_ids: List[str]):
		for movie_id in movie_ids:
			if movie_id:
				self.by_movie_id.setdefault(movie_id, catalog_id)

	def find_existing(self, movie: CanonicalMovie) -> Optional[str]:
		"""Catalog id of the entry this merged movie belongs to, if any."""
		catalog_id = generate_string_id(movie.representative_title)
		if catalog_id in self.by_id:
			return catalog_id

		title = movie.representative_title
		if title and title.lower() in self.by_title:
			return self.by_title[title.lower()]

		for variation in movie.title_variations:
			if variation and variation.lower() in self.by_title:
				return self.by_title[variation.lower()]

		for movie_id in movie.movie_ids:
			if movie_id in self.by_movie_id:
				return self.by_movie_id[movie_id]
		return None

	def plan(self, merged: List[CanonicalMovie]) -> CatalogPlan:
		"""Split merged movies into catalog inserts and updates."""
		if merged is None:
			raise ValueError("merged movies cannot be None")

		plan = CatalogPlan()
		planned: Dict[str, CatalogMovie] = {}  # catalog id -> insert created by this plan
		updates: Dict[str, CatalogUpdate] = {}  # catalog id -> folded update

		for movie in merged:
			existing_id = self.find_existing(movie)
			if existing_id is None:
				new_movie = CatalogMovie(
					id=generate_string_id(movie.representative_title),
					title=movie.representative_title,
					title_variations=list(dict.fromkeys(v for v in movie.title_variations if v)),
					movie_ids=list(dict.fromkeys(i for i in movie.movie_ids if i)),
					language=movie.language,
					format=movie.format,
				)
				planned[new_movie.id] = new_movie
				plan.new_movies.append(new_movie)
				self._register(new_movie)
				continue

			entry = self.by_id[existing_id]
			pending = updates.get(existing_id)
			known_variations = entry.title_variations + (pending.title_variations if pending else [])
			known_ids = entry.movie_ids + (pending.movie_ids if pending else [])
			new_variations = list(dict.fromkeys(v for v in movie.title_variations if v and v not in known_variations))
			new_ids = list(dict.fromkeys(i for i in movie.movie_ids if i and i not in known_ids))
			if not new_variations and not new_ids:
				plan.unchanged += 1
				continue

			if existing_id in planned:
				# Still an insert; grow it instead of emitting an update
				entry.title_variations.extend(new_variations)
				entry.movie_ids.extend(new_ids)
			elif pending is not None:
				pending.title_variations.extend(new_variations)
				pending.movie_ids.extend(new_ids)
			else:
				updates[existing_id] = CatalogUpdate(id=existing_id, title_variations=new_variations, movie_ids=new_ids)
				plan.updates.append(updates[existing_id])
			self._register_titles(existing_id, new_variations)
			self._register_movie_ids(existing_id, new_ids)

		logger.info(
			f"[Catalog] {len(merged)} merged movies -> {len(plan.new_movies)} new, "
			f"{len(plan.updates)} updates, {plan.unchanged} unchanged"
		)
		return plan


def reconcile_with_catalog(merged: List[CanonicalMovie], existing: List[CatalogMovie]) -> CatalogPlan:
	"""Functional entry point for catalog reconciliation."""
	return CatalogReconciler(existing).plan(merged)
