"""
Data loading module.
Reads standardized movies, showtimes and canonical movies from JSON Lines files
emitted by the transform layer, loads the operator noise list, and writes results back.
"""

# Standard libs for JSON parsing, typing, and paths
import json  # read/write JSON lines
from dataclasses import fields, is_dataclass  # dataclass -> dict for serialization
from typing import Any, Callable, Dict, Iterable, List, TypeVar  # type hints
from pathlib import Path  # filesystem-safe paths

# Import our record types
from .models import (  # structured records
	CanonicalMovie,
	MovieSource,
	StandardMovie,
	StandardShowtime,
	TicketType,
	UNKNOWN,
)

# Console logging
from loguru import logger  # console logger


T = TypeVar('T')


def _camel(name: str) -> str:
	"""snake_case -> camelCase, the key style used by the transform layer."""
	head, *rest = name.split('_')
	return head + ''.join(part.title() for part in rest)


class DataLoader:
	"""
	Handles loading and writing of engine input/output records.
	"""

	def _read_jsonl(self, filepath: str, parse: Callable[[Dict], T], kind: str) -> List[T]:
		"""
		Read a JSON Lines file, converting each object with `parse`.
		Malformed lines are logged and skipped; a missing file is an error.
		"""
		records: List[T] = []  # accumulator for parsed records
		filepath = Path(filepath)  # normalize path

		# Validate the file presence early to give clear error messages
		if not filepath.exists():
			raise FileNotFoundError(f"{kind.capitalize()} data file not found: {filepath}")

		logger.info(f"[DataLoader] Loading {kind} from {filepath}...")

		with open(filepath, 'r', encoding='utf-8') as f:
			for line_num, line in enumerate(f, 1):  # keep track of line number for diagnostics
				if not line.strip():  # tolerate blank lines
					continue
				try:
					data = json.loads(line)  # parse JSON object per line
					records.append(parse(data))  # convert dict -> record
				except json.JSONDecodeError as e:
					logger.warning(f"[DataLoader] Skipping invalid JSON at line {line_num}: {e}")
				except (KeyError, TypeError, ValueError, AttributeError) as e:
					logger.warning(f"[DataLoader] Skipping malformed {kind} record at line {line_num}: {e}")

		logger.info(f"[DataLoader] Successfully loaded {len(records)} {kind}.")
		return records

	def load_movies_from_jsonl(self, filepath: str) -> List[StandardMovie]:
		"""Load standardized movies (one JSON object per line)."""
		return self._read_jsonl(filepath, self._parse_movie, 'movies')

	def load_showtimes_from_jsonl(self, filepath: str) -> List[StandardShowtime]:
		"""Load standardized showtimes (one JSON object per line)."""
		return self._read_jsonl(filepath, self._parse_showtime, 'showtimes')

	def load_canonical_movies_from_jsonl(self, filepath: str) -> List[CanonicalMovie]:
		"""Load canonical movies written by a previous run."""
		return self._read_jsonl(filepath, self._parse_canonical, 'canonical movies')

	def _parse_movie(self, data: Dict) -> StandardMovie:
		"""Convert a raw dictionary into a StandardMovie, with safe defaults."""
		source = data.get('source')
		return StandardMovie(
			id=str(data['id']),  # ids are required and always strings
			film_title=data.get('filmTitle') or '',  # missing titles normalize to ''
			language=data.get('language') or UNKNOWN,
			format=data.get('format') or UNKNOWN,
			source=MovieSource(
				chain=str(source.get('chain', '')),
				id=str(source.get('id', '')),
				details=source.get('details'),
			) if isinstance(source, dict) else None,
		)

	def _parse_showtime(self, data: Dict) -> StandardShowtime:
		"""Convert a raw dictionary into a StandardShowtime."""
		ticket = data.get('ticketType')
		unix_time = data.get('unixTime')
		return StandardShowtime(
			id=str(data['id']),
			film_id=str(data.get('filmId') or ''),
			cinema_id=str(data.get('cinemaId') or ''),
			unix_time=int(unix_time) if unix_time else None,
			link=data.get('link') or '',
			ticket_type=TicketType(
				label=ticket.get('label', ''),
				type=ticket.get('type', ''),
			) if isinstance(ticket, dict) else None,
			movie_format=data.get('movieFormat') or '',
			details=data.get('details') or {},
		)

	def _parse_canonical(self, data: Dict) -> CanonicalMovie:
		"""Convert a raw dictionary into a CanonicalMovie."""
		variations = [str(v) for v in data.get('titleVariations') or []]
		movie_ids = [str(i) for i in data.get('movieIds') or []]
		if not variations or not movie_ids:
			raise ValueError("canonical movie needs at least one title variation and one movie id")
		return CanonicalMovie(
			title_variations=variations,
			movie_ids=movie_ids,
			language=data.get('language') or UNKNOWN,
			format=data.get('format') or UNKNOWN,
			title=data.get('title'),
		)

	def load_noise_list(self, filepath: str) -> List[str]:
		"""
		Load noise strings, one per line. Blank lines and '#' comments are ignored
		and duplicates dropped, keeping the first occurrence.
		"""
		filepath = Path(filepath)
		if not filepath.exists():
			raise FileNotFoundError(f"Noise list file not found: {filepath}")

		noise: List[str] = []
		with open(filepath, 'r', encoding='utf-8') as f:
			for line in f:
				value = line.rstrip('\r\n')
				if not value.strip() or value.lstrip().startswith('#'):
					continue
				if value not in noise:
					noise.append(value)
		logger.info(f"[DataLoader] Loaded {len(noise)} noise strings from {filepath}")
		return noise

	def to_record(self, obj: Any) -> Dict:
		"""Dataclass -> camelCase dict. Free-form dicts (chain details) keep their own keys."""
		def convert(value):
			if is_dataclass(value):
				return {_camel(f.name): convert(getattr(value, f.name)) for f in fields(value)}
			if isinstance(value, list):
				return [convert(v) for v in value]
			return value

		record = convert(obj)
		if isinstance(obj, CanonicalMovie):
			record = {'id': obj.id, **record}  # primary id is derived, not a field
		return record

	def write_jsonl(self, records: Iterable[Any], filepath: str) -> int:
		"""Write dataclass records as JSON Lines; returns the number written."""
		filepath = Path(filepath)
		filepath.parent.mkdir(parents=True, exist_ok=True)  # ensure output dir
		count = 0
		with open(filepath, 'w', encoding='utf-8') as f:
			for obj in records:
				f.write(json.dumps(self.to_record(obj), ensure_ascii=False) + '\n')
				count += 1
		logger.info(f"[DataLoader] Wrote {count} records to {filepath}")
		return count
