"""
Title normalization module.
Turns raw chain titles into a canonical lowercase ASCII form suitable for comparison
by stripping escape characters, diacritics, ratings, language/subtitle/format markers
and operator-supplied noise strings.
"""

import base64  # encode the id digest
import hashlib  # stable string ids
import re  # pattern-based cleanup
import unicodedata  # diacritic folding
from typing import Iterable, List, Optional

from loguru import logger  # console logging


class TitleNormalizer:
	"""
	Normalizes movie titles against a fixed set of built-in markers plus a noise list.

	Built-in markers are matched case-sensitively, exactly as the chains print them.
	Noise strings are matched case-insensitively. The pipeline is re-applied until the
	output stops changing, so normalizing an already-normalized title is a no-op.
	"""

	# Longer tokens come before the shorter ones they contain (PG13 before PG)
	PARENTAL_RATINGS = ('PG13', 'NC16', 'M18', 'R21', 'PG')
	SUBTITLE_MARKERS = ('English Sub', 'Eng Sub')
	LANGUAGE_TOKENS = ('Tamil', 'Malayalam', 'Malay', '(M)', 'KOR', 'CHN')
	FORMAT_TOKENS = ('Atmos',)

	RE_ESCAPES = re.compile(r"[\r\n\t]")
	RE_NON_PRINTABLE = re.compile(r"[^\x20-\x7E]")
	RE_PUNCTUATION = re.compile(r"[^A-Za-z0-9 ]")
	RE_SPACES = re.compile(r" {2,}")

	def __init__(self, noise_strings: Optional[Iterable[str]] = None):
		self.noise_strings: List[str] = [s for s in (noise_strings or []) if s and s.strip()]
		self._noise_patterns = self._compile_noise(self.noise_strings)
		logger.debug(f"[Normalizer] Initialized with {len(self.noise_strings)} noise strings")

	def _compile_noise(self, noise_strings: List[str]) -> List[re.Pattern]:
		"""One pattern per noise string, plus one for its punctuation-free form when it differs."""
		patterns = []
		seen = set()
		for noise in noise_strings:
			for form in (noise, self._fold_noise(noise)):
				key = form.lower()
				if not form.strip() or key in seen:
					continue
				seen.add(key)
				patterns.append(re.compile(re.escape(form), re.IGNORECASE))
		return patterns

	def _fold_noise(self, noise: str) -> str:
		folded = self._strip_diacritics(noise)
		folded = self.RE_NON_PRINTABLE.sub('', folded)
		folded = self.RE_PUNCTUATION.sub('', folded)
		return self.RE_SPACES.sub(' ', folded).strip()

	@staticmethod
	def _strip_diacritics(text: str) -> str:
		decomposed = unicodedata.normalize('NFKD', text)
		return ''.join(ch for ch in decomposed if not unicodedata.combining(ch))

	@staticmethod
	def _remove_tokens(text: str, tokens: Iterable[str]) -> str:
		for token in tokens:
			text = text.replace(token, '')
		return text

	def _scrub(self, text: str) -> str:
		"""A single pass of the pipeline; the step order is significant."""
		text = self.RE_ESCAPES.sub(' ', text)  # 1. control whitespace
		text = self._strip_diacritics(text)  # 2. ASCII-fold
		text = self.RE_NON_PRINTABLE.sub('', text)  # 3. non-ASCII leftovers
		text = self._remove_tokens(text, self.PARENTAL_RATINGS)  # 4.
		text = self._remove_tokens(text, self.SUBTITLE_MARKERS)  # 5.
		text = self._remove_tokens(text, self.LANGUAGE_TOKENS)  # 6.
		text = self._remove_tokens(text, self.FORMAT_TOKENS)  # 7.
		for pattern in self._noise_patterns:  # 8. operator noise
			text = pattern.sub('', text)
		# 9. artifacts, punctuation, whitespace, case
		text = text.replace('*', '')
		text = text.replace('()', ' ')
		text = self.RE_PUNCTUATION.sub('', text)
		text = self.RE_SPACES.sub(' ', text)
		return text.strip().lower()

	def normalize(self, raw: Optional[str]) -> str:
		"""Return the canonical comparison form of a raw title ('' for missing titles)."""
		if raw is None:
			return ''
		if not isinstance(raw, str):
			raise TypeError(f"Title must be a string, got {type(raw).__name__}")

		text = self._scrub(raw)
		# Every pass after the first only removes characters, so this settles quickly
		for _ in range(len(text) + 1):
			again = self._scrub(text)
			if again == text:
				break
			text = again
		return text

	def tokenize(self, raw: Optional[str], min_length: int = 3) -> List[str]:
		"""Normalized title split on whitespace, dropping tokens shorter than `min_length`."""
		return [t for t in self.normalize(raw).split() if len(t) >= min_length]


def normalize_title(raw: Optional[str], noise_strings: Optional[Iterable[str]] = None) -> str:
	"""Convenience wrapper: normalize one title against a noise list."""
	return TitleNormalizer(noise_strings).normalize(raw)


def generate_string_id(text: str) -> str:
	"""
	Stable id for a title: cleaned, lowercased, SHA-1 hashed and base64 encoded.
	Titles differing only in case, surrounding spaces or '*'/'()' artifacts share an id.
	"""
	clean = (text or '').replace('*', '').replace('()', ' ')
	clean = TitleNormalizer.RE_SPACES.sub(' ', clean).strip().lower()
	digest = hashlib.sha1(clean.encode('utf-8')).digest()
	return base64.b64encode(digest).decode('ascii')
