"""
Data validation module.
Scans a loaded batch of episodes and reports data-quality problems as advisory warnings.
Records are never modified, dropped, or reordered.
"""

import math
from datetime import date  # "now" for future-date checks
from typing import Any, List, Optional, Sequence, Set

from loguru import logger  # console logger

from .dates import normalize  # broadcast date parsing
from .models import Episode, ValidationWarning  # inputs and outputs

REQUIRED_FIELDS = ('rank', 'title', 'era', 'broadcast_date')


def _is_number(value: Any) -> bool:
	# bool is an int subclass but never a valid rank/series
	return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_valid_rank(value: Any) -> bool:
	# positive whole number; NaN, infinities and fractions are not ranks
	if not _is_number(value) or not math.isfinite(value):
		return False
	return value > 0 and value == int(value)


def _is_missing(value: Any) -> bool:
	if value is None:
		return True
	if isinstance(value, str) and not value.strip():
		return True
	return False


def _describe(episode: Episode, index: int) -> str:
	title = episode.title if isinstance(episode.title, str) and episode.title.strip() else None
	return f'Episode {index} ("{title}")' if title else f'Episode {index}'


def validate(episodes: Sequence[Episode], now: Optional[date] = None) -> List[ValidationWarning]:
	"""
	Check every episode and return a list of warnings (possibly empty).
	- index in each warning is 1-based
	- a missing rank is reported once, as a missing field
	- the first occurrence of a rank never warns; later ones are duplicates
	- now defaults to today and only exists so tests can pin the clock
	"""
	today = now or date.today()  # reference point for future dates
	warnings: List[ValidationWarning] = []  # accumulator
	seen_ranks: Set[Any] = set()  # numeric ranks seen so far in this batch

	def warn(index: int, code: str, field: str, message: str) -> None:
		warnings.append(ValidationWarning(index=index, code=code, field=field, message=message))
		logger.warning(f"[Validator] {message}")

	for index, episode in enumerate(episodes, 1):
		label = _describe(episode, index)

		# 1) Required fields
		for field in REQUIRED_FIELDS:
			if _is_missing(getattr(episode, field)):
				warn(index, 'missing_field', field, f"{label}: missing required field '{field}'")

		# 2) + 3) Rank validity and uniqueness
		rank = episode.rank
		if not _is_missing(rank):
			if not _is_valid_rank(rank):
				warn(index, 'invalid_rank', 'rank', f"{label}: invalid rank {rank!r}")
			if _is_number(rank) and math.isfinite(rank):
				if rank in seen_ranks:
					warn(index, 'duplicate_rank', 'rank', f"{label}: duplicate rank {rank}")
				else:
					seen_ranks.add(rank)

		# 4) Series must not be negative
		if _is_number(episode.series) and episode.series < 0:
			warn(index, 'negative_series', 'series', f"{label}: negative series number {episode.series}")

		# 5) Broadcast date must not be in the future
		broadcast = normalize(episode.broadcast_date)
		if broadcast is not None and broadcast > today:
			warn(index, 'future_date', 'broadcast_date', f"{label}: future broadcast date {episode.broadcast_date}")

	logger.info(f"[Validator] Checked {len(episodes)} episodes, found {len(warnings)} warning(s)")
	return warnings
