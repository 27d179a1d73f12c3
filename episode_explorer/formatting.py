"""
Display formatting helpers.
The same strings are used for table display, sorting of computed columns, and CSV export,
so the order a user sees always matches what they read.
"""

import re
from typing import List, Optional

from .config import MISSING
from .dates import extract_year
from .models import Companion, Doctor, Episode

# Column headers in display/export order
COLUMNS = ['Rank', 'Title', 'Series', 'Era', 'Year', 'Director', 'Writer', 'Doctor', 'Companion', 'Cast Count']

RE_WRITER_SEPARATOR = re.compile(r"\s*&\s*|\s+and\s+")  # "A & B", "A and B"


def format_doctor(doctor: Optional[Doctor], with_incarnation: bool = True) -> str:
	if doctor is None or not doctor.actor:
		return MISSING
	if not with_incarnation:
		return doctor.actor
	return f"{doctor.actor} ({doctor.incarnation or MISSING})"


def format_companion(companion: Optional[Companion], with_character: bool = True) -> str:
	if companion is None or not companion.actor:
		return MISSING
	if not with_character:
		return companion.actor
	return f"{companion.actor} ({companion.character or MISSING})"


def format_writers(writer: str) -> str:
	"""Join multiple writers with commas: "A & B and C" -> "A, B, C"."""
	if not writer:
		return ''
	names = [n.strip() for n in RE_WRITER_SEPARATOR.split(writer) if n.strip()]
	return ', '.join(names)


def format_year(raw_date) -> str:
	year = extract_year(raw_date)
	return str(year) if year is not None else MISSING


def cast_count(episode: Episode) -> int:
	return len(episode.cast)


def _plain(value) -> str:
	return '' if value is None else str(value)


def display_row(episode: Episode) -> List[str]:
	"""The ten display values for an episode, in COLUMNS order."""
	return [
		_plain(episode.rank),
		_plain(episode.title),
		_plain(episode.series),
		_plain(episode.era),
		format_year(episode.broadcast_date),
		episode.director,
		format_writers(episode.writer),
		format_doctor(episode.doctor),
		format_companion(episode.companion),
		str(cast_count(episode)),
	]
