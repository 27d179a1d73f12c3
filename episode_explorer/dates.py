"""
Date normalization module.
Parses the broadcast date formats found in the dataset into datetime.date values.
Unparseable input yields None, which callers treat as "unknown" rather than an error.
"""

import re  # regex for format detection
from datetime import date  # canonical comparable value
from typing import Any, Callable, List, Optional, Tuple

MONTHS = [
	'january', 'february', 'march', 'april', 'may', 'june',
	'july', 'august', 'september', 'october', 'november', 'december',
]


def _from_iso(m: re.Match) -> Optional[date]:
	return _safe_date(int(m.group('year')), int(m.group('month')), int(m.group('day')))


def _from_uk(m: re.Match) -> Optional[date]:
	# Day comes first in the UK layout
	return _safe_date(int(m.group('year')), int(m.group('month')), int(m.group('day')))


def _from_long(m: re.Match) -> Optional[date]:
	name = m.group('month').lower()
	if name not in MONTHS:
		return None  # unknown month name is not a partial date
	return _safe_date(int(m.group('year')), MONTHS.index(name) + 1, int(m.group('day')))


def _from_year(m: re.Match) -> Optional[date]:
	return _safe_date(int(m.group('year')), 1, 1)


# Ordered matchers: (name, pattern, extractor). First pattern that matches decides.
DATE_MATCHERS: List[Tuple[str, re.Pattern, Callable[[re.Match], Optional[date]]]] = [
	('iso', re.compile(r"^(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})$"), _from_iso),  # 2005-03-26
	('uk', re.compile(r"^(?P<day>\d{1,2})/(?P<month>\d{1,2})/(?P<year>\d{4})$"), _from_uk),  # 26/03/2005
	('long', re.compile(r"^(?P<month>[A-Za-z]+)\s+(?P<day>\d{1,2}),\s*(?P<year>\d{4})$"), _from_long),  # March 26, 2005
	('year', re.compile(r"^(?P<year>\d{4})$"), _from_year),  # 2005
]


def _safe_date(year: int, month: int, day: int) -> Optional[date]:
	try:
		return date(year, month, day)
	except ValueError:
		return None  # e.g. 31/02/2005


def _clean(raw: Any) -> str:
	if raw is None or isinstance(raw, bool):
		return ''
	if isinstance(raw, (str, int)):
		return str(raw).strip()
	return ''


def _match(raw: Any) -> Tuple[Optional[str], Optional[date]]:
	text = _clean(raw)
	if not text:
		return None, None
	for name, pattern, extract in DATE_MATCHERS:
		m = pattern.match(text)
		if m:
			return name, extract(m)
	return None, None


def normalize(raw: Any) -> Optional[date]:
	"""Parse a raw broadcast date; None when it is empty or in no known format."""
	return _match(raw)[1]


def detect_format(raw: Any) -> Optional[str]:
	"""Name of the matcher that accepts the input ('iso', 'uk', 'long', 'year'), if any."""
	name, parsed = _match(raw)
	return name if parsed is not None else None


def extract_year(raw: Any) -> Optional[int]:
	"""Year component, consistent with normalize() for every input."""
	parsed = normalize(raw)
	return parsed.year if parsed else None


def to_iso(raw: Any) -> Optional[str]:
	parsed = normalize(raw)
	return parsed.isoformat() if parsed else None


def sort_key(raw: Any) -> int:
	"""Comparable integer for sorting; unparseable dates get 0 and sort earliest."""
	parsed = normalize(raw)
	return parsed.toordinal() if parsed else 0
