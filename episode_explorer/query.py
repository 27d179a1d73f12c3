"""
Query pipeline module.
Filters episodes by free text and field filters, then orders them either by a chosen
column or, while a text search is active, by how well each title matches the search.
"""

import math
from typing import Any, Callable, Dict, List, Sequence

from loguru import logger

from . import dates
from .formatting import cast_count, format_companion, format_doctor, format_writers
from .models import Episode, QueryState

NUMERIC_FIELDS = {'rank', 'series', 'cast_count', 'cast', 'year'}
RELEVANCE = 'relevance'


def _as_number(value: Any) -> float:
	"""Numbers and numeric strings compare as numbers; everything else is 0."""
	if isinstance(value, bool) or value is None:
		return 0.0
	if isinstance(value, (int, float)):
		return 0.0 if math.isnan(value) else float(value)
	if isinstance(value, str):
		try:
			number = float(value.strip())
		except ValueError:
			return 0.0
		return 0.0 if math.isnan(number) else number
	return 0.0


def _actor(person) -> str:
	return person.actor if person is not None else ''


# Text each search field contributes to the free-text filter
SEARCH_TEXT: Dict[str, Callable[[Episode], str]] = {
	'title': lambda ep: ep.title if isinstance(ep.title, str) else ('' if ep.title is None else str(ep.title)),
	'doctor': lambda ep: _actor(ep.doctor),
	'companion': lambda ep: _actor(ep.companion),
	'writer': lambda ep: ep.writer,
	'director': lambda ep: ep.director,
}


def matches(episode: Episode, state: QueryState) -> bool:
	"""True when the episode satisfies every active filter (AND across dimensions)."""
	term = state.text.strip().lower()
	if term:
		haystacks = (SEARCH_TEXT[f](episode).lower() for f in state.search_fields if f in SEARCH_TEXT)
		if not any(term in h for h in haystacks):
			return False

	era = state.era.strip()
	if era and episode.era != era:
		return False

	doctor = state.doctor.strip().lower()
	if doctor and doctor not in _actor(episode.doctor).lower():
		return False

	companion = state.companion.strip().lower()
	if companion and companion not in _actor(episode.companion).lower():
		return False

	return True


def filter_episodes(episodes: Sequence[Episode], state: QueryState) -> List[Episode]:
	result = [ep for ep in episodes if matches(ep, state)]
	logger.debug(f"[Query] Filter kept {len(result)} of {len(episodes)} episodes")
	return result


def sort_value(episode: Episode, field: str) -> Any:
	"""Comparable value for one sort column."""
	if field in ('cast_count', 'cast'):
		return cast_count(episode)
	if field == 'year':
		return dates.extract_year(episode.broadcast_date) or 0
	if field in NUMERIC_FIELDS:
		return _as_number(getattr(episode, field, None))
	if field == 'broadcast_date':
		return dates.sort_key(episode.broadcast_date)
	if field == 'doctor':
		return format_doctor(episode.doctor).lower()
	if field == 'companion':
		return format_companion(episode.companion).lower()
	if field == 'writer':
		return format_writers(episode.writer).lower()
	value = getattr(episode, field, None)
	return '' if value is None else str(value).lower()


def sort_episodes(episodes: Sequence[Episode], field: str = 'rank', ascending: bool = True) -> List[Episode]:
	# sorted() is stable in both directions, so ties keep their input order
	return sorted(episodes, key=lambda ep: sort_value(ep, field), reverse=not ascending)


def relevance_score(episode: Episode, term: str) -> int:
	"""
	How well the title matches the search term:
	4 exact, 3 prefix, 2 substring, 1 otherwise.
	"""
	title = SEARCH_TEXT['title'](episode).lower()
	term = term.strip().lower()
	if title == term:
		return 4
	if title.startswith(term):
		return 3
	if term in title:
		return 2
	return 1


def relevance_sort(episodes: Sequence[Episode], term: str) -> List[Episode]:
	"""Best match first; equal scores fall back to ascending rank."""
	return sorted(episodes, key=lambda ep: (-relevance_score(ep, term), _as_number(ep.rank)))


def uses_relevance(state: QueryState) -> bool:
	"""
	Relevance ordering applies while a text search is active, unless the user
	explicitly picked a column other than relevance.
	"""
	if not state.text.strip():
		return False
	return state.sort_field == RELEVANCE or not state.sort_explicit


def query(episodes: Sequence[Episode], state: QueryState) -> List[Episode]:
	"""Filter, then order, according to the query state."""
	filtered = filter_episodes(episodes, state)
	if uses_relevance(state):
		logger.debug(f"[Query] Relevance sort for '{state.text.strip()}'")
		return relevance_sort(filtered, state.text)
	field = 'rank' if state.sort_field == RELEVANCE else state.sort_field
	ascending = True if state.sort_field == RELEVANCE else state.ascending
	logger.debug(f"[Query] Sorting by {field} {'asc' if ascending else 'desc'}")
	return sort_episodes(filtered, field, ascending)
