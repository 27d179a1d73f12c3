"""
Data models for the Episode Explorer.
Defines the core data structures used throughout the system.
"""

# Import dataclass helpers to define simple "record-like" classes without boilerplate
from dataclasses import dataclass, replace  # auto-generates __init__, __repr__, etc.
# Import typing helpers for precise and self-documenting types
from typing import Any, Dict, List, Optional, Tuple  # lists, optional values, and fixed-size tuples


# Fields the free-text filter may search, and the view modes a session can show
SEARCH_FIELDS = ('title', 'doctor', 'companion', 'writer', 'director')
VIEW_MODES = ('table', 'decades')


@dataclass(frozen=True)
class Doctor:
	"""The lead actor of an episode and which incarnation they played."""
	actor: str  # actor name as given in the dataset
	incarnation: Optional[str] = None  # e.g. "Ninth Doctor"; may be missing


@dataclass(frozen=True)
class Companion:
	"""The companion actor of an episode (absent when the story had none)."""
	actor: str  # actor name as given in the dataset
	character: Optional[str] = None  # character played; may be missing


@dataclass(frozen=True)
class CastMember:
	actor: str  # performer name
	character: str = ''  # role played


@dataclass(frozen=True)
class Episode:
	"""
	Represents a single episode as it arrived from the dataset.
	Required fields are kept exactly as received so validation can still see
	missing or wrongly typed values; optional text fields default to empty strings.
	"""
	rank: Any = None  # expected unique positive integer
	title: Any = None  # expected non-empty string
	series: Any = None  # expected non-negative integer
	era: Any = None  # category such as "Classic", "Modern", "Recent"
	broadcast_date: Any = None  # one of the accepted date formats (see dates.py)
	director: str = ''  # director name
	writer: str = ''  # one or more names joined by "&" or "and"
	doctor: Optional[Doctor] = None  # lead actor, if known
	companion: Optional[Companion] = None  # companion actor, if any
	cast: Tuple[CastMember, ...] = ()  # supporting cast
	plot: str = ''  # free-text synopsis

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> 'Episode':
		"""
		Build an Episode from one raw JSON object.
		Never raises for a dict input: malformed nested values become neutral defaults.
		"""
		cast = []  # accumulator for well-formed cast entries
		raw_cast = data.get('cast')  # may be missing, null, or a list
		if isinstance(raw_cast, list):
			for member in raw_cast:  # skip anything that is not an object
				if isinstance(member, dict):
					cast.append(CastMember(
						actor=_text(member.get('actor')),
						character=_text(member.get('character')),
					))

		return cls(
			rank=data.get('rank'),  # raw value, validated later
			title=data.get('title'),  # raw value, validated later
			series=data.get('series'),  # raw value, validated later
			era=data.get('era'),  # raw value, validated later
			broadcast_date=data.get('broadcast_date'),  # raw value, parsed on demand
			director=_text(data.get('director')),  # normalized to string
			writer=_text(data.get('writer')),  # normalized to string
			doctor=_parse_doctor(data.get('doctor')),  # None when no actor
			companion=_parse_companion(data.get('companion')),  # None when no actor
			cast=tuple(cast),  # immutable sequence
			plot=_text(data.get('plot')),  # normalized to string
		)


@dataclass(frozen=True)
class ValidationWarning:
	"""
	One advisory data-quality finding. The record it refers to is never changed.
	index is 1-based, matching how people count rows.
	"""
	index: int  # 1-based position of the episode in the loaded batch
	code: str  # machine-readable kind, e.g. "duplicate_rank"
	field: str  # the episode field the warning is about
	message: str  # human-readable description


@dataclass(frozen=True)
class QueryState:
	"""
	Everything the user has chosen about what to look at.
	Immutable: every interaction returns a new state via the with_* helpers.
	"""
	text: str = ''  # free-text filter
	era: str = ''  # exact era filter
	doctor: str = ''  # substring filter on doctor actor name
	companion: str = ''  # substring filter on companion actor name
	search_fields: Tuple[str, ...] = ('title',)  # fields the free-text filter searches
	sort_field: str = 'rank'  # current sort column
	ascending: bool = True  # current sort direction
	sort_explicit: bool = False  # True once the user picked a sort column themselves
	view: str = 'table'  # "table" (flat list) or "decades" (grouped)

	def with_text(self, text: str) -> 'QueryState':
		return replace(self, text=text or '')

	def with_filters(self, **filters: str) -> 'QueryState':
		"""Update any of era / doctor / companion; unknown names are rejected."""
		unknown = set(filters) - {'era', 'doctor', 'companion'}
		if unknown:
			raise ValueError(f"Unknown filter(s): {sorted(unknown)}")
		return replace(self, **{k: (v or '') for k, v in filters.items()})

	def with_sort(self, sort_field: str) -> 'QueryState':
		"""
		Picking the current column again flips direction; a new column starts ascending.
		Either way the choice is recorded as explicit.
		"""
		if sort_field == self.sort_field:
			return replace(self, ascending=not self.ascending, sort_explicit=True)
		return replace(self, sort_field=sort_field, ascending=True, sort_explicit=True)

	def with_view(self, view: str) -> 'QueryState':
		if view not in VIEW_MODES:
			raise ValueError(f"Unknown view mode: {view}")
		return replace(self, view=view)

	def with_search_fields(self, *fields: str) -> 'QueryState':
		unknown = [f for f in fields if f not in SEARCH_FIELDS]
		if unknown:
			raise ValueError(f"Unknown search field(s): {unknown}")
		return replace(self, search_fields=tuple(fields) or ('title',))


@dataclass(frozen=True)
class DecadeGroup:
	"""
	Episodes that aired in the same decade, ordered by rank.
	Summary values are recomputed on every access.
	"""
	decade: int  # first year of the decade, e.g. 1960
	episodes: Tuple[Episode, ...] = ()  # members ordered by rank

	@property
	def label(self) -> str:
		return f"{self.decade}s"

	@property
	def count(self) -> int:
		return len(self.episodes)

	@property
	def era_counts(self) -> Dict[str, int]:
		counts: Dict[str, int] = {}  # insertion order = first-seen order
		for episode in self.episodes:
			era = _text(episode.era) or 'Unknown'
			counts[era] = counts.get(era, 0) + 1
		return counts


def _text(value: Any) -> str:
	"""Turn None into '' and anything else into a stripped string."""
	if value is None:
		return ''
	return str(value).strip()


def _parse_doctor(value: Any) -> Optional[Doctor]:
	if not isinstance(value, dict) or not _text(value.get('actor')):
		return None  # no usable actor means no doctor
	incarnation = _text(value.get('incarnation')) or None
	return Doctor(actor=_text(value['actor']), incarnation=incarnation)


def _parse_companion(value: Any) -> Optional[Companion]:
	if not isinstance(value, dict) or not _text(value.get('actor')):
		return None  # companion may be entirely absent
	character = _text(value.get('character')) or None
	return Companion(actor=_text(value['actor']), character=character)


def episodes_from_dicts(records: List[Dict[str, Any]]) -> List[Episode]:
	"""Convenience wrapper used by the loader and tests."""
	return [Episode.from_dict(r) for r in records]
