"""
Explorer session module.
Holds the loaded episode snapshot and its validation warnings, and runs
queries, decade grouping, and CSV export against that snapshot.
"""

from dataclasses import dataclass  # lightweight containers for results
from typing import Dict, Iterable, List, Optional, Tuple  # type annotations for clarity

# Import project modules for data structures and components
from .models import DecadeGroup, Episode, QueryState, ValidationWarning  # core data classes
from .data_loader import DataLoader, DataLoadError  # all-or-nothing loading
from .validator import validate  # advisory data checks
from .query import query  # filtering and sorting
from .grouping import group_by_decade  # decade buckets
from .export import export_csv  # CSV text

# Import loguru for console logging
from loguru import logger  # simple structured logger


@dataclass
class ExplorerView:
	state: QueryState  # the state this view was computed for
	episodes: List[Episode]  # filtered + sorted list
	groups: Optional[List[DecadeGroup]] = None  # only set for the "decades" view


class EpisodeExplorer:
	"""
	High-level API combining loading, validation, querying, and grouping.
	The snapshot is replaced only by a load that fully succeeds.
	"""
	def __init__(
		self,
		episodes: Iterable[Episode] = (),  # optional initial dataset
		loader: Optional[DataLoader] = None,  # injectable for tests
	):
		self.loader = loader or DataLoader()  # data source handler
		self.episodes: Tuple[Episode, ...] = ()  # immutable snapshot
		self.warnings: List[ValidationWarning] = []  # warnings for the snapshot
		self.last_error: Optional[str] = None  # message of the most recent failed load
		episodes = tuple(episodes)
		if episodes:
			self._adopt(episodes)

	def _adopt(self, episodes: Tuple[Episode, ...]):
		"""Swap in a new snapshot and recompute its warnings."""
		self.warnings = validate(episodes)  # side-channel warnings
		self.episodes = episodes  # replace snapshot
		self.last_error = None  # load succeeded
		logger.info(f"[Explorer] Dataset ready: {len(episodes)} episodes, {len(self.warnings)} warning(s)")

	def load(self, sources: Iterable[str]) -> Tuple[Episode, ...]:
		"""Load and adopt a dataset; on failure the previous snapshot stays in place."""
		try:
			episodes = tuple(self.loader.load(sources))
		except (DataLoadError, FileNotFoundError) as e:
			self.last_error = str(e)  # surfaced once to the user
			logger.error(f"[Explorer] Load failed, keeping previous dataset: {e}")
			raise
		self._adopt(episodes)
		return self.episodes

	@property
	def loaded(self) -> bool:
		return bool(self.episodes)

	def query(self, state: QueryState) -> List[Episode]:
		"""Filtered and ordered episodes for a state."""
		logger.debug(f"[Explorer] Query: {state}")
		return query(self.episodes, state)

	def view(self, state: QueryState) -> ExplorerView:
		"""The flat list, plus decade groups when the state asks for them."""
		episodes = self.query(state)
		groups = group_by_decade(episodes) if state.view == 'decades' else None
		return ExplorerView(state=state, episodes=episodes, groups=groups)

	def export(self, state: QueryState) -> str:
		"""CSV text for the currently filtered/sorted view."""
		return export_csv(self.query(state))

	def options(self) -> Dict[str, List[str]]:
		"""Values for the era/doctor/companion filter choices."""
		episodes: List[Episode] = list(self.episodes)
		return {
			'eras': self.loader.get_all_eras(episodes),
			'doctors': self.loader.get_all_doctors(episodes),
			'companions': self.loader.get_all_companions(episodes),
		}
