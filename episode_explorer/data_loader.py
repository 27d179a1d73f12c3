"""
Data loading module.
Fetches episode JSON documents (remote URLs or local files), checks their shape,
and turns them into Episode objects. Loading is all-or-nothing.
"""

# Standard libs for JSON parsing, parallel fetches, typing, and paths
import json  # parse local JSON documents
from concurrent.futures import ThreadPoolExecutor  # fetch several documents at once
from pathlib import Path  # filesystem-safe paths
from typing import Any, Iterable, List, Optional

# HTTP client for remote documents
import requests  # GET the published dataset files

# Import our Episode data class used across the project
from .models import Episode  # structured episode record
from .config import MAX_FETCH_WORKERS  # parallelism for remote loads

# Console logging
from loguru import logger  # console logger


class DataLoadError(RuntimeError):
	"""A load attempt failed as a whole; no partial dataset is returned."""


class DataLoader:
	"""
	Handles loading episode data from one or more sources.
	Multiple documents are concatenated in source order.
	"""

	# Top-level keys that may wrap the episode array
	WRAPPER_KEYS = ('episodes', 'data')

	def __init__(self, session: Optional[requests.Session] = None, max_workers: int = MAX_FETCH_WORKERS):
		"""Create a loader; a custom session can be injected (e.g. for tests)."""
		self.session = session or requests.Session()  # shared HTTP connection pool
		self.max_workers = max(1, max_workers)  # at least one worker

	def extract_episodes(self, payload: Any, source: str = '<payload>') -> List[Episode]:
		"""
		Normalize one decoded JSON document into a list of Episode objects.
		Accepted shapes: a top-level array, or an object with an 'episodes' or 'data' array.
		"""
		records = None  # the episode array once found
		if isinstance(payload, list):  # bare array
			records = payload
		elif isinstance(payload, dict):  # wrapped array
			for key in self.WRAPPER_KEYS:
				if isinstance(payload.get(key), list):
					records = payload[key]
					break

		# Anything else is not a dataset we understand
		if records is None:
			raise DataLoadError(f"Unexpected JSON shape in {source}: expected an array of episodes")

		# Every record must at least be an object
		for position, record in enumerate(records, 1):
			if not isinstance(record, dict):
				raise DataLoadError(f"Unexpected record #{position} in {source}: expected an object, got {type(record).__name__}")

		return [Episode.from_dict(record) for record in records]  # dict -> Episode

	def load_from_urls(self, urls: Iterable[str]) -> List[Episode]:
		"""
		Fetch every URL in parallel and wait for all of them.
		If any one fails, the whole load fails with a single DataLoadError.
		"""
		urls = list(urls)  # allow generators
		if not urls:
			raise DataLoadError("No data URLs configured")

		episodes = [episode for batch in self._fetch_all(urls) for episode in batch]  # flatten
		logger.info(f"[DataLoader] Successfully loaded {len(episodes)} episodes.")  # summary
		return episodes

	def _fetch_all(self, urls: List[str]) -> List[List[Episode]]:
		"""One batch per URL, in the order given."""
		logger.info(f"[DataLoader] Fetching {len(urls)} document(s)...")  # log action

		# map() keeps results in source order
		with ThreadPoolExecutor(max_workers=min(self.max_workers, len(urls))) as pool:
			try:
				return list(pool.map(self._fetch, urls))
			except DataLoadError as e:
				logger.error(f"[DataLoader] Load failed: {e}")  # terminal for this attempt
				raise

	def _fetch(self, url: str) -> List[Episode]:
		"""GET one document and convert it; every failure becomes DataLoadError."""
		try:
			response = self.session.get(url)  # no retries, no timeout
			response.raise_for_status()  # non-2xx -> HTTPError
			payload = response.json()  # invalid JSON -> ValueError
		except requests.RequestException as e:
			raise DataLoadError(f"Failed to fetch {url}: {e}") from e
		except ValueError as e:
			raise DataLoadError(f"Invalid JSON from {url}: {e}") from e

		episodes = self.extract_episodes(payload, source=url)  # shape check
		logger.debug(f"[DataLoader] {url} -> {len(episodes)} episodes")  # per-document count
		return episodes

	def load_from_files(self, paths: Iterable[str]) -> List[Episode]:
		"""Read local JSON documents; same shape rules and all-or-nothing behaviour."""
		episodes: List[Episode] = []  # accumulator across files
		for filepath in map(Path, paths):  # normalize paths
			episodes.extend(self._read_file(filepath))

		logger.info(f"[DataLoader] Successfully loaded {len(episodes)} episodes.")  # summary
		return episodes

	def _read_file(self, filepath: Path) -> List[Episode]:
		"""Read one local document; anything unreadable becomes DataLoadError."""
		# Validate the file presence early to give clear error messages
		if not filepath.exists():
			raise FileNotFoundError(f"Episode data file not found: {filepath}")

		logger.info(f"[DataLoader] Loading episodes from {filepath}...")  # log action
		try:
			with open(filepath, 'r', encoding='utf-8') as f:
				payload = json.load(f)  # whole document
		except json.JSONDecodeError as e:
			logger.error(f"[DataLoader] Invalid JSON in {filepath}: {e}")  # malformed file
			raise DataLoadError(f"Invalid JSON in {filepath}: {e}") from e
		except (OSError, UnicodeDecodeError) as e:
			logger.error(f"[DataLoader] Cannot read {filepath}: {e}")  # directory, permissions, encoding
			raise DataLoadError(f"Cannot read {filepath}: {e}") from e

		return self.extract_episodes(payload, source=str(filepath))

	def load(self, sources: Iterable[str]) -> List[Episode]:
		"""
		Load from a mix of sources: http(s) URLs are fetched, anything else is read from disk.
		The result follows the source list order; any failure fails the whole load.
		"""
		sources = list(sources)
		if not sources:
			raise DataLoadError("No data sources configured")

		# Remote documents are fetched together, then everything is stitched back in source order
		urls = [s for s in sources if s.startswith(('http://', 'https://'))]
		fetched = dict(zip(urls, self._fetch_all(urls))) if urls else {}

		episodes: List[Episode] = []
		for source in sources:
			episodes.extend(fetched[source] if source in fetched else self._read_file(Path(source)))

		logger.info(f"[DataLoader] Successfully loaded {len(episodes)} episodes from {len(sources)} source(s).")  # summary
		return episodes

	def get_all_eras(self, episodes: List[Episode]) -> List[str]:
		"""Return a sorted list of all unique eras in the dataset."""
		return sorted({ep.era for ep in episodes if isinstance(ep.era, str) and ep.era})

	def get_all_doctors(self, episodes: List[Episode]) -> List[str]:
		"""Return a sorted list of all unique doctor actor names."""
		return sorted({ep.doctor.actor for ep in episodes if ep.doctor})

	def get_all_companions(self, episodes: List[Episode]) -> List[str]:
		"""Return a sorted list of all unique companion actor names."""
		return sorted({ep.companion.actor for ep in episodes if ep.companion})
