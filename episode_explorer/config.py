"""
Configuration for the Episode Explorer.
Module-level defaults, with environment variables for the few settings that change per deployment.
"""

import os  # environment-based settings
import sys  # stderr sink for loguru
from typing import List

from loguru import logger  # console logger


# Base location of the published dataset files
DATA_BASE_URL = 'https://raw.githubusercontent.com/sweko/internet-programming-adefinater/refs/heads/preparation/data'

# The dataset is published split across several files; a load must fetch all of them
DEFAULT_DATA_URLS = [
	f'{DATA_BASE_URL}/doctor-who-episodes-01-10.json',
	f'{DATA_BASE_URL}/doctor-who-episodes-11-20.json',
	f'{DATA_BASE_URL}/doctor-who-episodes-21-30.json',
	f'{DATA_BASE_URL}/doctor-who-episodes-31-40.json',
	f'{DATA_BASE_URL}/doctor-who-episodes-41-50.json',
	f'{DATA_BASE_URL}/doctor-who-episodes-51-65.json',
]

# Same data as a single document (EPISODES_FULL_FILE=1 or data_sources(full=True))
FULL_DATA_URL = f'{DATA_BASE_URL}/doctor-who-episodes-full.json'

MAX_FETCH_WORKERS = int(os.getenv('EXPLORER_FETCH_WORKERS', '6'))  # parallel fetches per load
MISSING = 'N/A'  # display value for anything unknown
CSV_FILENAME = 'doctor_who_episodes.csv'  # default export file name
LOG_LEVEL = os.getenv('EXPLORER_LOG_LEVEL', 'INFO')  # loguru sink level


def data_sources(full: bool = False) -> List[str]:
	"""
	Return the list of dataset sources (URLs or local paths).
	EPISODES_DATA_SOURCES overrides everything with a comma-separated list.
	Otherwise full (or EPISODES_FULL_FILE=1) picks the single-document dataset over the split files.
	"""
	raw = os.getenv('EPISODES_DATA_SOURCES', '')
	sources = [s.strip() for s in raw.split(',') if s.strip()]
	if sources:
		return sources
	if full or os.getenv('EPISODES_FULL_FILE', '').lower() in ('1', 'true', 'yes'):
		return [FULL_DATA_URL]
	return list(DEFAULT_DATA_URLS)


def configure_logging(level: str = LOG_LEVEL) -> None:
	"""Replace loguru's default sink with a stderr sink at the requested level."""
	logger.remove()
	logger.add(sys.stderr, level=level.upper())
	logger.debug(f"[Config] Logging configured at level {level.upper()}")
