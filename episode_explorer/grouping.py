"""
Decade grouping module.
Partitions episodes into decade buckets by broadcast year.
"""

import math
from collections import defaultdict
from typing import Dict, List, Sequence

from loguru import logger

from .dates import extract_year
from .models import DecadeGroup, Episode


def decade_of(year: int) -> int:
	return year // 10 * 10


def _rank_key(episode: Episode) -> float:
	rank = episode.rank
	if isinstance(rank, bool):
		return math.inf
	if isinstance(rank, (int, float)):
		return math.inf if math.isnan(rank) else float(rank)
	if isinstance(rank, str):
		try:
			value = float(rank.strip())
		except ValueError:
			return math.inf
		return math.inf if math.isnan(value) else value
	return math.inf  # unranked/unparseable last


def group_by_decade(episodes: Sequence[Episode]) -> List[DecadeGroup]:
	"""
	Group episodes by decade, oldest decade first, each group ordered by rank.
	Episodes without a parseable broadcast year are left out of every group.
	"""
	buckets: Dict[int, List[Episode]] = defaultdict(list)
	dropped = 0
	for episode in episodes:
		year = extract_year(episode.broadcast_date)
		if year is None:
			dropped += 1
			continue
		buckets[decade_of(year)].append(episode)

	if dropped:
		logger.debug(f"[Grouping] {dropped} episode(s) without a broadcast year left out of decade groups")

	groups = [
		DecadeGroup(decade=decade, episodes=tuple(sorted(buckets[decade], key=_rank_key)))
		for decade in sorted(buckets)
	]
	logger.debug(f"[Grouping] Built {len(groups)} decade group(s)")
	return groups
