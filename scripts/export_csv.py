"""
Load, validate, and export the episode guide as CSV.

This script:
1) Loads episodes from the configured sources (all-or-nothing)
2) Validates them and reports warnings
3) Applies the requested filters and sort
4) Writes the CSV file

Usage:
    python -m scripts.export_csv --text rose --sort rank --out exports/episodes.csv

Sources default to EPISODES_DATA_SOURCES or the published dataset files.
"""

import sys  # exit codes
from dataclasses import replace  # derive a new QueryState

import click  # command-line options
from loguru import logger  # console logging

from episode_explorer.config import CSV_FILENAME, configure_logging, data_sources  # settings
from episode_explorer.data_loader import DataLoadError  # load failures
from episode_explorer.explorer import EpisodeExplorer  # session over the dataset
from episode_explorer.export import write_csv  # CSV writer
from episode_explorer.grouping import group_by_decade  # decade summary
from episode_explorer.models import SEARCH_FIELDS, QueryState  # query parameters


def build_state(text, era, doctor, companion, search_fields, sort, desc) -> QueryState:
	"""Command-line options -> QueryState; --sort counts as an explicit choice."""
	state = QueryState(text=text).with_filters(era=era, doctor=doctor, companion=companion)
	if search_fields:
		state = state.with_search_fields(*search_fields)
	if sort:
		state = replace(state, sort_field=sort, ascending=not desc, sort_explicit=True)
	return state


@click.command()
@click.argument("sources", nargs=-1)
@click.option("--text", default="", help="Free-text filter")
@click.option("--era", default="", help="Exact era filter")
@click.option("--doctor", default="", help="Doctor actor filter")
@click.option("--companion", default="", help="Companion actor filter")
@click.option(
	"--search-field", "search_fields",
	multiple=True,
	type=click.Choice(SEARCH_FIELDS),
	help="Field searched by --text (repeatable, default: title)"
)
@click.option("--sort", default=None, help="Sort field, or 'relevance'")
@click.option("--desc", is_flag=True, help="Sort descending")
@click.option("--full", is_flag=True, help="Use the single-file dataset instead of the split files")
@click.option("--out", default=CSV_FILENAME, show_default=True, help="Output CSV path")
@click.option("--log-level", default="INFO", show_default=True, help="Log level")
def main(sources, text, era, doctor, companion, search_fields, sort, desc, full, out, log_level):
	"""Export the episode guide to CSV.

	SOURCES are URLs or JSON files; the configured sources are used when omitted.
	"""
	configure_logging(log_level)

	# Headline banner for visibility in console
	logger.info("=" * 60)
	logger.info("Export Episode Guide")
	logger.info("=" * 60)

	# 1) Load data
	logger.info("[1/4] Loading episodes...")
	explorer = EpisodeExplorer()
	try:
		explorer.load(list(sources) or data_sources(full=full))
	except (DataLoadError, FileNotFoundError) as e:
		logger.error(f"Could not load episodes: {e}")
		sys.exit(1)
	logger.info(f"[OK] Loaded {len(explorer.episodes)} episodes")

	# 2) Validation summary
	logger.info("[2/4] Validating...")
	if explorer.warnings:
		logger.warning(f"[!] {len(explorer.warnings)} data validation warning(s)")
	else:
		logger.info("[OK] No data validation warnings")

	# 3) Query
	logger.info("[3/4] Filtering and sorting...")
	state = build_state(text, era, doctor, companion, search_fields, sort, desc)
	episodes = explorer.query(state)
	logger.info(f"[OK] {len(episodes)} of {len(explorer.episodes)} episodes selected")
	for group in group_by_decade(episodes):
		logger.info(f"    {group.label}: {group.count} episodes | {group.era_counts}")

	# 4) Write
	logger.info("[4/4] Writing CSV...")
	path = write_csv(episodes, out)
	logger.info(f"[OK] Saved to {path}")
	logger.info("=" * 60)


if __name__ == '__main__':
	main()  # invoke exporter
