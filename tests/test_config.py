"""
Unit tests for dataset source selection.
Run: python tests/test_config.py
"""

import os

import sample_data  # noqa: F401  (puts the project root on sys.path)

from episode_explorer.config import DEFAULT_DATA_URLS, FULL_DATA_URL, data_sources

ENV_KEYS = ("EPISODES_DATA_SOURCES", "EPISODES_FULL_FILE")


def with_env(**values):
	"""Run data_sources() variants under a temporary environment."""
	saved = {key: os.environ.pop(key, None) for key in ENV_KEYS}
	os.environ.update(values)
	try:
		return data_sources(), data_sources(full=True)
	finally:
		for key in ENV_KEYS:
			os.environ.pop(key, None)
			if saved[key] is not None:
				os.environ[key] = saved[key]


def test_split_files_by_default():
	split, full = with_env()
	assert split == DEFAULT_DATA_URLS and len(split) == 6
	assert full == [FULL_DATA_URL]


def test_full_file_from_environment():
	split, _ = with_env(EPISODES_FULL_FILE="1")
	assert split == [FULL_DATA_URL]


def test_explicit_sources_win():
	split, full = with_env(EPISODES_DATA_SOURCES=" a.json, ,https://example.org/b.json ", EPISODES_FULL_FILE="1")
	assert split == full == ["a.json", "https://example.org/b.json"]


def main():
	print("Running config tests...")
	test_split_files_by_default()
	test_full_file_from_environment()
	test_explicit_sources_win()
	print("All config tests passed!")


if __name__ == '__main__':
	main()
