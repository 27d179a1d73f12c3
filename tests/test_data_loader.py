"""
Unit tests for data loading: accepted payload shapes, files, and all-or-nothing URL loads.
Run: python tests/test_data_loader.py
"""

import json
import tempfile
from pathlib import Path

from sample_data import SAMPLE_RECORDS, FakeResponse, FakeSession, ranks, sample_episodes

from episode_explorer.data_loader import DataLoader, DataLoadError


def assert_raises(fn, exc_type, msg):
	try:
		fn()
	except exc_type:
		return
	raise AssertionError(msg)


def test_payload_shapes():
	loader = DataLoader(session=FakeSession({}))
	assert ranks(loader.extract_episodes(SAMPLE_RECORDS)) == [3, 1, 2, 4, 5], "bare array"
	assert len(loader.extract_episodes({"episodes": SAMPLE_RECORDS})) == 5, "episodes wrapper"
	assert len(loader.extract_episodes({"data": SAMPLE_RECORDS[:2]})) == 2, "data wrapper"
	assert loader.extract_episodes([]) == []
	assert_raises(lambda: loader.extract_episodes({"items": []}), DataLoadError, "unknown wrapper should fail")
	assert_raises(lambda: loader.extract_episodes("episodes"), DataLoadError, "string payload should fail")
	assert_raises(lambda: loader.extract_episodes([{"rank": 1}, 42]), DataLoadError, "non-object record should fail")


def test_episode_parsing_defaults():
	(ep,) = DataLoader(session=FakeSession({})).extract_episodes([{
		"rank": "7", "doctor": {"incarnation": "Ninth"}, "companion": {"actor": " Billie Piper "},
		"cast": [{"actor": "A", "character": "B"}, "junk"], "writer": None,
	}])
	assert ep.rank == "7", "raw values are kept for validation"
	assert ep.doctor is None, "doctor without actor"
	assert ep.companion.actor == "Billie Piper" and ep.companion.character is None
	assert len(ep.cast) == 1
	assert ep.writer == "" and ep.director == "" and ep.plot == ""


def test_load_from_urls_concatenates_in_order():
	session = FakeSession({
		"https://example.org/a.json": FakeResponse("a", payload={"episodes": SAMPLE_RECORDS[:2]}),
		"https://example.org/b.json": FakeResponse("b", payload=SAMPLE_RECORDS[2:]),
	})
	loader = DataLoader(session=session, max_workers=2)
	episodes = loader.load_from_urls(["https://example.org/a.json", "https://example.org/b.json"])
	assert ranks(episodes) == [3, 1, 2, 4, 5]
	assert sorted(session.requested) == ["https://example.org/a.json", "https://example.org/b.json"]


def test_load_from_urls_is_all_or_nothing():
	good = FakeResponse("a", payload=SAMPLE_RECORDS)
	cases = [
		{"https://example.org/a.json": good},  # b unreachable
		{"https://example.org/a.json": good, "https://example.org/b.json": FakeResponse("b", status=404)},
		{"https://example.org/a.json": good, "https://example.org/b.json": FakeResponse("b", text="{not json")},
		{"https://example.org/a.json": good, "https://example.org/b.json": FakeResponse("b", payload={"oops": 1})},
	]
	for responses in cases:
		loader = DataLoader(session=FakeSession(responses))
		assert_raises(
			lambda: loader.load_from_urls(["https://example.org/a.json", "https://example.org/b.json"]),
			DataLoadError,
			f"load should fail as a whole for {responses}",
		)
	assert_raises(lambda: DataLoader(session=FakeSession({})).load_from_urls([]), DataLoadError, "no URLs")


def test_load_from_files():
	with tempfile.TemporaryDirectory() as tmp:
		first = Path(tmp) / "one.json"
		second = Path(tmp) / "two.json"
		broken = Path(tmp) / "broken.json"
		first.write_text(json.dumps({"episodes": SAMPLE_RECORDS[:3]}), encoding="utf-8")
		second.write_text(json.dumps({"data": SAMPLE_RECORDS[3:]}), encoding="utf-8")
		broken.write_text("[{", encoding="utf-8")

		loader = DataLoader(session=FakeSession({}))
		assert ranks(loader.load([str(first), str(second)])) == [3, 1, 2, 4, 5]
		assert_raises(lambda: loader.load_from_files([str(Path(tmp) / "missing.json")]), FileNotFoundError, "missing file")
		assert_raises(lambda: loader.load_from_files([str(first), str(broken)]), DataLoadError, "invalid JSON")


def test_unreadable_files_are_load_errors():
	with tempfile.TemporaryDirectory() as tmp:
		bad_bytes = Path(tmp) / "latin1.json"
		bad_bytes.write_bytes(b'[{"title": "Caf\xe9"}]')  # not UTF-8

		loader = DataLoader(session=FakeSession({}))
		assert_raises(lambda: loader.load_from_files([str(bad_bytes)]), DataLoadError, "invalid UTF-8")
		assert_raises(lambda: loader.load_from_files([tmp]), DataLoadError, "a directory is not a data file")
		assert_raises(lambda: loader.load([str(bad_bytes)]), DataLoadError, "same rule through load()")


def test_mixed_sources_keep_source_order():
	url = "https://example.org/middle.json"
	with tempfile.TemporaryDirectory() as tmp:
		first = Path(tmp) / "first.json"
		last = Path(tmp) / "last.json"
		first.write_text(json.dumps(SAMPLE_RECORDS[:2]), encoding="utf-8")
		last.write_text(json.dumps(SAMPLE_RECORDS[3:]), encoding="utf-8")
		session = FakeSession({url: FakeResponse(url, payload=SAMPLE_RECORDS[2:3])})

		episodes = DataLoader(session=session).load([str(first), url, str(last)])
		assert ranks(episodes) == [3, 1, 2, 4, 5], "file, url, file stays in that order"


def test_filter_options():
	loader = DataLoader(session=FakeSession({}))
	episodes = sample_episodes()
	assert loader.get_all_eras(episodes) == ["Classic", "Modern"]
	assert loader.get_all_doctors(episodes) == ["Christopher Eccleston", "David Tennant", "William Hartnell"]
	assert loader.get_all_companions(episodes) == ["Billie Piper", "Carey Mulligan", "Catherine Tate"]


def main():
	print("Running DataLoader tests...")
	test_payload_shapes()
	test_episode_parsing_defaults()
	test_load_from_urls_concatenates_in_order()
	test_load_from_urls_is_all_or_nothing()
	test_load_from_files()
	test_unreadable_files_are_load_errors()
	test_mixed_sources_keep_source_order()
	test_filter_options()
	print("All DataLoader tests passed!")


if __name__ == '__main__':
	main()
