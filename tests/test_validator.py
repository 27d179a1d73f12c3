"""
Unit tests for the validator: required fields, ranks, series, and future dates.
Run: python tests/test_validator.py
"""

from datetime import date

from sample_data import episode, sample_episodes

from episode_explorer.validator import validate

NOW = date(2026, 1, 1)


def codes(warnings):
	return [w.code for w in warnings]


def test_clean_batch_has_no_warnings():
	assert validate(sample_episodes(), now=NOW) == []


def test_missing_rank_warns_once():
	warnings = validate([episode(title="Rose", era="Modern", broadcast_date="2005")], now=NOW)
	assert len(warnings) == 1, warnings
	assert warnings[0].code == "missing_field"
	assert warnings[0].field == "rank"
	assert warnings[0].index == 1


def test_missing_and_blank_fields():
	warnings = validate([episode(rank=1, title="   ", era="", broadcast_date=None)], now=NOW)
	assert sorted(w.field for w in warnings) == ["broadcast_date", "era", "title"]
	assert set(codes(warnings)) == {"missing_field"}


def test_duplicate_ranks():
	batch = [episode(rank=r, title=f"E{i}", era="Modern", broadcast_date="2005") for i, r in enumerate([1, 2, 1, 2, 3])]
	warnings = [w for w in validate(batch, now=NOW) if w.code == "duplicate_rank"]
	assert [w.index for w in warnings] == [3, 4], "first occurrence never warns; index is 1-based"


def test_invalid_ranks():
	batch = [episode(rank=r, title="X", era="Modern", broadcast_date="2005") for r in [0, -3, "abc", True]]
	assert codes(validate(batch, now=NOW)) == ["invalid_rank"] * 4

	not_whole = [episode(rank=r, title="X", era="Modern", broadcast_date="2005") for r in [float("nan"), float("inf"), 2.5]]
	assert codes(validate(not_whole, now=NOW)) == ["invalid_rank"] * 3, "NaN, infinity and fractions are not ranks"

	assert validate([episode(rank=3.0, title="X", era="Modern", broadcast_date="2005")], now=NOW) == []


def test_negative_series():
	batch = [
		episode(rank=1, title="A", era="Modern", broadcast_date="2005", series=-1),
		episode(rank=2, title="B", era="Modern", broadcast_date="2005", series=0),
	]
	warnings = validate(batch, now=NOW)
	assert codes(warnings) == ["negative_series"]
	assert warnings[0].index == 1


def test_future_date():
	batch = [
		episode(rank=1, title="A", era="Recent", broadcast_date="2030-01-01"),
		episode(rank=2, title="B", era="Recent", broadcast_date="01/01/2026"),  # today is not the future
		episode(rank=3, title="C", era="Recent", broadcast_date="someday"),  # unknown is not the future
	]
	warnings = validate(batch, now=NOW)
	assert codes(warnings) == ["future_date"]
	assert warnings[0].index == 1


def test_input_is_untouched():
	batch = sample_episodes() + [episode(title="No rank")]
	before = list(batch)
	validate(batch, now=NOW)
	assert batch == before, "validation must not remove or reorder records"


def main():
	print("Running validator tests...")
	test_clean_batch_has_no_warnings()
	test_missing_rank_warns_once()
	test_missing_and_blank_fields()
	test_duplicate_ranks()
	test_invalid_ranks()
	test_negative_series()
	test_future_date()
	test_input_is_untouched()
	print("All validator tests passed!")


if __name__ == '__main__':
	main()
