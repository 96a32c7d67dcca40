"""Tests for coverage summary parsing and precondition checks."""

import pytest

from covview.summary_parser import (
    InvalidSummaryError,
    parse_coverage_summary,
    parse_model_coverage,
    validate_coverage_summary,
)


def _raw_model(model_id, subject="H_KA-1", lane="1", covered=None):
    return {
        "subject_name": subject,
        "lane": lane,
        "id": model_id,
        "pc_target_space_covered": covered or {"30": 40.0, "10": 80.0, "1": 95.0},
    }


class TestParseModelCoverage:
    def test_depth_keys_become_ints(self):
        model = parse_model_coverage(_raw_model(7))
        assert model["pc_target_space_covered"] == {30: 40.0, 10: 80.0, 1: 95.0}
        assert model["lane"] == "1"
        assert model["id"] == 7

    def test_lane_is_stringified(self):
        model = parse_model_coverage(_raw_model(7, lane=4))
        assert model["lane"] == "4"

    def test_missing_field(self):
        raw = _raw_model(7)
        del raw["lane"]
        with pytest.raises(InvalidSummaryError, match="missing field 'lane'"):
            parse_model_coverage(raw)

    def test_empty_depth_map(self):
        raw = _raw_model(7)
        raw["pc_target_space_covered"] = {}
        with pytest.raises(InvalidSummaryError, match="non-empty"):
            parse_model_coverage(raw)

    def test_non_integer_depth(self):
        with pytest.raises(InvalidSummaryError, match="not an integer"):
            parse_model_coverage(_raw_model(7, covered={"deep": 10.0}))

    def test_fractional_depth(self):
        with pytest.raises(InvalidSummaryError, match="not an integer"):
            parse_model_coverage(_raw_model(7, covered={"2.5": 10.0}))

    def test_non_ascii_digit_depth(self):
        with pytest.raises(InvalidSummaryError, match="not an integer"):
            parse_model_coverage(_raw_model(7, covered={"\u00b2": 10.0}))

    def test_non_numeric_percentage(self):
        with pytest.raises(InvalidSummaryError, match="not a number"):
            parse_model_coverage(_raw_model(7, covered={"10": "lots"}))

    def test_percentage_out_of_range(self):
        with pytest.raises(InvalidSummaryError, match="between 0 and 100"):
            parse_model_coverage(_raw_model(7, covered={"10": 100.5}))


class TestParseCoverageSummary:
    def test_mapping_shape(self):
        summary = parse_coverage_summary({"7": _raw_model(7), "8": _raw_model(8)})
        assert set(summary) == {"7", "8"}

    def test_list_shape_keyed_by_id(self):
        summary = parse_coverage_summary([_raw_model(7), _raw_model(8)])
        assert set(summary) == {7, 8}

    def test_list_entry_without_id(self):
        raw = _raw_model(7)
        del raw["id"]
        with pytest.raises(InvalidSummaryError, match="needs an 'id'"):
            parse_coverage_summary([raw])

    def test_duplicate_ids_in_list(self):
        with pytest.raises(InvalidSummaryError, match="more than once"):
            parse_coverage_summary([_raw_model(7), _raw_model(7)])

    def test_mixed_id_types(self):
        with pytest.raises(InvalidSummaryError, match="not a mix"):
            parse_coverage_summary([_raw_model(1, subject="S"), _raw_model("x", subject="S")])

    def test_non_scalar_id(self):
        with pytest.raises(InvalidSummaryError, match="integer or a string"):
            parse_coverage_summary({"a": _raw_model([1, 2])})

    @pytest.mark.parametrize("raw", [{}, []])
    def test_empty_summary_is_rejected(self, raw):
        with pytest.raises(InvalidSummaryError, match="empty"):
            parse_coverage_summary(raw)

    def test_wrong_type(self):
        with pytest.raises(InvalidSummaryError, match="object or a list"):
            parse_coverage_summary("not a summary")


class TestValidateCoverageSummary:
    def test_returns_depths_highest_first(self):
        summary = parse_coverage_summary([_raw_model(1), _raw_model(2)])
        assert validate_coverage_summary(list(summary.values())) == [30, 10, 1]

    def test_empty_model_list(self):
        with pytest.raises(InvalidSummaryError, match="empty"):
            validate_coverage_summary([])

    def test_depth_set_mismatch(self):
        summary = parse_coverage_summary([
            _raw_model(1),
            _raw_model(2, covered={"30": 40.0, "10": 80.0, "5": 90.0}),
        ])
        with pytest.raises(InvalidSummaryError, match="Model 2 depth set differs"):
            validate_coverage_summary(list(summary.values()))

    def test_non_monotonic_coverage_is_rejected(self):
        summary = parse_coverage_summary([
            _raw_model(1, covered={"100": 50.0, "10": 40.0}),
        ])
        with pytest.raises(InvalidSummaryError, match="depth 100 .* exceeds coverage at depth 10"):
            validate_coverage_summary(list(summary.values()))

    def test_equal_coverage_across_depths_is_allowed(self):
        summary = parse_coverage_summary([_raw_model(1, covered={"20": 60.0, "10": 60.0})])
        assert validate_coverage_summary(list(summary.values())) == [20, 10]
