"""
summary_parser.py
-----------------

Turns raw coverage-summary JSON into the structures the stacker and the
chart layout work with, and checks the preconditions they rely on.

Supported Input Shapes
----------------------
1. Mapping keyed by model id:
    {
        "2891": {
            "subject_name": "H_KA-123",
            "lane": "3",
            "id": 2891,
            "pc_target_space_covered": {"1": 98.1, "10": 91.4, "20": 80.2}
        }
    }

2. List of model entries (keyed by each entry's "id"):
    [
        {"subject_name": "H_KA-123", "lane": "3", "id": 2891,
         "pc_target_space_covered": {...}}
    ]

Depth keys arrive as strings in JSON and are converted to integers.
"""

from typing import Any, Dict, List, Optional


class InvalidSummaryError(ValueError):
    """Raised when a coverage summary cannot be charted."""


REQUIRED_FIELDS = ["subject_name", "lane", "id", "pc_target_space_covered"]


def _parse_depth(raw_depth: Any, model_key: Any) -> int:
    # JSON object keys are always strings; ints show up when callers build dicts directly.
    if isinstance(raw_depth, int) and not isinstance(raw_depth, bool):
        return raw_depth
    if isinstance(raw_depth, str) and raw_depth.strip().isascii() and raw_depth.strip().isdigit():
        return int(raw_depth)
    raise InvalidSummaryError(f"Model {model_key}: depth {raw_depth!r} is not an integer.")


def _parse_percent(raw_value: Any, depth: int, model_key: Any) -> float:
    if isinstance(raw_value, bool):
        raise InvalidSummaryError(
            f"Model {model_key}: coverage at depth {depth} is not a number ({raw_value!r})."
        )
    try:
        value = float(raw_value)
    except (TypeError, ValueError):
        raise InvalidSummaryError(
            f"Model {model_key}: coverage at depth {depth} is not a number ({raw_value!r})."
        )
    if not 0.0 <= value <= 100.0:
        raise InvalidSummaryError(
            f"Model {model_key}: coverage at depth {depth} must be between 0 and 100, got {value}."
        )
    return value


def parse_model_coverage(raw: Dict[str, Any], model_key: Optional[Any] = None) -> Dict[str, Any]:
    """Parse a single model entry into a normalized coverage dict."""
    if not isinstance(raw, dict):
        raise InvalidSummaryError(f"Model {model_key}: entry must be an object.")

    if model_key is None:
        model_key = raw.get("id")

    for r in REQUIRED_FIELDS:
        if r not in raw:
            raise InvalidSummaryError(f"Model {model_key}: missing field '{r}'.")

    covered = raw["pc_target_space_covered"]
    if not isinstance(covered, dict) or not covered:
        raise InvalidSummaryError(
            f"Model {model_key}: pc_target_space_covered must be a non-empty object."
        )

    pc_covered = {}
    for raw_depth, raw_value in covered.items():
        depth = _parse_depth(raw_depth, model_key)
        if depth in pc_covered:
            raise InvalidSummaryError(f"Model {model_key}: depth {depth} appears more than once.")
        pc_covered[depth] = _parse_percent(raw_value, depth, model_key)

    return {
        "subject_name": str(raw["subject_name"]),
        "lane": str(raw["lane"]),
        "id": raw["id"],
        "pc_target_space_covered": pc_covered,
    }


def parse_coverage_summary(raw: Any) -> Dict[Any, Dict[str, Any]]:
    """
    Master parser - accepts either supported shape (see file header).

    Returns
    -------
    dict :
        model id -> normalized model coverage.

    Raises
    ------
    InvalidSummaryError :
        If the document is empty, of the wrong type, or any model is malformed.
    """
    if isinstance(raw, dict):
        items = list(raw.items())
    elif isinstance(raw, (list, tuple)):
        items = []
        for entry in raw:
            if not isinstance(entry, dict) or "id" not in entry:
                raise InvalidSummaryError("Every model in a summary list needs an 'id'.")
            items.append((entry["id"], entry))
    else:
        raise InvalidSummaryError("Coverage summary must be an object or a list of models.")

    if not items:
        raise InvalidSummaryError("Coverage summary is empty; at least one model is required.")

    summary = {}
    for model_key, entry in items:
        if model_key in summary:
            raise InvalidSummaryError(f"Model {model_key} appears more than once.")
        summary[model_key] = parse_model_coverage(entry, model_key)

    # Ids break sort ties, so they must all compare with each other.
    id_types = set()
    for model_key, model in summary.items():
        model_id = model["id"]
        if isinstance(model_id, bool) or not isinstance(model_id, (int, str)):
            raise InvalidSummaryError(f"Model {model_key}: id must be an integer or a string.")
        id_types.add(type(model_id))
    if len(id_types) > 1:
        raise InvalidSummaryError("Model ids must be all integers or all strings, not a mix.")
    return summary


def validate_coverage_summary(models: List[Dict[str, Any]]) -> List[int]:
    """
    Check the preconditions of the stacking transform.

    Every model must report the same depth set as the first one, and
    coverage must not grow as depth increases. Returns the shared depth
    list sorted highest depth first.

    Models must come from parse_coverage_summary, which turns depth keys
    into integers; string keys would sort as text.
    """
    if not models:
        raise InvalidSummaryError("Coverage summary is empty; at least one model is required.")

    for model in models:
        for depth in model["pc_target_space_covered"]:
            if isinstance(depth, bool) or not isinstance(depth, int):
                raise InvalidSummaryError(
                    f"Model {model['id']}: depth {depth!r} is not an integer; parse the summary first."
                )

    depths = sorted(models[0]["pc_target_space_covered"], reverse=True)
    if not depths:
        raise InvalidSummaryError(f"Model {models[0]['id']} reports no depths.")
    expected = set(depths)

    for model in models:
        covered = model["pc_target_space_covered"]
        found = set(covered)
        if found != expected:
            missing = sorted(expected - found, reverse=True)
            extra = sorted(found - expected, reverse=True)
            raise InvalidSummaryError(
                f"Model {model['id']} depth set differs from {depths}: "
                f"missing {missing}, unexpected {extra}."
            )

        # Higher depth -> fewer positions reach it -> lower-or-equal coverage.
        for i in range(1, len(depths)):
            higher, lower = depths[i - 1], depths[i]
            if covered[higher] > covered[lower]:
                raise InvalidSummaryError(
                    f"Model {model['id']}: coverage at depth {higher} ({covered[higher]}%) "
                    f"exceeds coverage at depth {lower} ({covered[lower]}%)."
                )

    return depths
