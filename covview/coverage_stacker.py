"""
coverage_stacker.py — Converts cumulative depth coverage into stacked bands

Features:
- Orders models by subject name, then by model id
- Orders depths highest first and uses that single list for every model
- Turns "at least this depth" percentages into "exactly this depth band"
  percentages so bars can be stacked
- Keeps the unrounded cumulative values alongside for hover text
"""

import logging
import math
from typing import Any, Dict, List

from covview.summary_parser import validate_coverage_summary

logger = logging.getLogger(__name__)

STACKED_PRECISION = 3


def round_half_up(value: float, places: int) -> float:
    """Round halves upward (0.0625 -> 0.063 at 3 places), matching Math.round in the browser."""
    factor = 10 ** places
    return math.floor(value * factor + 0.5) / factor


def sort_models(summary: Dict[Any, Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Return the models sorted by subject_name, then id (stable)."""
    return sorted(summary.values(), key=lambda m: (m["subject_name"], m["id"]))


def model_display_name(model: Dict[str, Any]) -> str:
    return f"{model['subject_name']} (L{model['lane']})"


def stack_model(covered: Dict[int, float], depths: List[int]) -> List[float]:
    """
    Stacked bands for one model.

    band[0] is the coverage at the highest depth; every following band is
    what the next lower depth adds on top of the previous one.

    Cumulative values are rounded before differencing so the bands add up
    to the rounded coverage at the lowest depth.
    """
    rounded = [round_half_up(covered[depth], STACKED_PRECISION) for depth in depths]
    bands = []
    for i in range(len(depths)):
        if i == 0:
            stacked = rounded[0]
        else:
            stacked = round_half_up(rounded[i] - rounded[i - 1], STACKED_PRECISION)
        bands.append(stacked)
    return bands


def stack_coverage(summary: Dict[Any, Dict[str, Any]]) -> Dict[str, Any]:
    """
    Sort, validate and stack a parsed coverage summary.

    Returns:
        dict with keys:
            - models: sorted model dicts
            - labels: display name per model
            - depths: depth thresholds, highest first
            - stacked: per model, rounded band values (bar lengths)
            - full: per model, unrounded cumulative values (hover text)
    """
    models = sort_models(summary)

    # STEP 1: Validate before anything is derived.
    depths = validate_coverage_summary(models)

    # STEP 2: Thread the one depth list through every model.
    labels = []
    stacked = []
    full = []
    for model in models:
        covered = model["pc_target_space_covered"]
        labels.append(model_display_name(model))
        stacked.append(stack_model(covered, depths))
        full.append([covered[d] for d in depths])

    logger.debug("Stacked coverage for %d models across depths %s", len(models), depths)

    return {
        "models": models,
        "labels": labels,
        "depths": depths,
        "stacked": stacked,
        "full": full,
    }
