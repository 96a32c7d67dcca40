"""
summary_loader.py — Load coverage summaries from disk or from the summary endpoint
"""

import gzip
import json
import logging
from typing import Any, Dict, Optional

import requests

from covview import config
from covview.summary_parser import parse_coverage_summary

logger = logging.getLogger(__name__)


def load_coverage_summary(path):
    """
    Load a coverage summary from a JSON file (optionally gzip-compressed).

    Returns:
        dict: {model_id: {subject_name, lane, id, pc_target_space_covered}}
    """
    opener = gzip.open if str(path).endswith(".gz") else open
    with opener(path, "rt", encoding="utf-8") as f:
        raw = json.load(f)

    summary = parse_coverage_summary(raw)
    logger.info("Loaded coverage summary for %d models from %s", len(summary), path)
    return summary


def fetch_coverage_summary(
    url: Optional[str] = None,
    params: Optional[Dict[str, Any]] = None,
    timeout: Optional[float] = None,
) -> Optional[Dict[Any, Dict[str, Any]]]:
    """
    Fetch a coverage summary from the JSON endpoint.

    Returns None when the endpoint cannot be reached, answers with an HTTP
    error, or does not return JSON. A well-formed response that breaks the
    summary rules raises InvalidSummaryError.
    """
    url = url or config.SUMMARY_URL
    timeout = timeout if timeout is not None else config.FETCH_TIMEOUT

    try:
        r = requests.get(url, params=params, timeout=timeout)
        r.raise_for_status()
        raw = r.json()
    except requests.RequestException as e:
        logger.warning("Error fetching coverage summary from %s: %s", url, e)
        return None
    except ValueError as e:
        logger.warning("Coverage summary from %s is not JSON: %s", url, e)
        return None

    return parse_coverage_summary(raw)
