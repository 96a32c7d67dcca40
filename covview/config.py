"""
CovView Settings - Runtime Configuration

Purpose:
- Central place for the upstream summary endpoint, fetch timeout and log level.

Every value can be overridden from the environment so the web app and the
CLI pick up the same settings without a config file.
"""

import os

SUMMARY_URL = os.environ.get(
    "COVVIEW_SUMMARY_URL",
    "http://localhost:8080/view/genome/model/coverage.json",
)
FETCH_TIMEOUT = float(os.environ.get("COVVIEW_FETCH_TIMEOUT", "10"))
LOG_LEVEL = os.environ.get("COVVIEW_LOG_LEVEL", "INFO").upper()

# Shown in place of the chart when the summary cannot be fetched.
FETCH_FAILURE_MESSAGE = "failed to get data for coverage chart"
