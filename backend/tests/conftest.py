"""Shared test setup: keep JSONL logs out of the source tree."""

import os
import tempfile

# must run before config is imported by any test module
os.environ.setdefault("LOGS_DIR", tempfile.mkdtemp(prefix="spotlight-logs-"))
os.environ.setdefault("PERF_LOG_ENABLED", "false")
os.environ.setdefault("ROUTE_STRICT_VALIDATION", "false")
