"""
config.py
---------
Central configuration for the Spotlight route optimizer.
Values are read from environment variables (optionally via backend/.env).
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the backend directory (if it exists) so env vars in that file
# are picked up by os.getenv() below.
_env_path = Path(__file__).parent / ".env"
if _env_path.exists():
    load_dotenv(_env_path, override=False)


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


# ── Distance metric ───────────────────────────────────────────────────────────
# Mean Earth radius used by the haversine great-circle distance (km).
EARTH_RADIUS_KM: float = 6371.0

# ── Route optimizer ───────────────────────────────────────────────────────────
# Upper bound on waypoints accepted per optimization call.  Trips carry tens of
# waypoints; the greedy insertion is O(L·n²), so the cap is enforced up front.
ROUTE_MAX_WAYPOINTS: int = int(os.getenv("ROUTE_MAX_WAYPOINTS", "200"))

# When true, a landmark with malformed coordinates aborts the whole call
# (InvalidWaypointError).  When false it is skipped and reported.
ROUTE_STRICT_VALIDATION: bool = _flag("ROUTE_STRICT_VALIDATION", "false")

# Display rounding for total route distance (stats panel shows 10 km steps).
ROUTE_DISPLAY_ROUND_KM: float = float(os.getenv("ROUTE_DISPLAY_ROUND_KM", "10"))

# ── Observability ─────────────────────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
PERF_LOG_ENABLED: bool = _flag("PERF_LOG_ENABLED", "true")
# JSONL session logs; defaults to <repo>/backend/logs
LOGS_DIR: Path = Path(os.getenv("LOGS_DIR", str(Path(__file__).parent / "logs")))
