import os

from dotenv import load_dotenv

# Load environment variables from .env file, if it exists
load_dotenv()


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


# Timezone used to decide "today" for open-session lookups and dashboards
APP_TIMEZONE = os.getenv("APP_TIMEZONE", "America/New_York")

# Max same-day records fetched when looking for a worker's open session.
# The "open" filter runs client-side over this window, so an open record
# past the bound is not seen (the unique index still blocks duplicates).
OPEN_SESSION_FETCH_LIMIT = _int_env("OPEN_SESSION_FETCH_LIMIT", 10)

HISTORY_DEFAULT_LIMIT = _int_env("HISTORY_DEFAULT_LIMIT", 20)
HISTORY_MAX_LIMIT = 100

# Polling cadences
LOCATION_POLL_SECONDS = _int_env("LOCATION_POLL_SECONDS", 30)
DASHBOARD_REFRESH_SECONDS = _int_env("DASHBOARD_REFRESH_SECONDS", 5 * 60)

# Dashboard time ranges (days): 7 for a week, 30 for a month
DEFAULT_RANGE_DAYS = 14
MAX_RANGE_DAYS = 90
TOP_STAFF_DEFAULT = 10

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# CORS
DEV_DOMAIN = os.getenv("DEV_DOMAIN", "http://localhost:3000")
PRODUCTION_DOMAIN = os.getenv("PRODUCTION_DOMAIN")
