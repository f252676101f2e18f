"""
Runtime configuration, read from the environment.
"""

import os

# Upstream weather provider
DEFAULT_PROVIDER_BASE_URL = "https://aviationweather.gov/api/data"
WX_PROVIDER_BASE_URL = (
    os.getenv("WX_PROVIDER_BASE_URL", "").strip() or DEFAULT_PROVIDER_BASE_URL
).rstrip("/")

# Seconds allowed for each METAR/TAF fetch
FETCH_TIMEOUT = float(os.getenv("WX_FETCH_TIMEOUT", "12"))

USER_AGENT = os.getenv("WX_USER_AGENT", "ari-wx/0.1 (aviation weather screen)")

# Logging Configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
