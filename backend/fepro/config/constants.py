"""
Centralized constants for the FEPRO backend.

Import from here instead of redefining.
"""

# Spatial reference for stored coordinates (WGS 84, lng/lat degrees)
SRID = 4326

# Pagination bounds for contractor listing
DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 500

# Request durations above this are logged as slow_request
SLOW_REQUEST_THRESHOLD_MS = 2000

# Query parameters never written to the request log
SENSITIVE_PARAMS = {"inn", "kpp", "email", "phone"}
