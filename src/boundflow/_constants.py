"""Internal constants shared across the library."""

BASE_URL = "https://open-api.xyz/api/"
USER_AGENT = "boundflow/1.0"

#: Seconds before the transport gives up on a request.
NETWORK_TIMEOUT: float = 6.0
#: Artificial delays used while testing UI loading states.
TESTING_NETWORK_DELAY: float = 0.0
TESTING_CACHE_DELAY: float = 0.0

# ------------------------------------------------------------------
# Error messages
# ------------------------------------------------------------------

#: The auth endpoints answer HTTP 200 with ``response == "Error"`` on bad credentials.
GENERIC_AUTH_ERROR = "Error"

ERROR_UNKNOWN = "Unknown error"
UNABLE_TO_RESOLVE_HOST = "Unable to resolve host"
NETWORK_ERROR_TIMEOUT = "Network timeout"
