# =============================================================================
# WDS Live Client -- Protocol Constants
# =============================================================================
#
# Values match the script injected by the development server.
# =============================================================================

# -- Endpoints -----------------------------------------------------------------

DEFAULT_NOTIFICATION_PATH = "/_live/ws"
HEALTH_PATH = "/_live/health"

# -- Injected configuration ----------------------------------------------------

CONFIG_GLOBAL_KEY = "__WEB_DEV_SERVER_CONFIG__"
CONFIG_CARRIER_ID = "__web_dev_server_config"
CLIENT_SCRIPT_ID = "__web_dev_server_client"

# Elements owned by the live client itself; merge and reactivation skip them.
PRESERVED_IDS = frozenset({CONFIG_CARRIER_ID, CLIENT_SCRIPT_ID})

# -- Reconnection (milliseconds) -----------------------------------------------

RECONNECT_INITIAL_DELAY_MS = 500
RECONNECT_MAX_DELAY_MS = 8000
RECONNECT_FACTOR = 2

# -- Timing (seconds) ----------------------------------------------------------

CONNECTION_TIMEOUT = 10.0
HTTP_TIMEOUT = 10.0
HEALTH_POLL_INTERVAL = 0.25

# -- Cache busting -------------------------------------------------------------

FRESHNESS_PARAM = "_v"

# -- Messages ------------------------------------------------------------------

MAX_MESSAGE_SIZE = 1_048_576  # 1 MB

MESSAGE_TYPE_RELOAD = "reload"
MESSAGE_TYPE_DIFF = "diff"

# -- HTML parsing --------------------------------------------------------------

HTML_PARSER = "lxml"
STYLESHEET_SELECTOR = 'link[rel="stylesheet"]'
