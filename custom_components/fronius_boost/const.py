"""Constants for the Fronius Boost integration."""

DOMAIN = "fronius_boost"

# ── API Endpoint Paths ───────────────────────────────────────────────
ENDPOINT_EMRS_STATUS = "/status/emrs/"
ENDPOINT_EMRS_CONFIG = "/config/emrs/"
ENDPOINT_EMRS_CONFIG_SAVE = "/config/emrs/?method=save"
ENDPOINT_ABOUT_SYSTEM = "/admincgi-bin/aboutSystem.cgi"

# ── Digest Authentication ────────────────────────────────────────────
# The Fronius firmware answers 401 with X-WWW-Authenticate so browsers
# do not show their own login dialog.
HEADER_WWW_AUTHENTICATE = "WWW-Authenticate"
HEADER_X_WWW_AUTHENTICATE = "X-WWW-Authenticate"
CLIENT_NONCE_BYTES = 8
NONCE_COUNT_WIDTH = 8

# ── EMRS Pin Rules ───────────────────────────────────────────────────
PINS = ["pin1", "pin2", "pin3", "pin4"]
MODE_FORCED = "pgrid"
MODE_NORMAL = "ppv"
FORCED_THRESHOLD_ON = 1
FORCED_THRESHOLD_OFF = -99999
BOOST_LABEL_MARKER = "haboost"
BOOST_TAG_UUID = "7b0d5a52-51c4-4f0e-9a47-0f3c2d6e8b19"  # Do not change

# ── Config Entry Data Keys ───────────────────────────────────────────
CONF_PINS = "pins"
CONF_PIN = "pin"
CONF_PIN_NAME = "name"
CONF_TIMEOUT_HOURS = "timeout_hours"
CONF_ADD_ANOTHER = "add_another"
CONF_NORMAL_THRESHOLDS = "normal_thresholds"

DEFAULT_USERNAME = "service"

# ── Coordinator ──────────────────────────────────────────────────────
DEFAULT_SCAN_INTERVAL = 60  # seconds, one on-time minute is counted per poll

# ── Transport ────────────────────────────────────────────────────────
API_TIMEOUT_SECONDS = 8
MAX_RESPONSE_BYTES = 1_048_576  # 1 MB
READ_CHUNK_BYTES = 8192
