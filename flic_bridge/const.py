"""Constants for the Flic Twist / Home Assistant bridge."""

from __future__ import annotations

# ── Home Assistant REST API ─────────────────────────────────────────
API_ROOT = "/api/"
API_STATES = "/api/states/"
API_SERVICES = "/api/services/"

DEFAULT_REQUEST_TIMEOUT = 10

# ── Timing (seconds) ────────────────────────────────────────────────
DEBOUNCE_DELAY = 0.1
COOLDOWN_WINDOW = 2.5
STATE_SETTLE_DELAY = 0.1
COVER_MOVE_DELAY = 1.0

SETUP_ATTEMPTS = 3
SETUP_RETRY_DELAY = 3

# ── Media ───────────────────────────────────────────────────────────
VOLUME_STEP = 10
PLAYBACK_CENTER = 0.5
PLAYBACK_THRESHOLD = 0.1

MEDIA_STATE_PLAYING = "playing"
MEDIA_STATE_PAUSED = "paused"
MEDIA_OFF_STATES: frozenset[str] = frozenset(
    {"off", "standby", "unavailable", "unknown"}
)

# ── Lights ──────────────────────────────────────────────────────────
BRIGHTNESS_MAX = 255
BRIGHTNESS_STEP = 25
BRIGHTNESS_BRIGHT = 255
BRIGHTNESS_DIM = 51

HUE_MAX = 360
SATURATION_MAX = 100
DEFAULT_HUE = 0
DEFAULT_SATURATION = 100
MEANINGFUL_SATURATION_THRESHOLD = 5

MIREDS_MIN = 154
MIREDS_MAX = 500
DEFAULT_COLOR_TEMPERATURE = 0.5

# ── Climate ─────────────────────────────────────────────────────────
DEFAULT_TEMP_MIN = 16.0
DEFAULT_TEMP_MAX = 30.0
DEFAULT_TARGET_TEMPERATURE = 20.0
TEMPERATURE_STEP = 1.0

HVAC_MODE_OFF = "off"
HVAC_MODE_HEAT = "heat"
HVAC_MODE_COOL = "cool"
HVAC_MODE_AUTO = "auto"

# ── Covers ──────────────────────────────────────────────────────────
POSITION_MAX = 100
POSITION_STEP = 10

COVER_STATE_OPEN = "open"
COVER_STATE_OPENING = "opening"
COVER_STATE_CLOSED = "closed"
