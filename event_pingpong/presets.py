"""Predefined configurations for the long-running cloud events suite."""

# Ping-pong run defaults
EVENT_COUNT = 200
EVENT_INTERVAL_MS = 250
EVENT_TIMEOUT_MS = 30000
EVENT_SIZE = 1024
PUBLISH_RETRIES = 3

# Whole-run budget applied by the harness (10 minutes)
RUN_TIMEOUT_MS = 10 * 60 * 1000

# Payload framing: "<n><separator><filler...>"
EVENT_SEPARATOR = " "
EVENT_FILLER = "a"

# Tests of the suite, in order: (test name, outbound channel, inbound channel).
# The device subscribes to devinN and echoes every event back on devoutN.
PING_PONG_TESTS = [
    ("02_ping_pong_old_api", "devin1", "devout1"),
    ("03_ping_pong_new_api", "devin2", "devout2"),
]

# Cloud API connection defaults
CLOUD_DEFAULTS = {
    "api_url": "https://api.particle.io",
    "token_env_var": "PARTICLE_ACCESS_TOKEN",
    "api_url_env_var": "PARTICLE_API_URL",
    "event_ttl_seconds": 60,
    "connect_timeout_seconds": 30,
}

# In-process device used by --loopback runs
LOOPBACK_DEFAULTS = {
    "device_id": "loopback0",
    "echo_delay_ms": 5,
    "routes": {out_channel: in_channel for _, out_channel, in_channel in PING_PONG_TESTS},
}
