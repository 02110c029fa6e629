from __future__ import annotations
import os

# Scheme + host of the local gateway that serves both the ESPHome sensor and
# the Tapo control endpoints (the host page's own network location).
GATEWAY_URL = os.getenv("FOODTECH_GATEWAY_URL", "http://localhost")

# Per-request timeout; a timeout counts as a network failure
HTTP_TIMEOUT_S = float(os.getenv("FOODTECH_HTTP_TIMEOUT_S", "5"))

# Background temperature polling
POLL_INTERVAL_MS = int(os.getenv("FOODTECH_POLL_INTERVAL_MS", "1000"))
AUTO_POLL = os.getenv("FOODTECH_AUTO_POLL", "true").lower() in ("1", "true", "yes", "on")
SENSOR_SUFFIX = os.getenv("FOODTECH_SENSOR_SUFFIX", "")

# Smart plug gateway
TAPO_PASSWORD = os.getenv("FOODTECH_TAPO_PASSWORD", "")
DEVICE_KIND = os.getenv("FOODTECH_DEVICE_KIND", "p110m")
DEFAULT_DEVICE = os.getenv("FOODTECH_DEFAULT_DEVICE", "smartplug")

# Extension metadata
EXTENSION_ID = "foodtech"
EXTENSION_NAME = "FoodTech"
EXTENSION_URL = os.getenv(
    "FOODTECH_EXTENSION_URL", "https://getpa.github.io/xcx-food-tech/dist/foodtech.mjs"
)
