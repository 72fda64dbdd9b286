"""Internal constants shared across the library."""

# ------------------------------------------------------------------
# Companion wire protocol
# ------------------------------------------------------------------

CMD_HANG_UP = "hangup"
CMD_JOIN_CONFERENCE = "joinConference"
CMD_SET_MUTED = "setMuted"

#: Number of recent conferences shipped to the companion device.
MAX_RECENT_URLS = 5

ACTIVATION_STATE_ACTIVATED = "activated"

# ------------------------------------------------------------------
# MQTT topics (relative to the configured prefix)
# ------------------------------------------------------------------

TOPIC_CONTEXT = "context"
TOPIC_COMMANDS = "commands"
TOPIC_ACTIVATION = "activation"
