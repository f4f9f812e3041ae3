"""Constants shared by the stream role resolver and the device bridge.

Device protocol v1: JSON request/reply over ZMQ REQ/REP.
"""

# Sentinel stored in a role setting when the user has not picked a stream
DEFAULT_CHOICE = "Default"

# Stream tags that are never prebuffered by default
SOURCE_CLOUD = "cloud"
CONTAINER_RAWVIDEO = "rawvideo"

DEFAULT_ZMQ_ENDPOINT = "tcp://127.0.0.1:5560"
DEFAULT_TIMEOUT = 5.0  # seconds

PROTOCOL_VERSION = 1

# Request ops
OP_LIST_STREAM_OPTIONS = "list_stream_options"
