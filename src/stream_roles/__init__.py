"""stream-roles: pick which camera stream serves each viewing and recording role.

Quick start::

    from stream_roles import StreamDeviceClient, StreamSettings

    settings = StreamSettings()
    with StreamDeviceClient("tcp://127.0.0.1:5560") as device:
        streams = device.list_stream_options()

    resolved = settings.get_default_stream(streams)
    print(resolved.stream.name, resolved.is_default)

For the bare selection policy, use :func:`pick_best_stream` and
:func:`get_default_prebuffered_streams` directly.
"""

from .device import MockStreamDevice, StreamDeviceClient
from .models import ResolvedStream, StreamDescriptor, VideoInfo
from .protocol import DEFAULT_CHOICE, DEFAULT_ZMQ_ENDPOINT
from .roles import Role, RoleSetting, STREAM_ROLES
from .selection import (
    get_default_prebuffered_streams,
    get_prebuffered_streams,
    pick_best_stream,
)
from .settings import StorageSetting, StorageSettings
from .stream_settings import StreamSettings

__version__ = "0.1.0"

__all__ = [
    "MockStreamDevice",
    "StreamDeviceClient",
    "ResolvedStream",
    "StreamDescriptor",
    "VideoInfo",
    "DEFAULT_CHOICE",
    "DEFAULT_ZMQ_ENDPOINT",
    "Role",
    "RoleSetting",
    "STREAM_ROLES",
    "get_default_prebuffered_streams",
    "get_prebuffered_streams",
    "pick_best_stream",
    "StorageSetting",
    "StorageSettings",
    "StreamSettings",
    "__version__",
]
