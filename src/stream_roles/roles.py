"""Static catalog of stream roles.

Each role is a purpose a camera stream gets selected for. The catalog is
process-wide and identical for every device.
"""

from enum import Enum
from types import MappingProxyType
from typing import Mapping, NamedTuple


class Role(str, Enum):
    DEFAULT = "defaultStream"
    REMOTE = "remoteStream"
    LOW_RESOLUTION = "lowResolutionStream"
    RECORDING = "recordingStream"
    REMOTE_RECORDING = "remoteRecordingStream"


class RoleSetting(NamedTuple):
    title: str
    description: str
    prefers_prebuffer: bool
    preferred_resolution: int  # target pixel count, width * height


STREAM_ROLES: Mapping[Role, RoleSetting] = MappingProxyType({
    Role.DEFAULT: RoleSetting(
        title="Local Stream",
        description="The media stream to use when streaming on your local network. "
                    "This stream should be prebuffered. "
                    "Recommended resolution: 1920x1080 to 4K.",
        prefers_prebuffer=True,
        preferred_resolution=3840 * 2160,
    ),
    Role.REMOTE: RoleSetting(
        title="Remote (Medium Resolution) Stream",
        description="The media stream to use when streaming from outside your local network. "
                    "Selecting a low birate stream is recommended. "
                    "Recommended resolution: 1280x720.",
        prefers_prebuffer=False,
        preferred_resolution=1280 * 720,
    ),
    Role.LOW_RESOLUTION: RoleSetting(
        title="Low Resolution Stream",
        description="The media stream to use for low resolution output, such as "
                    "Apple Watch and Video Analysis. Recommended resolution: 480x360.",
        prefers_prebuffer=False,
        preferred_resolution=480 * 360,
    ),
    Role.RECORDING: RoleSetting(
        title="Local Recording Stream",
        description="The media stream to use when recording to local storage such as an NVR. "
                    "This stream should be prebuffered. "
                    "Recommended resolution: 1920x1080 to 4K.",
        prefers_prebuffer=True,
        preferred_resolution=3840 * 2160,
    ),
    Role.REMOTE_RECORDING: RoleSetting(
        title="Remote Recording Stream",
        description="The media stream to use when recording to cloud storage such as "
                    "HomeKit Secure Video clips in iCloud. This stream should be prebuffered. "
                    "Recommended resolution: 1280x720.",
        prefers_prebuffer=True,
        preferred_resolution=1280 * 720,
    ),
})
