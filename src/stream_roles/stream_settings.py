"""Per-device stream settings: resolve each role to a concrete stream.

Example::

    from stream_roles import StreamSettings

    settings = StreamSettings()
    resolved = settings.get_remote_stream(streams)
    print(resolved.title, resolved.stream.name, resolved.is_default)
"""

import traceback
from typing import Any, Dict, List, MutableMapping, Optional, Sequence, Union

from .models import ResolvedStream, StreamDescriptor
from .protocol import DEFAULT_CHOICE
from .roles import Role, RoleSetting, STREAM_ROLES
from .selection import (
    get_default_prebuffered_streams,
    get_prebuffered_streams,
    pick_best_stream,
)
from .settings import StorageSetting, StorageSettings

ENABLED_STREAMS = "enabledStreams"
TRANSCODE_STREAMS = "transcodeStreams"
MISSING_CODEC_PARAMETERS = "missingCodecParameters"

TRANSCODE_KEYS = (TRANSCODE_STREAMS, MISSING_CODEC_PARAMETERS)


def _build_settings() -> Dict[str, StorageSetting]:
    settings = {
        ENABLED_STREAMS: StorageSetting(
            title="Prebuffered Streams",
            description="Prebuffering maintains an active connection to the stream and "
                        "improves load times. Prebuffer also retains the recent video for "
                        "capturing motion events with HomeKit Secure video. Enabling "
                        "Prebuffer is not recommended on Cloud cameras.",
            multiple=True,
        ),
    }
    for role, meta in STREAM_ROLES.items():
        settings[role.value] = StorageSetting(
            title=meta.title,
            description=meta.description,
            default_value=DEFAULT_CHOICE,
            hide=True,
        )
    settings[TRANSCODE_STREAMS] = StorageSetting(
        title="Transcode Streams",
        description="The media streams to transcode. Transcoding audio and video is not "
                    "recommended and should only be used when necessary.",
        group="Transcoding",
        multiple=True,
        choices=[meta.title for meta in STREAM_ROLES.values()],
        hide=True,
    )
    # Some cameras put SPS/PPS only in the SDP; codec copy needs the
    # extra data filter to emit them ahead of IDR frames.
    settings[MISSING_CODEC_PARAMETERS] = StorageSetting(
        title="Add H264 Extra Data",
        description="Some cameras do not include H264 extra data in the stream and this "
                    "causes live streaming to always fail (but recordings may be working). "
                    "This is a inexpensive video filter and does not perform a transcode. "
                    "Enable this setting only as necessary.",
        group="Transcoding",
        type="boolean",
        hide=True,
    )
    return settings


class StreamSettings:
    """Resolves stream roles for one camera from its persisted settings.

    Parameters
    ----------
    storage : MutableMapping or None
        Backing store for the settings values. ``None`` uses a fresh dict.
    transcode_enabled : bool
        Whether the transcode component is attached to the device. Controls
        whether the transcoding settings are shown by :meth:`get_options`.
    """

    def __init__(self, storage: Optional[MutableMapping[str, Any]] = None,
                 transcode_enabled: bool = False):
        self.storage_settings = StorageSettings(_build_settings(), storage)
        self._transcode_enabled = transcode_enabled

    # ------------------------------------------------------------------
    # Role accessors
    # ------------------------------------------------------------------

    def get_default_stream(self, streams: Optional[Sequence[StreamDescriptor]]) -> ResolvedStream:
        return self.get_media_stream(Role.DEFAULT, streams)

    def get_remote_stream(self, streams: Optional[Sequence[StreamDescriptor]]) -> ResolvedStream:
        return self.get_media_stream(Role.REMOTE, streams)

    def get_low_resolution_stream(self, streams: Optional[Sequence[StreamDescriptor]]
                                  ) -> ResolvedStream:
        return self.get_media_stream(Role.LOW_RESOLUTION, streams)

    def get_recording_stream(self, streams: Optional[Sequence[StreamDescriptor]]
                             ) -> ResolvedStream:
        return self.get_media_stream(Role.RECORDING, streams)

    def get_remote_recording_stream(self, streams: Optional[Sequence[StreamDescriptor]]
                                    ) -> ResolvedStream:
        return self.get_media_stream(Role.REMOTE_RECORDING, streams)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def get_prebuffered_streams(self, streams: Optional[Sequence[StreamDescriptor]]
                                ) -> Optional[List[StreamDescriptor]]:
        """Streams to keep prebuffered: the user's selection, or the default policy."""
        enabled = None
        if self.storage_settings.has_value(ENABLED_STREAMS):
            enabled = self.storage_settings.get_value(ENABLED_STREAMS)
        return get_prebuffered_streams(enabled, streams)

    def get_default_media_stream(self, role: Union[Role, str],
                                 streams: Optional[Sequence[StreamDescriptor]]
                                 ) -> Optional[StreamDescriptor]:
        """Best resolution match for *role*.

        Roles that prefer prebuffering pick among the prebuffered streams,
        unless there are none, in which case every stream is a candidate.
        """
        meta = STREAM_ROLES[Role(role)]
        enabled = self.get_prebuffered_streams(streams)
        candidates = enabled if meta.prefers_prebuffer and enabled else streams
        return pick_best_stream(candidates, meta.preferred_resolution)

    def get_media_stream(self, role: Union[Role, str],
                         streams: Optional[Sequence[StreamDescriptor]]) -> ResolvedStream:
        """Stream for *role*: the user's choice if still offered, else the computed default."""
        role = Role(role)
        value = self.storage_settings.get_value(role.value)
        is_default = value == DEFAULT_CHOICE
        stream = next((s for s in streams or () if s.name == value), None)
        if is_default or stream is None:
            is_default = True
            stream = self.get_default_media_stream(role, streams)
        return ResolvedStream(STREAM_ROLES[role].title, is_default, stream)

    # ------------------------------------------------------------------
    # Transcoding
    # ------------------------------------------------------------------

    def is_transcoded(self, role: Union[Role, str]) -> bool:
        """``True`` if the user asked for *role* to be transcoded."""
        title = STREAM_ROLES[Role(role)].title
        return title in self.storage_settings.get_value(TRANSCODE_STREAMS)

    @property
    def missing_codec_parameters(self) -> bool:
        return self.storage_settings.get_value(MISSING_CODEC_PARAMETERS)

    # ------------------------------------------------------------------
    # Settings UI
    # ------------------------------------------------------------------

    def get_options(self, device) -> Dict[str, Dict[str, Any]]:
        """Per-setting overrides for a settings UI, computed from *device*'s streams.

        *device* is anything with a ``list_stream_options()`` method, such as
        :class:`~stream_roles.device.StreamDeviceClient`. Device failures are
        logged and yield only the transcoding overrides.
        """
        transcode = {"hide": False} if self._transcode_enabled else {}
        options: Dict[str, Dict[str, Any]] = {key: dict(transcode) for key in TRANSCODE_KEYS}

        try:
            streams = device.list_stream_options()
        except Exception as e:
            print(f"[stream-roles] error retrieving stream options: {e}", flush=True)
            traceback.print_exc()
            return options

        if streams is None:
            return options

        defaults = get_default_prebuffered_streams(streams)
        options[ENABLED_STREAMS] = {
            "defaultValue": [s.name for s in defaults],
            "choices": [s.name for s in streams],
            "hide": False,
        }

        # A single stream leaves nothing to choose between
        if len(streams) > 1:
            for role, meta in STREAM_ROLES.items():
                options[role.value] = self._role_options(role, meta, streams)
        return options

    def describe(self, device) -> List[Dict[str, Any]]:
        """Full settings UI entries for *device*."""
        return self.storage_settings.describe(self.get_options(device))

    def _role_options(self, role: Role, meta: RoleSetting,
                      streams: Sequence[StreamDescriptor]) -> Dict[str, Any]:
        default_stream = self.get_default_media_stream(role, streams)
        return {
            "defaultValue": DEFAULT_CHOICE,
            "description": f"{meta.description} The default for this stream is "
                           f"{default_stream.name}.",
            "choices": [DEFAULT_CHOICE] + [s.name for s in streams],
            "hide": False,
        }
