"""Test StreamSettings: role resolution against persisted user choices.

Usage:
    python3 tests/test_stream_settings.py
"""

import pytest

from stream_roles import (
    DEFAULT_CHOICE,
    Role,
    STREAM_ROLES,
    StreamDescriptor,
    StreamSettings,
    VideoInfo,
)


def stream(name, width=None, height=None, source="local", container="h264"):
    video = VideoInfo(width, height, "h264") if width is not None else None
    return StreamDescriptor(name, source=source, container=container, video=video)


STREAMS = [stream("1080p", 1920, 1080), stream("4k", 3840, 2160)]


class FakeDevice:
    def __init__(self, streams=None, error=None):
        self.streams = streams
        self.error = error

    def list_stream_options(self):
        if self.error is not None:
            raise self.error
        return self.streams


def test_role_catalog():
    assert set(STREAM_ROLES) == set(Role)
    expected = {
        Role.DEFAULT: (True, 3840 * 2160),
        Role.REMOTE: (False, 1280 * 720),
        Role.LOW_RESOLUTION: (False, 480 * 360),
        Role.RECORDING: (True, 3840 * 2160),
        Role.REMOTE_RECORDING: (True, 1280 * 720),
    }
    for role, (prefers, resolution) in expected.items():
        assert STREAM_ROLES[role].prefers_prebuffer is prefers
        assert STREAM_ROLES[role].preferred_resolution == resolution
    with pytest.raises(TypeError):
        STREAM_ROLES[Role.DEFAULT] = STREAM_ROLES[Role.REMOTE]


def test_default_role_picks_4k():
    # With both streams prebuffered the default role takes the one closest to 4K
    settings = StreamSettings()
    settings.storage_settings.put("enabledStreams", ["1080p", "4k"])
    resolved = settings.get_default_stream(STREAMS)
    assert resolved.title == "Local Stream"
    assert resolved.is_default is True
    assert resolved.stream.name == "4k"


def test_default_role_restricted_to_default_prebuffer():
    settings = StreamSettings()
    resolved = settings.get_default_stream(STREAMS)
    assert resolved.stream.name == "1080p"
    assert resolved.is_default is True


def test_remote_role_picks_1080p():
    settings = StreamSettings()
    settings.storage_settings.put("enabledStreams", ["4k"])
    resolved = settings.get_remote_stream(STREAMS)
    assert resolved.stream.name == "1080p"  # remote does not prefer prebuffer
    assert resolved.is_default is True


def test_explicit_choice():
    settings = StreamSettings()
    settings.storage_settings.put(Role.LOW_RESOLUTION.value, "4k")
    resolved = settings.get_low_resolution_stream(STREAMS)
    assert resolved.is_default is False
    assert resolved.stream is STREAMS[1]


def test_stale_choice_falls_back_to_default():
    settings = StreamSettings()
    settings.storage_settings.put(Role.REMOTE.value, "720p-removed")
    resolved = settings.get_remote_stream(STREAMS)
    assert resolved.is_default is True
    assert resolved.stream.name == "1080p"


def test_prefers_prebuffer_with_empty_enabled_set_uses_all_streams():
    settings = StreamSettings()
    settings.storage_settings.put("enabledStreams", [])
    resolved = settings.get_recording_stream(STREAMS)
    assert resolved.stream.name == "4k"

    # Nothing eligible for default prebuffering either
    cloud_only = [stream("cloud-hd", 1280, 720, source="cloud"),
                  stream("cloud-4k", 3840, 2160, source="cloud")]
    resolved = StreamSettings().get_recording_stream(cloud_only)
    assert resolved.stream.name == "cloud-4k"


def test_remote_recording_prefers_prebuffered():
    streams = [stream("720p", 1280, 720), stream("4k", 3840, 2160), stream("sub", 640, 360)]
    settings = StreamSettings()
    settings.storage_settings.put("enabledStreams", ["4k", "sub"])
    assert settings.get_remote_recording_stream(streams).stream.name == "sub"
    assert settings.get_remote_stream(streams).stream.name == "720p"


def test_unknown_streams():
    settings = StreamSettings()
    settings.storage_settings.put(Role.DEFAULT.value, "4k")
    resolved = settings.get_default_stream(None)
    assert resolved.is_default is True
    assert resolved.stream is None
    assert settings.get_prebuffered_streams(None) is None
    assert settings.get_remote_stream([]).stream is None


def test_role_by_key():
    settings = StreamSettings()
    assert settings.get_media_stream("remoteStream", STREAMS) == settings.get_remote_stream(STREAMS)
    with pytest.raises(ValueError):
        settings.get_media_stream("bogusStream", STREAMS)


def test_shared_storage_mapping():
    storage = {}
    StreamSettings(storage).storage_settings.put(Role.REMOTE.value, "4k")
    assert storage == {Role.REMOTE.value: "4k"}
    assert StreamSettings(storage).get_remote_stream(STREAMS).stream.name == "4k"


def test_transcode_settings():
    settings = StreamSettings()
    assert settings.is_transcoded(Role.REMOTE) is False
    assert settings.missing_codec_parameters is False
    settings.storage_settings.put("transcodeStreams", ["Remote (Medium Resolution) Stream"])
    settings.storage_settings.put("missingCodecParameters", True)
    assert settings.is_transcoded(Role.REMOTE) is True
    assert settings.is_transcoded(Role.DEFAULT) is False
    assert settings.missing_codec_parameters is True


def test_options_multiple_streams():
    settings = StreamSettings(transcode_enabled=True)
    options = settings.get_options(FakeDevice(STREAMS))

    assert options["enabledStreams"] == {
        "defaultValue": ["1080p"],
        "choices": ["1080p", "4k"],
        "hide": False,
    }
    remote = options[Role.REMOTE.value]
    assert remote["defaultValue"] == DEFAULT_CHOICE
    assert remote["choices"] == [DEFAULT_CHOICE, "1080p", "4k"]
    assert remote["description"].endswith(" The default for this stream is 1080p.")
    assert remote["hide"] is False
    assert options["transcodeStreams"] == {"hide": False}
    assert options["missingCodecParameters"] == {"hide": False}


def test_options_single_stream_hides_roles():
    settings = StreamSettings()
    options = settings.get_options(FakeDevice([STREAMS[0]]))
    assert options["enabledStreams"]["choices"] == ["1080p"]
    assert not any(role.value in options for role in Role)
    assert options["transcodeStreams"] == {}


def test_options_device_failure(capsys):
    settings = StreamSettings(transcode_enabled=True)
    options = settings.get_options(FakeDevice(error=RuntimeError("camera offline")))
    assert options == {"transcodeStreams": {"hide": False},
                       "missingCodecParameters": {"hide": False}}
    assert "camera offline" in capsys.readouterr().out


def test_options_unknown_listing():
    settings = StreamSettings(transcode_enabled=True)
    options = settings.get_options(FakeDevice(None))
    assert options == {"transcodeStreams": {"hide": False},
                       "missingCodecParameters": {"hide": False}}


def test_describe():
    settings = StreamSettings()
    settings.storage_settings.put(Role.REMOTE.value, "4k")
    entries = {e["key"]: e for e in settings.describe(FakeDevice(STREAMS))}
    assert entries[Role.REMOTE.value]["value"] == "4k"
    assert entries[Role.REMOTE.value]["hide"] is False
    assert entries[Role.DEFAULT.value]["value"] == DEFAULT_CHOICE
    assert entries["transcodeStreams"]["group"] == "Transcoding"
    assert entries["transcodeStreams"]["hide"] is True


if __name__ == "__main__":
    import sys
    sys.exit(pytest.main([__file__, "-v"]))
