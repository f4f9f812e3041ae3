"""Stream descriptors as reported by a camera, and resolved role results."""

from typing import Any, Dict, NamedTuple, Optional


class VideoInfo:
    """Video track metadata. Dimensions are ``None`` when the camera does not report them."""

    __slots__ = ("width", "height", "codec")

    def __init__(self, width: Optional[int] = None, height: Optional[int] = None,
                 codec: Optional[str] = None):
        self.width = width
        self.height = height
        self.codec = codec

    @property
    def pixel_count(self) -> Optional[int]:
        if self.width is None or self.height is None:
            return None
        return self.width * self.height

    def __eq__(self, other):
        if not isinstance(other, VideoInfo):
            return NotImplemented
        return (self.width, self.height, self.codec) == (other.width, other.height, other.codec)

    def __hash__(self):
        return hash((self.width, self.height, self.codec))

    def __repr__(self):
        return f"VideoInfo(width={self.width}, height={self.height}, codec={self.codec!r})"


class StreamDescriptor:
    """One media stream variant offered by a camera.

    ``name`` is unique within a single stream listing. Listings are fresh
    snapshots, so a name seen earlier may be gone in the next one.
    """

    __slots__ = ("name", "source", "container", "video")

    def __init__(self, name: str, source: Optional[str] = None,
                 container: Optional[str] = None, video: Optional[VideoInfo] = None):
        self.name = name
        self.source = source
        self.container = container
        self.video = video

    @property
    def width(self) -> Optional[int]:
        return self.video.width if self.video else None

    @property
    def height(self) -> Optional[int]:
        return self.video.height if self.video else None

    @property
    def pixel_count(self) -> Optional[int]:
        return self.video.pixel_count if self.video else None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StreamDescriptor":
        """Build a descriptor from its wire form.

        Raises
        ------
        ValueError
            If ``data`` is not a mapping or has no string ``name``.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Stream descriptor must be an object, got {type(data).__name__}")
        name = data.get("name")
        if not isinstance(name, str):
            raise ValueError(f"Stream descriptor has no name: {data!r}")

        video = None
        raw_video = data.get("video")
        if isinstance(raw_video, dict):
            video = VideoInfo(
                width=_optional_int(raw_video.get("width")),
                height=_optional_int(raw_video.get("height")),
                codec=raw_video.get("codec"),
            )
        return cls(name, source=data.get("source"), container=data.get("container"),
                   video=video)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name}
        if self.source is not None:
            data["source"] = self.source
        if self.container is not None:
            data["container"] = self.container
        if self.video is not None:
            data["video"] = {
                "width": self.video.width,
                "height": self.video.height,
                "codec": self.video.codec,
            }
        return data

    def __eq__(self, other):
        if not isinstance(other, StreamDescriptor):
            return NotImplemented
        return (self.name, self.source, self.container, self.video) == \
            (other.name, other.source, other.container, other.video)

    def __hash__(self):
        return hash((self.name, self.source, self.container, self.video))

    def __repr__(self):
        size = f"{self.width}x{self.height}" if self.pixel_count is not None else "unknown"
        return (f"StreamDescriptor(name={self.name!r}, source={self.source!r}, "
                f"container={self.container!r}, size={size})")


class ResolvedStream(NamedTuple):
    """The stream chosen for a role.

    ``is_default`` is ``True`` when the stream was computed rather than
    taken from an explicit user choice. ``stream`` is ``None`` when nothing
    could be resolved.
    """

    title: str
    is_default: bool
    stream: Optional[StreamDescriptor]


def _optional_int(value) -> Optional[int]:
    if value is None:
        return None
    # bool is an int subclass; reject it along with floats and strings
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Expected integer dimension, got {value!r}")
    return value
