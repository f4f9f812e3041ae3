"""Pure selection policy over a camera's stream listing.

``None`` as a listing means the streams are not known yet and propagates
as ``None``. An empty result list means "known, and nothing qualifies".
"""

from typing import Iterable, Optional, Sequence, List

import numpy as np

from .models import StreamDescriptor
from .protocol import SOURCE_CLOUD, CONTAINER_RAWVIDEO


def pick_best_stream(candidates: Optional[Sequence[StreamDescriptor]],
                     resolution: int) -> Optional[StreamDescriptor]:
    """Candidate whose pixel count is closest to *resolution*.

    Ties go to the earliest candidate. Streams with unknown dimensions
    score worse than any stream with known dimensions, but are still
    returned when nothing else is available.
    """
    if not candidates:
        return None

    pixels = np.array(
        [np.nan if s.pixel_count is None else s.pixel_count for s in candidates],
        dtype=np.float64,
    )
    scores = np.abs(pixels - resolution)
    scores[np.isnan(scores)] = np.inf
    # argmin returns the first index on ties, including an all-inf array
    return candidates[int(np.argmin(scores))]


def get_default_prebuffered_streams(
        streams: Optional[Sequence[StreamDescriptor]]) -> Optional[List[StreamDescriptor]]:
    """First stream that is neither a cloud source nor raw video, as a one-element list."""
    if streams is None:
        return None

    for stream in streams:
        if stream.source != SOURCE_CLOUD and stream.container != CONTAINER_RAWVIDEO:
            return [stream]
    return []


def get_prebuffered_streams(enabled_names: Optional[Iterable[str]],
                            streams: Optional[Sequence[StreamDescriptor]]
                            ) -> Optional[List[StreamDescriptor]]:
    """Streams to prebuffer.

    *enabled_names* is the user's explicit selection, or ``None`` when the
    user never set one, in which case the default policy applies. Names
    that no longer match a stream are dropped.
    """
    if streams is None:
        return None

    if enabled_names is None:
        return get_default_prebuffered_streams(streams)

    enabled = set(enabled_names)
    return [s for s in streams if s.name in enabled]
