"""ZMQ bridge to a camera's stream listing.

:class:`StreamDeviceClient` asks a device for its stream options over a
REQ socket. :class:`MockStreamDevice` answers those requests from a fixed
list, for testing without a camera.

Usage:
    python3 -m stream_roles.device --streams streams.json
    python3 -m stream_roles.device --zmq-endpoint tcp://127.0.0.1:5560
"""

import argparse
import json
import signal
import threading
import time
import traceback
from typing import Any, Dict, List, Optional, Sequence

import zmq

from .models import StreamDescriptor, VideoInfo
from .protocol import (
    DEFAULT_TIMEOUT,
    DEFAULT_ZMQ_ENDPOINT,
    OP_LIST_STREAM_OPTIONS,
    PROTOCOL_VERSION,
)


def parse_stream_options(reply: Any) -> List[StreamDescriptor]:
    """Decode a ``list_stream_options`` reply.

    Raises
    ------
    RuntimeError
        If the device answered with an error.
    ValueError
        If the reply is malformed.
    """
    if not isinstance(reply, dict):
        raise ValueError(f"Reply must be an object, got {type(reply).__name__}")
    if not reply.get("ok"):
        raise RuntimeError(f"Device error: {reply.get('error', 'unknown error')}")

    streams = reply.get("streams")
    if not isinstance(streams, list):
        raise ValueError(f"Reply has no stream list: {reply!r}")
    return [StreamDescriptor.from_dict(s) for s in streams]


class StreamDeviceClient:
    """Queries a camera device for its stream options.

    Every call returns a fresh listing; nothing is cached.

    Parameters
    ----------
    zmq_endpoint : str
        Endpoint of the device's REP socket.
    timeout : float
        Seconds to wait for a reply.
    """

    def __init__(self, zmq_endpoint: str = DEFAULT_ZMQ_ENDPOINT,
                 timeout: float = DEFAULT_TIMEOUT):
        if timeout <= 0:
            raise ValueError("timeout must be positive")

        self._endpoint = zmq_endpoint
        self._timeout = timeout
        self._lock = threading.Lock()
        self._ctx = zmq.Context()
        self._socket: Optional[zmq.Socket] = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def list_stream_options(self) -> List[StreamDescriptor]:
        """Current stream options of the device.

        Raises
        ------
        RuntimeError
            On timeout or an error reply.
        ValueError
            On a malformed reply.
        """
        with self._lock:
            socket = self._connect()
            socket.send_json({"op": OP_LIST_STREAM_OPTIONS, "version": PROTOCOL_VERSION})

            poller = zmq.Poller()
            poller.register(socket, zmq.POLLIN)
            events = dict(poller.poll(timeout=int(self._timeout * 1000)))
            if socket not in events:
                # A REQ socket that missed its reply cannot send again
                self._disconnect()
                raise RuntimeError(
                    f"No reply from {self._endpoint} within {self._timeout}s"
                )

            try:
                reply = socket.recv_json()
            except ValueError:
                raise ValueError("Reply is not valid JSON") from None

        return parse_stream_options(reply)

    def close(self):
        with self._lock:
            self._disconnect()
        self._ctx.term()

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _connect(self) -> zmq.Socket:
        if self._socket is None:
            self._socket = self._ctx.socket(zmq.REQ)
            self._socket.setsockopt(zmq.LINGER, 0)
            self._socket.connect(self._endpoint)
        return self._socket

    def _disconnect(self):
        if self._socket is not None:
            self._socket.close()
            self._socket = None


class MockStreamDevice:
    """Serves a fixed stream listing over ZMQ: a stand-in for a camera.

    Usage::

        device = MockStreamDevice(streams, zmq_endpoint="tcp://127.0.0.1:5561")
        device.start()
        ...
        device.stop()
    """

    def __init__(self, streams: Sequence[StreamDescriptor],
                 zmq_endpoint: str = DEFAULT_ZMQ_ENDPOINT):
        self._streams = list(streams)
        self._endpoint = zmq_endpoint
        self._stop_event = threading.Event()
        self._ready = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._request_count = 0

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def start(self, timeout: float = 2.0):
        """Bind the socket on a background thread and wait until it is ready."""
        if self._thread is not None:
            raise RuntimeError("Device already started")

        self._thread = threading.Thread(
            target=self._serve_loop, args=(self._stop_event, self._ready), daemon=True)
        self._thread.start()
        if not self._ready.wait(timeout):
            self.stop()
            raise RuntimeError(f"Device failed to bind {self._endpoint}")

    def stop(self):
        """Stop the background serve thread. The device can be started again."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=2)
        self._thread = None
        self._stop_event = threading.Event()
        self._ready = threading.Event()

    def set_streams(self, streams: Sequence[StreamDescriptor]):
        """Replace the listing, as a camera adding or dropping variants would."""
        self._streams = list(streams)

    @property
    def request_count(self) -> int:
        return self._request_count

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def handle_request(self, request: Any) -> Dict[str, Any]:
        if not isinstance(request, dict):
            return {"ok": False, "error": "request must be an object"}
        version = request.get("version", PROTOCOL_VERSION)
        if version != PROTOCOL_VERSION:
            return {"ok": False, "error": f"unsupported protocol version: {version!r}"}
        op = request.get("op")
        if op == OP_LIST_STREAM_OPTIONS:
            return {"ok": True, "streams": [s.to_dict() for s in self._streams]}
        return {"ok": False, "error": f"unknown op: {op!r}"}

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, *exc):
        self.stop()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _serve_loop(self, stop_event: threading.Event, ready: threading.Event):
        ctx = zmq.Context()
        socket = ctx.socket(zmq.REP)
        socket.setsockopt(zmq.LINGER, 0)

        try:
            socket.bind(self._endpoint)
            ready.set()

            poller = zmq.Poller()
            poller.register(socket, zmq.POLLIN)

            while not stop_event.is_set():
                events = dict(poller.poll(timeout=100))
                if socket not in events:
                    continue

                try:
                    request = socket.recv_json()
                except ValueError:
                    socket.send_json({"ok": False, "error": "request is not valid JSON"})
                    continue

                reply = self.handle_request(request)
                self._request_count += 1
                socket.send_json(reply)
        except Exception as e:
            print(f"[mock-device] ERROR in serve thread: {e}", flush=True)
            traceback.print_exc()
        finally:
            socket.close()
            ctx.term()


DEMO_STREAMS = [
    StreamDescriptor("4k", source="local", container="rtsp",
                     video=VideoInfo(3840, 2160, "h264")),
    StreamDescriptor("1080p", source="local", container="rtsp",
                     video=VideoInfo(1920, 1080, "h264")),
    StreamDescriptor("720p", source="local", container="rtsp",
                     video=VideoInfo(1280, 720, "h264")),
    StreamDescriptor("360p", source="local", container="rtsp",
                     video=VideoInfo(640, 360, "h264")),
]


def load_streams(path: str) -> List[StreamDescriptor]:
    """Read a JSON array of stream descriptors."""
    with open(path) as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON array of streams")
    return [StreamDescriptor.from_dict(s) for s in data]


def main():
    parser = argparse.ArgumentParser(description="Mock camera serving stream options over ZMQ")
    parser.add_argument("--zmq-endpoint", default=DEFAULT_ZMQ_ENDPOINT)
    parser.add_argument("--streams", help="JSON file with the stream list (default: demo streams)")
    args = parser.parse_args()

    streams = load_streams(args.streams) if args.streams else DEMO_STREAMS
    device = MockStreamDevice(streams, zmq_endpoint=args.zmq_endpoint)
    device.start()
    print(f"[mock-device] Serving {len(streams)} streams on {args.zmq_endpoint}")
    for s in streams:
        print(f"[mock-device]   {s!r}")

    shutdown = False

    def handle_signal(sig, frame):
        nonlocal shutdown
        shutdown = True

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    while not shutdown and device.is_running:
        time.sleep(0.1)

    device.stop()
    print(f"[mock-device] Done. Answered {device.request_count} requests.")


if __name__ == "__main__":
    main()
