#!/usr/bin/env python3
"""Minimal example: resolve every stream role for a camera.

Prerequisites:
    1. A device serving stream options (or the mock:
       ``python3 -m stream_roles.device``)
    2. pip install stream-roles

Usage:
    python examples/resolve_streams.py
    python examples/resolve_streams.py --zmq-endpoint tcp://192.168.1.42:5560
    python examples/resolve_streams.py --set remoteStream=1080p --prebuffer 4k
"""

import argparse

from stream_roles import Role, StreamDeviceClient, StreamSettings
from stream_roles.protocol import DEFAULT_TIMEOUT, DEFAULT_ZMQ_ENDPOINT


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--zmq-endpoint", default=DEFAULT_ZMQ_ENDPOINT)
    parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT)
    parser.add_argument("--set", action="append", default=[], metavar="ROLE=STREAM",
                        help="Explicit stream choice for a role (repeatable)")
    parser.add_argument("--prebuffer", nargs="*", metavar="STREAM",
                        help="Streams to prebuffer (default: automatic)")
    args = parser.parse_args()

    settings = StreamSettings()
    for choice in args.set:
        role, _, name = choice.partition("=")
        if not name:
            parser.error(f"--set expects ROLE=STREAM, got {choice!r}")
        settings.storage_settings.put(Role(role).value, name)
    if args.prebuffer is not None:
        settings.storage_settings.put("enabledStreams", args.prebuffer)

    with StreamDeviceClient(args.zmq_endpoint, timeout=args.timeout) as device:
        try:
            streams = device.list_stream_options()
        except (RuntimeError, ValueError) as e:
            print(f"Could not query device: {e}")
            streams = []

    prebuffered = settings.get_prebuffered_streams(streams) or []
    print(f"Streams:     {', '.join(s.name for s in streams) or '(none)'}")
    print(f"Prebuffered: {', '.join(s.name for s in prebuffered) or '(none)'}\n")

    for role in Role:
        resolved = settings.get_media_stream(role, streams)
        name = resolved.stream.name if resolved.stream else "-"
        origin = "default" if resolved.is_default else "chosen"
        print(f"  {resolved.title:<36} {name:<12} ({origin})")


if __name__ == "__main__":
    main()
