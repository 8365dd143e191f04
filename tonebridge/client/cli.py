"""`tonebridge-client`: talk to a tonebridge server from the terminal.

Examples:
    tonebridge-client health
    tonebridge-client send "hello there"
    tonebridge-client send --relay "hello there"
    tonebridge-client script conversation.txt
    tonebridge-client decode message.wav
    tonebridge-client listen --duration 30
"""

from __future__ import annotations

import sys
import json
import asyncio
import argparse
import contextlib
from pathlib import Path

from tonebridge.errors import ApiError
from tonebridge.runtime.logging import configure_logging
from tonebridge.runtime.settings_loader import load_client_settings, load_capture_settings

from .api import CodecApiClient
from .capture import CaptureSource
from .session import RelaySessionClient
from .controller import ClientRelayController


def _print_message(message: str) -> None:
    print(f"< {message}", flush=True)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    settings = load_client_settings()
    parser = argparse.ArgumentParser(prog="tonebridge-client", description="ggwave data-over-sound client")
    parser.add_argument("--server", default=settings.server, help=f"Server base URL (default: {settings.server})")
    parser.add_argument("--timeout", type=float, default=settings.timeout_s, help="HTTP timeout in seconds")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("health", help="Show which codec tools the server can run")

    send = sub.add_parser("send", help="Send one message")
    send.add_argument("text")
    send.add_argument("--relay", action="store_true", help="Send through a live relay session")
    send.add_argument("--wait", type=float, default=3.0, help="Seconds to print relay output after sending")

    script = sub.add_parser("script", help="Send each line of a file in order")
    script.add_argument("path", type=Path)
    script.add_argument("--relay", action="store_true", help="Send through a live relay session")
    script.add_argument("--pause", type=float, default=settings.script_pause_s, help="Seconds between lines")
    script.add_argument("--wait", type=float, default=3.0, help="Seconds to print relay output after the script")

    decode = sub.add_parser("decode", help="Decode a WAV file")
    decode.add_argument("path", type=Path)

    listen = sub.add_parser("listen", help="Decode the microphone in chunks")
    listen.add_argument("--duration", type=float, default=None, help="Stop after this many seconds")

    return parser.parse_args(argv)


async def _follow_for(controller: ClientRelayController, seconds: float) -> None:
    with contextlib.suppress(asyncio.TimeoutError):
        await asyncio.wait_for(controller.follow_session(), timeout=seconds)


async def _run_send(api: CodecApiClient, args: argparse.Namespace, lines: str, pause_s: float) -> int:
    session = RelaySessionClient(args.server) if args.relay else None
    if session is not None:
        await session.connect()
    controller = ClientRelayController(api, session=session, pause_s=pause_s, on_message=_print_message)
    try:
        sent = await controller.play_script(lines)
        print(f"sent {sent} message(s)", flush=True)
        if session is not None:
            await _follow_for(controller, args.wait)
    finally:
        if session is not None:
            await session.close()
    return 0


async def _run_listen(api: CodecApiClient, args: argparse.Namespace) -> int:
    controller = ClientRelayController(api, on_message=_print_message)
    async with CaptureSource(load_capture_settings()) as capture:
        listener = asyncio.create_task(controller.listen(capture))
        try:
            if args.duration is None:
                await listener
            else:
                await asyncio.sleep(args.duration)
        finally:
            await capture.stop()
            heard = await listener
    print(f"heard {heard} message(s)", flush=True)
    return 0


async def _run(args: argparse.Namespace) -> int:
    async with CodecApiClient(args.server, timeout=args.timeout) as api:
        if args.command == "health":
            print(json.dumps(await api.health(), indent=2))
            return 0
        if args.command == "send":
            return await _run_send(api, args, args.text, 0.0)
        if args.command == "script":
            text = await asyncio.to_thread(args.path.read_text, encoding="utf-8")
            return await _run_send(api, args, text, args.pause)
        if args.command == "decode":
            controller = ClientRelayController(api)
            print(await controller.decode_file(args.path))
            return 0
        if args.command == "listen":
            return await _run_listen(api, args)
    return 2


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    args = _parse_args(argv)
    try:
        return asyncio.run(_run(args))
    except ApiError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
