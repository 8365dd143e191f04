"""Client and relay against the app served by uvicorn on a loopback port."""

from __future__ import annotations

import os
import socket
import asyncio
import contextlib
from collections.abc import AsyncIterator

import pytest
import uvicorn

from tonebridge.server import create_app
from tonebridge.client.api import CodecApiClient
from tonebridge.state.session import SessionState
from tonebridge.state.events import RelayEventKind
from tonebridge.client.session import RelaySessionClient
from tonebridge.client.controller import ClientRelayController


@contextlib.asynccontextmanager
async def running_server(app) -> AsyncIterator[str]:
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    server = uvicorn.Server(uvicorn.Config(app, lifespan="on", log_level="warning"))
    task = asyncio.create_task(server.serve(sockets=[sock]))
    try:
        for _ in range(200):
            if server.started or task.done():
                break
            await asyncio.sleep(0.02)
        assert server.started, "server did not start"
        yield f"http://127.0.0.1:{port}"
    finally:
        server.should_exit = True
        await asyncio.wait_for(task, timeout=10)
        sock.close()


async def _eventually(predicate, timeout: float = 5.0) -> bool:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while loop.time() < deadline:
        if predicate():
            return True
        await asyncio.sleep(0.02)
    return predicate()


def _pid_alive(pid: int) -> bool:
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    return True


class _RecordingPlayer:
    def __init__(self) -> None:
        self.played: list[bytes] = []

    async def __call__(self, data: bytes) -> None:
        self.played.append(data)


async def _decoded_messages(session: RelaySessionClient, count: int) -> list[str]:
    messages: list[str] = []
    async for event in session.events():
        if event.kind is RelayEventKind.DECODED:
            messages.append(event.data)
            if len(messages) >= count:
                break
        elif event.kind is RelayEventKind.CLOSED:
            break
    return messages


@pytest.mark.asyncio
async def test_script_over_live_session_decodes_in_order(app_settings) -> None:
    async with running_server(create_app(app_settings)) as base_url:
        session = RelaySessionClient(base_url)
        await session.connect()
        player = _RecordingPlayer()
        try:
            async with CodecApiClient(base_url) as api:
                controller = ClientRelayController(api, session=session, player=player, pause_s=0.0)
                assert await controller.play_script("hiiiiiii\nhellooooo") == 2
                messages = await asyncio.wait_for(_decoded_messages(session, 2), timeout=10)
        finally:
            await session.close()

    assert messages == ["hiiiiiii", "hellooooo"]
    assert player.played == []


@pytest.mark.asyncio
async def test_send_after_server_side_close_plays_locally(app_settings) -> None:
    async with running_server(create_app(app_settings)) as base_url:
        session = RelaySessionClient(base_url)
        await session.connect()
        player = _RecordingPlayer()
        try:
            await session.send("!exit 0")
            # Nothing iterates events(); the connection state alone must report the close.
            assert await _eventually(lambda: not session.is_open)
            async with CodecApiClient(base_url) as api:
                controller = ClientRelayController(api, session=session, player=player)
                await controller.send("hello")
        finally:
            await session.close()

    assert player.played == [b"FAKEWAV\nhello"]


@pytest.mark.asyncio
async def test_client_disconnect_reaps_cli_and_frees_slot(app_settings) -> None:
    app = create_app(app_settings)
    async with running_server(app) as base_url:
        sessions = app.state.runtime_deps.sessions
        session = RelaySessionClient(base_url)
        await session.connect()
        assert await _eventually(lambda: sessions.count() == 1)
        relay = sessions.snapshot()[0]
        assert await _eventually(lambda: relay.session.pid is not None)
        pid = relay.session.pid
        assert _pid_alive(pid)

        await session.close()

        assert await _eventually(lambda: sessions.count() == 0)
        assert relay.state is SessionState.CLOSED
        assert relay.session.process.returncode is not None
        assert await _eventually(lambda: not _pid_alive(pid))
