"""Actor owning one interactive codec subprocess per live connection.

The relay is the only reader and writer of its subprocess: inbound commands
arrive on a queue drained by a single stdin writer, and output lines are
classified and pushed onto an outbound queue in the order the process wrote
them. Nothing else touches the process handle.
"""

from __future__ import annotations

import asyncio
import logging
import contextlib
from collections.abc import Callable, AsyncIterator

from tonebridge.config.tools import CLI_NAME
from tonebridge.state.settings import ToolSettings
from tonebridge.state.session import Session, SessionState
from tonebridge.codec.tools import require_tool
from tonebridge.codec.process import spawn
from tonebridge.config.codec import TRUNCATED_LINE_MARKER
from tonebridge.state.events import RelayEvent, RelayEventKind
from tonebridge.codec.lines import classify_stderr_line, classify_stdout_line

logger = logging.getLogger(__name__)

# Upper bound for a single output line from the codec tool.
_STREAM_LIMIT_BYTES = 1024 * 1024

LineClassifier = Callable[[str], list[RelayEvent]]


class SessionRelay:
    def __init__(
        self,
        tools: ToolSettings,
        *,
        outbound_queue_max: int = 0,
        session: Session | None = None,
        line_limit: int = _STREAM_LIMIT_BYTES,
    ) -> None:
        self._tools = tools
        self._line_limit = line_limit
        self.session = session or Session()
        self._inbound: asyncio.Queue[str | None] = asyncio.Queue()
        # Each item is the full set of events derived from one output line so a
        # decoded event can never be separated from the line it came from.
        self._outbound: asyncio.Queue[tuple[RelayEvent, ...]] = asyncio.Queue(maxsize=max(0, outbound_queue_max))
        self._tasks: list[asyncio.Task] = []

    @property
    def session_id(self) -> str:
        return self.session.session_id

    @property
    def state(self) -> SessionState:
        return self.session.state

    def build_argv(self) -> list[str]:
        return [str(self._tools.cli), f"-t{self._tools.cli_protocol}"]

    async def start(self) -> None:
        if self.session.state is not SessionState.CONNECTING:
            raise RuntimeError(f"session {self.session_id} already started")
        try:
            require_tool(self._tools.cli, CLI_NAME)
            process = await spawn(
                self.build_argv(),
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                limit=self._line_limit,
            )
        except Exception:
            self.session.state = SessionState.CLOSED
            raise

        self.session.process = process
        self.session.state = SessionState.ACTIVE
        self._tasks = [
            asyncio.create_task(self._write_commands(process)),
            asyncio.create_task(self._supervise(process)),
        ]
        logger.info("session %s: %s started pid=%s", self.session_id, CLI_NAME, process.pid)

    def submit(self, text: str) -> bool:
        """Queue one line for the subprocess; False once the session is winding down."""
        if self.session.state is not SessionState.ACTIVE:
            return False
        self._inbound.put_nowait(text)
        return True

    async def events(self) -> AsyncIterator[RelayEvent]:
        while True:
            batch = await self._outbound.get()
            for event in batch:
                yield event
                if event.kind is RelayEventKind.CLOSED:
                    return

    async def close(self) -> None:
        if self.session.state is SessionState.CLOSED:
            return
        if self.session.state is not SessionState.CLOSING:
            self.session.state = SessionState.CLOSING

        process = self.session.process
        if process is not None:
            if process.returncode is None:
                logger.info("session %s: killing pid=%s", self.session_id, process.pid)
                with contextlib.suppress(ProcessLookupError):
                    process.kill()
            with contextlib.suppress(Exception):
                await process.wait()
            self.session.exit_code = process.returncode
            if process.stdin is not None:
                with contextlib.suppress(Exception):
                    process.stdin.close()

        self._inbound.put_nowait(None)
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []
        self.session.state = SessionState.CLOSED
        logger.info("session %s: closed exit_code=%s", self.session_id, self.session.exit_code)

    async def _write_commands(self, process: asyncio.subprocess.Process) -> None:
        stdin = process.stdin
        if stdin is None:
            return
        while True:
            text = await self._inbound.get()
            if text is None:
                return
            try:
                stdin.write(f"{text}\n".encode())
                await stdin.drain()
            except (BrokenPipeError, ConnectionResetError):
                logger.info("session %s: stdin closed by %s", self.session_id, CLI_NAME)
                return

    async def _read_lines(self, stream: asyncio.StreamReader | None, classify: LineClassifier) -> None:
        if stream is None:
            return
        while True:
            raw, truncated = await self._next_line(stream)
            if not raw:
                return
            line = raw.decode("utf-8", errors="replace").rstrip("\r\n")
            if truncated:
                logger.warning("session %s: output line cut at %d bytes", self.session_id, self._line_limit)
                line += TRUNCATED_LINE_MARKER
            await self._outbound.put(tuple(classify(line)))

    async def _next_line(self, stream: asyncio.StreamReader) -> tuple[bytes, bool]:
        """Read one line; an overlong line yields its first `line_limit` bytes."""
        try:
            return await stream.readuntil(b"\n"), False
        except asyncio.IncompleteReadError as exc:
            return exc.partial, False
        except asyncio.LimitOverrunError:
            pass

        head = await stream.read(self._line_limit)
        # Drop the remainder up to and including the newline.
        while True:
            try:
                await stream.readuntil(b"\n")
                return head, True
            except asyncio.IncompleteReadError:
                return head, True
            except asyncio.LimitOverrunError as exc:
                await stream.read(exc.consumed)

    async def _supervise(self, process: asyncio.subprocess.Process) -> None:
        readers = [
            asyncio.create_task(self._read_lines(process.stdout, classify_stdout_line)),
            asyncio.create_task(self._read_lines(process.stderr, classify_stderr_line)),
        ]
        try:
            await asyncio.gather(*readers)
            exit_code = await process.wait()
        finally:
            for reader in readers:
                reader.cancel()

        self.session.exit_code = exit_code
        if self.session.state is SessionState.ACTIVE:
            self.session.state = SessionState.CLOSING
        logger.info("session %s: %s exited with code %s", self.session_id, CLI_NAME, exit_code)
        await self._outbound.put((RelayEvent.closed(exit_code),))


__all__ = ["SessionRelay"]
