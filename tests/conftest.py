from __future__ import annotations

import os
import sys
import textwrap
from pathlib import Path

import pytest


def pytest_configure() -> None:
    # Keep `import tonebridge...` working when running `pytest` from the repo root.
    repo_root = Path(__file__).resolve().parents[1]
    repo_root_str = str(repo_root)
    if repo_root_str not in sys.path:
        sys.path.insert(0, repo_root_str)


# Loopback codec: "audio" is the marker line followed by the UTF-8 message.
FAKE_WAV_HEADER = b"FAKEWAV\n"
FAKE_WEBM_HEADER = b"FAKEWEBM\n"

_TO_FILE = """
import sys

out = next(arg[2:] for arg in sys.argv[1:] if arg.startswith("-f"))
message = sys.stdin.buffer.read()
if b"!fail" in message:
    sys.stderr.write("encoder refused the message\\n")
    sys.exit(2)
with open(out, "wb") as fh:
    fh.write(b"FAKEWAV\\n" + message)
"""

_FROM_FILE = """
import sys

with open(sys.argv[1], "rb") as fh:
    data = fh.read()
if not data:
    sys.stderr.write("empty input\\n")
    sys.exit(1)
if not data.startswith(b"FAKEWAV\\n"):
    print("Failed to read input file")
    sys.exit(1)
message = data[len(b"FAKEWAV\\n"):].decode("utf-8")
if message:
    print(f"Decoded message with length {len(message)}: '{message}'")
else:
    print("No message decoded")
"""

_FFMPEG = """
import sys

args = sys.argv[1:]
source = args[args.index("-i") + 1]
target = args[-1]
with open(source, "rb") as fh:
    data = fh.read()
if not data.startswith(b"FAKEWEBM\\n"):
    sys.stderr.write("Invalid data found when processing input\\n")
    sys.exit(1)
with open(target, "wb") as fh:
    fh.write(b"FAKEWAV\\n" + data[len(b"FAKEWEBM\\n"):])
"""

_CLI = """
import sys

sys.stderr.write("Listening for incoming messages\\n")
sys.stderr.flush()
while True:
    line = sys.stdin.readline()
    if not line:
        break
    text = line.rstrip("\\n")
    if text.startswith("!exit "):
        sys.exit(int(text.split()[1]))
    if text.startswith("!long "):
        print("x" * int(text.split()[1]) + "TAIL", flush=True)
        continue
    print(f"Decoded message with length {len(text)}: '{text}'", flush=True)
"""

_BROKEN = """
import sys

sys.exit(1)
"""


def _write_script(path: Path, body: str) -> Path:
    path.write_text(f"#!{sys.executable}\n" + textwrap.dedent(body).lstrip(), encoding="utf-8")
    os.chmod(path, 0o755)
    return path


@pytest.fixture
def codec_bin(tmp_path: Path) -> Path:
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    _write_script(bin_dir / "ggwave-to-file", _TO_FILE)
    _write_script(bin_dir / "ggwave-from-file", _FROM_FILE)
    _write_script(bin_dir / "ggwave-cli", _CLI)
    _write_script(bin_dir / "ffmpeg", _FFMPEG)
    _write_script(bin_dir / "broken-decoder", _BROKEN)
    return bin_dir


@pytest.fixture
def workspace_root(tmp_path: Path) -> Path:
    root = tmp_path / "work"
    root.mkdir()
    return root


@pytest.fixture
def tools(codec_bin: Path, workspace_root: Path):
    from tonebridge.state.settings import ToolSettings

    return ToolSettings(
        to_file=codec_bin / "ggwave-to-file",
        from_file=codec_bin / "ggwave-from-file",
        cli=codec_bin / "ggwave-cli",
        ffmpeg=str(codec_bin / "ffmpeg"),
        cli_protocol=1,
        workspace_dir=workspace_root,
    )


@pytest.fixture
def conversion():
    from tonebridge.state.settings import ConversionSettings

    return ConversionSettings(sample_rate=48000, channels=1)


@pytest.fixture
def app_settings(tools, conversion):
    from tonebridge.state.settings import (
        AppSettings,
        LimitsSettings,
        ServerSettings,
        WebSocketSettings,
    )

    return AppSettings(
        tools=tools,
        conversion=conversion,
        server=ServerSettings(host="127.0.0.1", port=5055, cors_origins=("*",)),
        websocket=WebSocketSettings(endpoint_path="/ws/cli", outbound_queue_max=0),
        limits=LimitsSettings(max_concurrent_sessions=4),
    )
