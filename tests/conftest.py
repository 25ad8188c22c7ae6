"""Shared fixtures: a fake mocword executable and a recording fake process."""

from __future__ import annotations

import asyncio
import sys
import textwrap

import pytest

from mocword_source.config import SourceConfig

# Answers each query line with the query (spaces as '|') followed by "ok".
# A few magic queries exercise the edge cases.
FAKE_MOCWORD = textwrap.dedent(
    """
    import sys
    import time

    print("fake mocword", " ".join(sys.argv[1:]), file=sys.stderr, flush=True)
    for line in sys.stdin:
        query = line.rstrip("\\n")
        if query == "__argv__":
            print(" ".join(sys.argv[1:]), flush=True)
        elif query == "__empty__":
            print("", flush=True)
        elif query == "__slow__":
            time.sleep(0.5)
            print("late", flush=True)
        elif query == "__long__":
            print("w" * 100_000, flush=True)
        elif query == "__exit__":
            sys.exit(3)
        else:
            print(query.replace(" ", "|"), "ok", flush=True)
    """
)


@pytest.fixture
def fake_mocword(tmp_path):
    """Path to an executable fake mocword run by the current interpreter."""
    path = tmp_path / "mocword"
    path.write_text(f"#!{sys.executable}\n{FAKE_MOCWORD}")
    path.chmod(0o755)
    return path


@pytest.fixture
def fake_config(fake_mocword):
    return SourceConfig(command=str(fake_mocword))


class RecordingReader(asyncio.StreamReader):
    """StreamReader that logs every complete line it hands out."""

    def __init__(self, events: list) -> None:
        super().__init__()
        self.events = events

    async def readuntil(self, separator: bytes = b"\n") -> bytes:
        line = await super().readuntil(separator)
        self.events.append(("read", line.decode().rstrip("\n")))
        return line


class RecordingProcess:
    """Stand-in for asyncio.subprocess.Process with a scripted mocword.

    Each written query is answered with "<query>-a <query>-b" after delay
    seconds, unless answers maps it to another line (None: no answer).
    Writes and complete reads are recorded in order in events.
    """

    def __init__(self, delay: float = 0.01) -> None:
        self.events: list[tuple[str, str]] = []
        self.delay = delay
        self.pid = 4242
        self.returncode = None
        self.stdin = self
        self.stdout = RecordingReader(self.events)
        self.stderr = None
        self.closed = False
        self.answers: dict[str, str | None] = {}

    # stdin side
    def write(self, data: bytes) -> None:
        query = data.decode().rstrip("\n")
        self.events.append(("write", query))
        asyncio.get_running_loop().call_later(self.delay, self._answer, query)

    async def drain(self) -> None:
        await asyncio.sleep(0)

    def close(self) -> None:
        self.closed = True

    async def wait(self) -> int:
        self.returncode = 0
        return 0

    def kill(self) -> None:
        self.returncode = -9

    def _answer(self, query: str) -> None:
        response = self.answers.get(query, f"{query}-a {query}-b")
        if response is not None:
            self.stdout.feed_data(f"{response}\n".encode())


@pytest.fixture
async def recording_process():
    # StreamReader binds to the running loop, so build it inside one.
    return RecordingProcess()
