"""ProcessSession: the long-lived mocword process and its line-delimited pipes.

One query line in, one response line out, no request ids. Ordering is the
only correlation, so callers must serialize write_line/read_line pairs
(MocwordSource does this with a lock).

A read abandoned by cancellation or timeout leaves its response line
unread. The session counts queries written but not yet answered and drops
those stale lines before reading the next response, so line pairing
survives abandoned requests.
"""

from __future__ import annotations

import asyncio
import enum
import logging

from mocword_source.config import SourceConfig
from mocword_source.exceptions import (
    QueryReadError,
    QueryWriteError,
    SessionUnavailableError,
    SpawnError,
)

logger = logging.getLogger(__name__)
_stderr_logger = logging.getLogger(__name__ + ".stderr")

LOG_PREFIX = "[mocword-source]"

# Longest response line the pipe reader accepts before skipping it.
_STREAM_LIMIT = 1024 * 1024

# Seconds to wait for a clean exit after closing stdin before killing.
_CLOSE_GRACE = 1.0


class SessionState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    UNAVAILABLE = "unavailable"


def report_spawn_failure(err: SpawnError) -> None:
    """Three-line diagnostic for a mocword process that would not start."""
    command = err.argv[0] if err.argv else "mocword"
    logger.error('%s Run "%s" is failed: %s', LOG_PREFIX, command, err.__cause__ or err)
    logger.error('%s "%s" binary seems not installed.', LOG_PREFIX, command)
    logger.error("%s Or env MOCWORD_DATA is not set.", LOG_PREFIX)


class ProcessSession:
    """The mocword child process, spawned at most once.

    UNINITIALIZED -> READY on a successful start(), -> UNAVAILABLE on a
    failed one. UNAVAILABLE is terminal: the process is never re-spawned.
    """

    def __init__(self, config: SourceConfig | None = None) -> None:
        self.config = config or SourceConfig()
        self.state = SessionState.UNINITIALIZED
        self._process: asyncio.subprocess.Process | None = None
        self._stderr_task: asyncio.Task | None = None
        self._unanswered = 0

    @property
    def process(self) -> asyncio.subprocess.Process | None:
        return self._process

    @property
    def unanswered(self) -> int:
        """Queries written whose response line has not been read yet."""
        return self._unanswered

    @property
    def available(self) -> bool:
        """True if the process is running with both pipes open."""
        proc = self._process
        return (
            self.state is SessionState.READY
            and proc is not None
            and proc.stdin is not None
            and proc.stdout is not None
            and proc.returncode is None
        )

    async def start(self) -> SessionState:
        """Spawn the process. Only the first call does anything."""
        if self.state is not SessionState.UNINITIALIZED:
            return self.state
        try:
            self._process = await self._spawn()
        except SpawnError as err:
            self.state = SessionState.UNAVAILABLE
            report_spawn_failure(err)
            return self.state

        self.state = SessionState.READY
        logger.debug("spawned %s (pid %s)", " ".join(self.config.argv()), self._process.pid)
        if self._process.stderr is not None:
            self._stderr_task = asyncio.create_task(
                _drain_stderr(self._process.stderr), name="mocword:stderr"
            )
        return self.state

    async def _spawn(self) -> asyncio.subprocess.Process:
        argv = self.config.argv()
        try:
            return await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=self.config.process_env(),
                limit=_STREAM_LIMIT,
            )
        except (OSError, ValueError) as e:
            raise SpawnError(f"cannot run {argv[0]!r}", argv=argv, cause=e)

    def _require(self) -> asyncio.subprocess.Process:
        if not self.available:
            raise SessionUnavailableError(f"mocword session is {self.state.value}")
        return self._process

    async def write_line(self, query: str) -> None:
        """Send one query line. Embedded newlines are flattened to spaces."""
        proc = self._require()
        line = query.replace("\r", " ").replace("\n", " ")
        try:
            proc.stdin.write(line.encode("utf-8") + b"\n")
        except (OSError, RuntimeError) as e:
            raise QueryWriteError("failed to write query", query=query, cause=e)
        # Bytes are in the transport now; a response is owed even if drain fails.
        self._unanswered += 1
        try:
            await proc.stdin.drain()
        except (ConnectionError, OSError) as e:
            raise QueryWriteError("failed to flush query", query=query, cause=e)

    async def read_line(self) -> str:
        """Read the response to the most recent query, without its newline.

        A response longer than the stream limit is skipped through its
        newline and reported as QueryReadError; the next query still gets
        its own response.
        """
        proc = self._require()
        while self._unanswered > 1:
            stale = await self._next_line(proc.stdout)
            self._unanswered -= 1
            logger.debug("dropped stale response %r", stale)
        line = await self._next_line(proc.stdout)
        self._unanswered = max(self._unanswered - 1, 0)
        if line is None:
            raise QueryReadError("response line exceeds the stream limit")
        return line

    async def _next_line(self, stdout: asyncio.StreamReader) -> str | None:
        """One line without its newline, or None if it was too long and skipped.

        readuntil consumes nothing until it sees the newline, so cancelling
        it here leaves the framing intact. An over-long line is consumed up
        to and including its newline before returning.
        """
        try:
            raw = await stdout.readuntil(b"\n")
        except asyncio.IncompleteReadError as e:
            raw = e.partial
        except asyncio.LimitOverrunError as e:
            await _skip_line(stdout, e.consumed)
            return None
        except OSError as e:
            raise QueryReadError("failed to read response", cause=e)
        if not raw:
            self.state = SessionState.UNAVAILABLE
            returncode = self._process.returncode if self._process else None
            logger.warning(
                "%s mocword closed its output (exit status %s); check MOCWORD_DATA",
                LOG_PREFIX,
                returncode,
            )
            raise QueryReadError("mocword closed its output", eof=True)
        return raw.decode("utf-8", errors="replace").rstrip("\r\n")

    async def close(self) -> None:
        """Stop the process. The session is UNAVAILABLE afterwards."""
        self.state = SessionState.UNAVAILABLE
        proc = self._process
        if proc is not None and proc.returncode is None:
            if proc.stdin is not None:
                proc.stdin.close()
            try:
                await asyncio.wait_for(proc.wait(), timeout=_CLOSE_GRACE)
            except asyncio.TimeoutError:
                try:
                    proc.kill()
                except ProcessLookupError:
                    pass
                await proc.wait()
        if self._stderr_task is not None:
            self._stderr_task.cancel()
            try:
                await self._stderr_task
            except asyncio.CancelledError:
                pass
            self._stderr_task = None


async def _drain_stderr(stderr: asyncio.StreamReader) -> None:
    """Log the child's stderr so a full pipe never blocks it."""
    while True:
        try:
            raw = await stderr.readline()
        except ValueError:
            # Over-long line; readline already discarded it.
            continue
        if not raw:
            return
        _stderr_logger.debug("%s", raw.decode("utf-8", errors="replace").rstrip())


async def _skip_line(stdout: asyncio.StreamReader, buffered: int) -> None:
    """Discard the rest of an over-long line, through its newline."""
    while True:
        await stdout.readexactly(buffered)
        try:
            await stdout.readuntil(b"\n")
            return
        except asyncio.IncompleteReadError:
            return
        except asyncio.LimitOverrunError as e:
            buffered = e.consumed
