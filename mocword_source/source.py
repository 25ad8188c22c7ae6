"""MocwordSource: completion candidates from a shared mocword process.

    source = MocwordSource()
    async with source:
        await source.gather(InputContext(input="I have a pe"), "pe")

Every request takes the source's lock for its whole write+read exchange,
so concurrent requests never interleave on the pipe. Failures of any kind
degrade to an empty candidate list for that request.
"""

from __future__ import annotations

import asyncio
import logging

from mocword_source.config import SourceConfig
from mocword_source.exceptions import MocwordError
from mocword_source.models import Candidate, InputContext
from mocword_source.session import ProcessSession, SessionState
from mocword_source.words import extract_words

logger = logging.getLogger(__name__)


class MocwordSource:
    """Completion source owning one ProcessSession for its whole lifetime."""

    def __init__(
        self,
        config: SourceConfig | None = None,
        *,
        session: ProcessSession | None = None,
    ) -> None:
        self.session = session or ProcessSession(config)
        self.config = self.session.config
        self._lock = asyncio.Lock()

    @property
    def state(self) -> SessionState:
        return self.session.state

    async def start(self) -> SessionState:
        """Spawn mocword now instead of on the first gather()."""
        async with self._lock:
            return await self.session.start()

    async def close(self) -> None:
        await self.session.close()

    async def __aenter__(self) -> MocwordSource:
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def gather(self, context: InputContext, complete_str: str) -> list[Candidate]:
        """Candidates for complete_str, in the order mocword returned them."""
        if self.session.state is SessionState.UNAVAILABLE:
            return []

        async with self._lock:
            if self.session.state is SessionState.UNINITIALIZED:
                await self.session.start()
            if not self.session.available:
                return []
            try:
                return await self._gather(context, complete_str)
            except asyncio.TimeoutError:
                logger.warning(
                    "no response from mocword within %ss for %r",
                    self.config.timeout,
                    complete_str,
                )
            except MocwordError as e:
                logger.warning("mocword query failed: %s", e)
        return []

    async def _gather(self, context: InputContext, complete_str: str) -> list[Candidate]:
        sentence, offset = extract_words(complete_str)
        # offset 0 means no word boundary was found (including a lone
        # lowercase word): send the whole input instead.
        query = sentence if offset > 0 else context.input
        preceding_letters = complete_str[:offset]

        line = await self._exchange(query)
        return [Candidate(word=preceding_letters + word) for word in line.split()]

    async def _exchange(self, query: str) -> str:
        exchange = self._write_then_read(query)
        if self.config.timeout is None:
            return await exchange
        return await asyncio.wait_for(exchange, timeout=self.config.timeout)

    async def _write_then_read(self, query: str) -> str:
        await self.session.write_line(query)
        line = await self.session.read_line()
        logger.debug("query %r -> %r", query, line)
        return line
