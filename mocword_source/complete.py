"""prompt_toolkit completer backed by MocwordSource.

mocword is only reachable asynchronously, so completions come from
get_completions_async; the synchronous path yields nothing.
"""

from __future__ import annotations

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from mocword_source.models import InputContext
from mocword_source.source import MocwordSource


class MocwordCompleter(Completer):
    """Word prediction for the text before the cursor."""

    def __init__(self, source: MocwordSource) -> None:
        self._source = source

    def get_completions(self, document: Document, complete_event) -> list[Completion]:
        return []

    async def get_completions_async(self, document: Document, complete_event):
        line = document.current_line_before_cursor
        if not line.strip():
            return
        complete_str = document.get_word_before_cursor(WORD=True)
        candidates = await self._source.gather(InputContext(input=line), complete_str)
        for candidate in candidates:
            yield Completion(candidate.word, start_position=-len(complete_str))
