"""mocword-source CLI - word prediction completion backed by mocword.

Commands:
    mocword-source tokenize <text>   Show the query sentence and split offset
    mocword-source query <text>      Print candidates for one completion request
    mocword-source repl              Interactive prompt with mocword completion
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from mocword_source.config import SourceConfig
from mocword_source.exceptions import ConfigError
from mocword_source.logs import enable_debug
from mocword_source.models import InputContext
from mocword_source.session import SessionState
from mocword_source.source import MocwordSource
from mocword_source.words import extract_words

app = typer.Typer(
    name="mocword-source",
    help="Word prediction completion backed by mocword",
    no_args_is_help=True,
)


def _load_config(
    command: Optional[str], limit: Optional[int], timeout: Optional[float]
) -> SourceConfig:
    """Environment config with command-line overrides applied on top."""
    try:
        config = SourceConfig.from_env()
        return SourceConfig(
            command=command or config.command,
            limit=limit if limit is not None else config.limit,
            timeout=timeout if timeout is not None else config.timeout,
        )
    except ConfigError as e:
        raise typer.BadParameter(str(e))


@app.command("tokenize")
def tokenize_cmd(
    text: Annotated[str, typer.Argument(help="Text before the cursor")],
):
    """Show how TEXT is split into a query sentence and offset.

    Examples:
        mocword-source tokenize camelCaseInp
        mocword-source tokenize _unfinished_input_
    """
    sentence, offset = extract_words(text)
    typer.echo(f"sentence: {sentence!r}")
    typer.echo(f"offset:   {offset}")
    typer.echo(f"kept:     {text[:offset]!r}")


@app.command("query")
def query_cmd(
    text: Annotated[str, typer.Argument(help="Word being completed")],
    input_line: Annotated[
        Optional[str],
        typer.Option("--input", "-i", help="Full line before the cursor (defaults to TEXT)"),
    ] = None,
    command: Annotated[
        Optional[str], typer.Option("--command", "-c", help="mocword executable")
    ] = None,
    limit: Annotated[
        Optional[int], typer.Option("--limit", "-l", help="Maximum predictions")
    ] = None,
    timeout: Annotated[
        Optional[float], typer.Option("--timeout", "-t", help="Seconds to wait for mocword")
    ] = None,
):
    """Print completion candidates for TEXT, one per line.

    Examples:
        mocword-source query pe -i "I have a pe"
        mocword-source query _snake_case_in
    """
    config = _load_config(command, limit, timeout)
    context = InputContext(input=text if input_line is None else input_line)
    logging.basicConfig(level=logging.WARNING, format="%(message)s")

    async def run() -> tuple[SessionState, list]:
        async with MocwordSource(config) as source:
            candidates = await source.gather(context, text)
            return source.state, candidates

    state, candidates = asyncio.run(run())
    if state is SessionState.UNAVAILABLE and not candidates:
        typer.echo(f"Error: {config.command} is not available.", err=True)
        raise typer.Exit(1)
    for candidate in candidates:
        typer.echo(candidate.word)


@app.command("repl")
def repl_cmd(
    command: Annotated[
        Optional[str], typer.Option("--command", "-c", help="mocword executable")
    ] = None,
    limit: Annotated[
        Optional[int], typer.Option("--limit", "-l", help="Maximum predictions")
    ] = None,
    timeout: Annotated[
        Optional[float], typer.Option("--timeout", "-t", help="Seconds to wait for mocword")
    ] = None,
    debug: Annotated[
        bool, typer.Option("--debug", help="Log protocol traffic to .mocword/debug.log")
    ] = False,
    log_dir: Annotated[
        Optional[Path], typer.Option("--log-dir", help="Directory for debug.log")
    ] = None,
):
    """Type text with mocword completions as you go. Ctrl-D exits."""
    config = _load_config(command, limit, timeout)
    if debug:
        enable_debug(log_dir)
    else:
        logging.basicConfig(level=logging.WARNING, format="%(message)s")
    asyncio.run(_repl(config))


async def _repl(config: SourceConfig) -> None:
    from prompt_toolkit import PromptSession
    from prompt_toolkit.patch_stdout import patch_stdout

    from mocword_source.complete import MocwordCompleter

    async with MocwordSource(config) as source:
        if source.state is SessionState.UNAVAILABLE:
            typer.echo(f"Error: {config.command} is not available.", err=True)
            raise typer.Exit(1)
        session = PromptSession(
            completer=MocwordCompleter(source),
            complete_while_typing=True,
        )
        with patch_stdout():
            while True:
                try:
                    text = await session.prompt_async("> ")
                except KeyboardInterrupt:
                    continue
                except EOFError:
                    break
                typer.echo(text)


def main():
    app()


if __name__ == "__main__":
    main()
