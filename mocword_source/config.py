"""Source configuration, optionally read from MOCWORD_* environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping

from mocword_source.exceptions import ConfigError

DEFAULT_COMMAND = "mocword"
DEFAULT_LIMIT = 100


@dataclass(frozen=True)
class SourceConfig:
    command: str = DEFAULT_COMMAND
    limit: int = DEFAULT_LIMIT
    timeout: float | None = None
    env: Mapping[str, str] | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if not self.command:
            raise ConfigError("command must not be empty")
        if self.limit < 1:
            raise ConfigError(f"limit must be positive, got {self.limit}")
        if self.timeout is not None and self.timeout <= 0:
            raise ConfigError(f"timeout must be positive, got {self.timeout}")

    def argv(self) -> list[str]:
        """Command line for the mocword process."""
        return [self.command, "--limit", str(self.limit)]

    def process_env(self) -> dict[str, str] | None:
        """Environment for the child, or None to inherit ours unchanged."""
        if not self.env:
            return None
        return {**os.environ, **self.env}

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> SourceConfig:
        """Build a config from MOCWORD_COMMAND, MOCWORD_LIMIT and MOCWORD_TIMEOUT.

        MOCWORD_DATA is left to the child process, which reads it itself.
        """
        environ = os.environ if environ is None else environ
        command = environ.get("MOCWORD_COMMAND") or DEFAULT_COMMAND
        limit = _parse(environ, "MOCWORD_LIMIT", int, DEFAULT_LIMIT)
        timeout = _parse(environ, "MOCWORD_TIMEOUT", float, None)
        return cls(command=command, limit=limit, timeout=timeout)


def _parse(environ: Mapping[str, str], name: str, convert, default):
    raw = environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return convert(raw)
    except ValueError as e:
        raise ConfigError(f"{name}={raw!r} is not a valid {convert.__name__}", cause=e)
