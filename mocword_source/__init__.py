"""mocword-source: editor word completion backed by the mocword predictor."""

from mocword_source.config import SourceConfig
from mocword_source.exceptions import (
    ConfigError,
    MocwordError,
    QueryReadError,
    QueryWriteError,
    SessionUnavailableError,
    SpawnError,
)
from mocword_source.models import Candidate, InputContext
from mocword_source.session import ProcessSession, SessionState
from mocword_source.source import MocwordSource
from mocword_source.words import extract_words, split_words

__all__ = [
    # Core
    "MocwordSource",
    "ProcessSession",
    "SessionState",
    "SourceConfig",
    # Values
    "InputContext",
    "Candidate",
    # Tokenizer
    "extract_words",
    "split_words",
    # Exceptions
    "MocwordError",
    "ConfigError",
    "SpawnError",
    "SessionUnavailableError",
    "QueryWriteError",
    "QueryReadError",
]
