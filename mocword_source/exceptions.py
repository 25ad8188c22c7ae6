"""mocword-source exception hierarchy.

All exceptions inherit from MocwordError and support cause chaining.
None of them escape MocwordSource.gather: every failure there degrades
to an empty candidate list.
"""


class MocwordError(Exception):
    """Base exception for all mocword-source errors.

    Wraps original errors as __cause__ for proper exception chaining.
    """

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause


class ConfigError(MocwordError):
    """Raised when a configuration value is malformed.

    Examples: non-integer MOCWORD_LIMIT, negative timeout.
    """

    pass


class SpawnError(MocwordError):
    """Raised when the mocword process cannot be started."""

    def __init__(
        self,
        message: str,
        *,
        argv: list[str] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message, cause=cause)
        self.argv = list(argv or [])


class SessionUnavailableError(MocwordError):
    """Raised when the session has no usable process or pipes."""

    pass


class QueryWriteError(MocwordError):
    """Raised when writing a query line to the process fails."""

    def __init__(self, message: str, *, query: str = "", cause: Exception | None = None):
        super().__init__(message, cause=cause)
        self.query = query


class QueryReadError(MocwordError):
    """Raised when reading a response line fails.

    Examples: stdout closed (EOF), stream error, undecodable framing.
    """

    def __init__(self, message: str, *, eof: bool = False, cause: Exception | None = None):
        super().__init__(message, cause=cause)
        self.eof = eof
