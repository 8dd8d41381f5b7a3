# file: logsynth/core/errors.py


class LogSynthError(Exception):
    """Base class for every error raised by logsynth."""


class ConfigurationError(LogSynthError, ValueError):
    """Invalid construction parameters. Raised once, at construction time."""


class InvalidParameterError(ConfigurationError):
    """A sampler parameter (universe size, skew, weights) is out of range."""


class EventFormatError(LogSynthError, ValueError):
    """A log line could not be parsed into an Event."""

    def __init__(self, line: str, reason: str = "") -> None:
        self.line = line
        self.reason = reason
        message = f'Invalid event format found: "{line}"'
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


EventFormatException = EventFormatError


class StreamFault(LogSynthError, IOError):
    """The underlying character stream failed for reasons unrelated to content."""
