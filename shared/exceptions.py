"""Custom exceptions for the player."""


class TuneNoodleError(Exception):
    """Base exception for all player errors."""

    def __init__(self, message: str, details: str = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ConfigurationError(TuneNoodleError):
    """Raised when the configuration file or environment is unusable."""

    def __init__(self, message: str, parameter: str = None, details: str = None):
        super().__init__(message, details)
        self.parameter = parameter


class CatalogUnavailableError(TuneNoodleError):
    """Raised when the remote catalog cannot produce any playable track."""


class SigningError(TuneNoodleError):
    """Raised when a playback URL cannot be signed for a single object."""

    def __init__(self, message: str, key: str = None, details: str = None):
        super().__init__(message, details)
        self.key = key


class PlaybackRejected(TuneNoodleError):
    """Raised by a media element when a play request is refused."""

    def __init__(self, message: str, source: str = None, details: str = None):
        super().__init__(message, details)
        self.source = source
