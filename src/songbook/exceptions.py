class SongbookError(Exception):
    """Base exception for songbook."""


class InvalidPitchText(SongbookError):
    """Raised when text does not name one of the twelve pitch classes."""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"Not a valid pitch: {text!r}")


class InvalidChordText(SongbookError):
    """Raised when a chord symbol's root is not a valid pitch."""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"Not a valid chord: {text!r}")


class FetchError(SongbookError):
    """Raised when an HTTP request to the song API fails."""

    def __init__(self, url: str, status_code: int):
        self.url = url
        self.status_code = status_code
        super().__init__(f"HTTP {status_code} fetching {url}")


class ConfigError(SongbookError):
    """Raised when a configuration file cannot be read."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Config error in {path}: {reason}")
