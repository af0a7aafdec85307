"""Configuration for the songbook CLI and API client.

Settings are read from a TOML file, located at (first match):

- ``$SONGBOOK_CONFIG``
- ``$XDG_CONFIG_HOME/songbook/config.toml``
- ``~/.config/songbook/config.toml``

Example::

    [api]
    url = "https://example.org/api"
    timeout = 10

    [display]
    prefer_flats = true

``SONGBOOK_API_URL`` overrides ``api.url``.  A missing file means defaults.
"""

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path

from .exceptions import ConfigError

DEFAULT_API_URL = "http://localhost:8080/api"


def get_config_path() -> Path:
    """Return the config file path for the current environment."""
    explicit = os.environ.get("SONGBOOK_CONFIG")
    if explicit:
        return Path(explicit)
    base = os.environ.get("XDG_CONFIG_HOME")
    config_home = Path(base) if base else Path.home() / ".config"
    return config_home / "songbook" / "config.toml"


@dataclass
class Settings:
    """Settings shared by the CLI and :class:`~songbook.client.SongApiClient`.

    Attributes:
        api_url: Base URL of the song API (no trailing slash)
        timeout: HTTP timeout in seconds
        prefer_flats: Spelling for transposed chords; None derives it from the key
    """

    api_url: str = DEFAULT_API_URL
    timeout: float = 15.0
    prefer_flats: bool | None = None

    @classmethod
    def load(cls, path: Path | None = None) -> "Settings":
        """Load settings from *path* (default: :func:`get_config_path`).

        Raises:
            ConfigError: If the file exists but is not valid TOML or has
                values of the wrong type.
        """
        if path is None:
            path = get_config_path()

        config = cls()

        if path.exists():
            try:
                with open(path, "rb") as f:
                    data = tomllib.load(f)
            except tomllib.TOMLDecodeError as exc:
                raise ConfigError(str(path), str(exc)) from exc

            api = data.get("api", {})
            display = data.get("display", {})
            if not isinstance(api, dict):
                raise ConfigError(str(path), "[api] must be a table")
            if not isinstance(display, dict):
                raise ConfigError(str(path), "[display] must be a table")
            config.api_url = api.get("url", config.api_url)
            if not isinstance(config.api_url, str):
                raise ConfigError(str(path), "api.url must be a string")
            config.prefer_flats = display.get("prefer_flats", config.prefer_flats)
            try:
                config.timeout = float(api.get("timeout", config.timeout))
            except (TypeError, ValueError) as exc:
                raise ConfigError(str(path), f"api.timeout must be a number: {exc}") from exc
            if config.prefer_flats is not None and not isinstance(config.prefer_flats, bool):
                raise ConfigError(str(path), "display.prefer_flats must be true or false")

        env_url = os.environ.get("SONGBOOK_API_URL")
        if env_url:
            config.api_url = env_url

        config.api_url = config.api_url.rstrip("/")
        return config
