"""Runtime configuration loaded from the environment."""
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .constants import DEFAULT_HOST, DEFAULT_PORT, DEFAULT_LOG_LEVEL


@dataclass
class AppConfig:
    """
    Settings for the web server and storage backend.

    Attributes:
        host: Interface the Flask server binds to
        port: TCP port for the Flask server
        data_file: JSON file backing the match store (in-memory when None)
        log_level: Name of the root logging level
    """
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    data_file: Optional[str] = None
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        env = os.environ if environ is None else environ
        try:
            port = int(env.get("SIDELINE_PORT", DEFAULT_PORT))
        except ValueError:
            raise ValueError(f"SIDELINE_PORT must be an integer, got {env.get('SIDELINE_PORT')!r}")
        return cls(
            host=env.get("SIDELINE_HOST", DEFAULT_HOST),
            port=port,
            data_file=env.get("SIDELINE_DATA_FILE") or None,
            log_level=env.get("SIDELINE_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        )
