"""Meddle configuration.

MeddleConfig is a frozen dataclass — immutable after creation and passed
into the default middleware when a stack is assembled. Nothing reads a
process-wide mutable constant.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from meddle import __version__
from meddle.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class MeddleConfig:
    """Configuration for the default stack and the ASGI bridge.

    All fields have sensible defaults. Override what you need::

        config = MeddleConfig(static_root="./public", log_level="debug")
    """

    # Server header token: "<product>/<version>"
    version: str = __version__
    product: str = "Meddle"

    # File serving (disabled when None)
    static_root: str | Path | None = None

    # Logging
    log_requests: bool = True
    log_level: str = "info"

    def __post_init__(self) -> None:
        if self.log_level.upper() not in logging.getLevelNamesMapping():
            msg = f"Unknown log_level {self.log_level!r}, expected a logging level name"
            raise ConfigurationError(msg)
