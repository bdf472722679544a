"""Serving configuration.

ServerConfig is a frozen dataclass, immutable after creation::

    config = ServerConfig(port=3000, workers=4)
    dev_config = ServerConfig.for_dev(port=3000)
"""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """Options handed to Granian when serving a Router."""

    host: str = "127.0.0.1"
    port: int = 8000
    workers: int = 1
    log_level: str = "info"
    log_access: bool = False
    reload: bool = False
    dev: bool = False

    @classmethod
    def for_dev(cls, *, reload: bool | None = None, **overrides: object) -> ServerConfig:
        """Development defaults: reload, debug logging and access logs.

        *reload* set to ``None`` keeps reloading on.
        """
        config = cls(**overrides)  # type: ignore[arg-type]
        return replace(
            config,
            dev=True,
            reload=True if reload is None else reload,
            log_level="debug",
            log_access=True,
        )

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}"
