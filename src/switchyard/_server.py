import sys
from typing import Any

from switchyard.config import ServerConfig


def serve(
    target: str,
    config: ServerConfig | None = None,
    *,
    granian_kwargs: dict[str, Any] | None = None,
) -> None:
    """Start a Granian server for the given *target* import path.

    Parameters
    ----------
    target:
        ``"module:var"`` import path understood by Granian.
    config:
        Serving options. Defaults to ``ServerConfig()``.
    """
    from granian import Granian

    config = config or ServerConfig()

    _print_banner(target, config)

    kw: dict[str, Any] = granian_kwargs or {}
    server = Granian(
        target=target,
        address=config.host,
        port=config.port,
        interface="asgi",
        workers=config.workers,
        reload=config.reload,
        log_level=config.log_level,
        log_access=config.log_access,
        **kw,
    )
    server.serve()


# ------------------------------------------------------------------
# Startup banner
# ------------------------------------------------------------------

_CYAN = "\033[36m"
_GREEN = "\033[32m"
_BOLD = "\033[1m"
_RESET = "\033[0m"


def _print_banner(target: str, config: ServerConfig) -> None:
    color = sys.stdout.isatty()

    def c(code: str, text: str) -> str:
        return f"{code}{text}{_RESET}" if color else text

    mode = "development" if config.dev else "production"
    lines = [
        f"{c(_BOLD + _CYAN, 'Switchyard')}   Starting {mode} server",
        "",
        f"{c(_GREEN, 'router')}     {target}",
        f"{c(_GREEN, 'server')}     Granian on {config.url}",
        f"{c(_GREEN, 'workers')}    {config.workers}",
        f"{c(_GREEN, 'reload')}     {'enabled' if config.reload else 'disabled'}",
        "",
    ]
    print("\n".join(lines), flush=True)
