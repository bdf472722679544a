"""Switchyard command-line interface powered by Typer."""

import importlib
import sys
from pathlib import Path
from typing import Annotated

import typer

from switchyard.app import Router

app = typer.Typer(name="switchyard", add_completion=False, no_args_is_help=True)


# ------------------------------------------------------------------
# Target resolution
# ------------------------------------------------------------------


def _import_target(path: str) -> tuple[str, Router]:
    """Turn a CLI *path* argument into ``("module:var", router)``.

    Accepted forms:
    - ``module:var``   → imports ``module`` and reads ``var``
    - ``file.py``      → imports ``file``, scans for a Router instance
    """
    if ":" in path:
        module_name, _, var_name = path.partition(":")
        mod = _import_module(module_name)
        router = getattr(mod, var_name, None)
        if not isinstance(router, Router):
            typer.echo(f"Error: {path!r} is not a Router instance.", err=True)
            raise typer.Exit(1)
        return path, router

    # Treat as a Python file
    file = Path(path)
    if not file.exists():
        typer.echo(f"Error: file {path!r} not found.", err=True)
        raise typer.Exit(1)

    # Ensure the file's directory is on sys.path so we can import it.
    parent = str(file.resolve().parent)
    if parent not in sys.path:
        sys.path.insert(0, parent)

    module_name = file.stem
    mod = _import_module(module_name)

    var_name = _find_router_var(mod)
    if var_name is None:
        typer.echo(
            f"Error: no Router instance found in {path!r}. Provide an explicit target, e.g. main:router",
            err=True,
        )
        raise typer.Exit(1)

    return f"{module_name}:{var_name}", getattr(mod, var_name)


def _import_module(module_name: str) -> object:
    cwd = str(Path.cwd())
    if cwd not in sys.path:
        sys.path.insert(0, cwd)
    try:
        return importlib.import_module(module_name)
    except Exception as exc:
        typer.echo(f"Error importing {module_name!r}: {exc}", err=True)
        raise typer.Exit(1) from exc


def _find_router_var(mod: object) -> str | None:
    """Scan a module for a ``Router`` instance.

    Checks ``router`` and ``app`` first, then falls back to any attribute.
    """
    for name in ("router", "app"):
        if isinstance(getattr(mod, name, None), Router):
            return name

    for name in dir(mod):
        if name.startswith("_"):
            continue
        if isinstance(getattr(mod, name, None), Router):
            return name

    return None


# ------------------------------------------------------------------
# Commands
# ------------------------------------------------------------------


@app.command()
def dev(
    path: Annotated[str, typer.Argument(help="Python file or module:var target.")] = "main.py",
    host: Annotated[str, typer.Option(help="Bind address.")] = "127.0.0.1",
    port: Annotated[int, typer.Option(help="Bind port.")] = 8000,
    reload: Annotated[bool | None, typer.Option("--reload/--no-reload", help="Auto-reload on code changes.")] = None,
) -> None:
    """Start a development server with auto-reload and debug logging."""
    from switchyard._server import serve
    from switchyard.config import ServerConfig

    target, _router = _import_target(path)
    serve(target, ServerConfig.for_dev(host=host, port=port, reload=reload))


@app.command()
def run(
    path: Annotated[str, typer.Argument(help="Python file or module:var target.")] = "main.py",
    host: Annotated[str, typer.Option(help="Bind address.")] = "127.0.0.1",
    port: Annotated[int, typer.Option(help="Bind port.")] = 8000,
    workers: Annotated[int, typer.Option(help="Number of worker processes.")] = 1,
) -> None:
    """Start a production server."""
    from switchyard._server import serve
    from switchyard.config import ServerConfig

    target, _router = _import_target(path)
    serve(target, ServerConfig(host=host, port=port, workers=workers))


@app.command()
def routes(
    path: Annotated[str, typer.Argument(help="Python file or module:var target.")] = "main.py",
) -> None:
    """List registered routes in the order they are matched."""
    _target, router = _import_target(path)

    rows = [(route.method, route.path, _handler_name(route.endpoint)) for route in router.routes]
    if not rows:
        typer.echo("No routes registered.")
        return

    width_method = max(6, *(len(r[0]) for r in rows))
    width_path = max(4, *(len(r[1]) for r in rows))
    fmt = f"{{:<{width_method}}}  {{:<{width_path}}}  {{}}"
    typer.echo(fmt.format("METHOD", "PATH", "HANDLER"))
    for method, route_path, handler_name in rows:
        typer.echo(fmt.format(method, route_path, handler_name))


def _handler_name(handler: object) -> str:
    name = getattr(handler, "__name__", None)
    if name is None:
        name = type(handler).__name__
    return name
