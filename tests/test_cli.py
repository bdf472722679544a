"""Tests for the CLI and serving configuration."""

from __future__ import annotations

import textwrap
import uuid
from pathlib import Path

import pytest
from typer.testing import CliRunner

from switchyard import Router
from switchyard.cli import app
from switchyard.config import ServerConfig

runner = CliRunner()


def _write_app(tmp_path: Path) -> Path:
    # Unique module name so repeated imports across tests do not collide.
    module = tmp_path / f"routes_{uuid.uuid4().hex}.py"
    module.write_text(
        textwrap.dedent(
            """
            from switchyard import Router

            router = Router()


            @router.get(r"/people/(?P<id>[0-9]+)")
            async def get_person(writer, request):
                pass


            @router.post("/people")
            def create_person(writer, request):
                pass
            """
        )
    )
    return module


@pytest.fixture
def served(monkeypatch: pytest.MonkeyPatch) -> list[tuple[str, ServerConfig]]:
    calls: list[tuple[str, ServerConfig]] = []

    def fake_serve(target: str, config: ServerConfig | None = None, **kwargs: object) -> None:
        calls.append((target, config))

    monkeypatch.setattr("switchyard._server.serve", fake_serve)
    return calls


# =====================================================================
# routes
# =====================================================================


def test_routes_lists_in_registration_order(tmp_path: Path) -> None:
    result = runner.invoke(app, ["routes", str(_write_app(tmp_path))])
    assert result.exit_code == 0, result.output
    lines = result.output.strip().splitlines()
    assert lines[0].split() == ["METHOD", "PATH", "HANDLER"]
    assert lines[1].split() == ["GET", "/people/(?P<id>[0-9]+)", "get_person"]
    assert lines[2].split() == ["POST", "/people", "create_person"]


def test_routes_missing_file() -> None:
    result = runner.invoke(app, ["routes", "does_not_exist.py"])
    assert result.exit_code == 1


def test_routes_module_target(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    module = _write_app(tmp_path)
    monkeypatch.syspath_prepend(str(tmp_path))
    result = runner.invoke(app, ["routes", f"{module.stem}:router"])
    assert result.exit_code == 0, result.output
    assert "create_person" in result.output


def test_routes_target_is_not_a_router(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    module = _write_app(tmp_path)
    monkeypatch.syspath_prepend(str(tmp_path))
    result = runner.invoke(app, ["routes", f"{module.stem}:Router"])
    assert result.exit_code == 1
    assert "is not a Router instance" in result.output


def test_routes_empty_router(tmp_path: Path) -> None:
    module = tmp_path / f"empty_{uuid.uuid4().hex}.py"
    module.write_text("from switchyard import Router\n\nrouter = Router()\n")
    result = runner.invoke(app, ["routes", str(module)])
    assert result.exit_code == 0
    assert "No routes registered." in result.output


# =====================================================================
# run / dev
# =====================================================================


def test_run_resolves_file_target(tmp_path: Path, served: list) -> None:
    module = _write_app(tmp_path)
    result = runner.invoke(app, ["run", str(module), "--port", "9000", "--workers", "2"])
    assert result.exit_code == 0, result.output
    target, config = served[0]
    assert target == f"{module.stem}:router"
    assert config == ServerConfig(port=9000, workers=2)


def test_dev_uses_dev_defaults(tmp_path: Path, served: list) -> None:
    module = _write_app(tmp_path)
    result = runner.invoke(app, ["dev", str(module), "--no-reload"])
    assert result.exit_code == 0, result.output
    _target, config = served[0]
    assert config.dev is True
    assert config.reload is False
    assert config.log_level == "debug"
    assert config.log_access is True


# =====================================================================
# ServerConfig
# =====================================================================


def test_server_config_defaults() -> None:
    config = ServerConfig()
    assert config.url == "http://127.0.0.1:8000"
    assert config.reload is False
    assert config.dev is False


def test_server_config_for_dev() -> None:
    config = ServerConfig.for_dev(port=3000)
    assert config.port == 3000
    assert config.reload is True
    assert config.log_level == "debug"


def test_server_config_is_frozen() -> None:
    with pytest.raises(AttributeError):
        ServerConfig().port = 1  # type: ignore[misc]


def test_router_is_found_by_type() -> None:
    from switchyard.cli import _find_router_var

    class Module:
        api = Router()

    assert _find_router_var(Module) == "api"
