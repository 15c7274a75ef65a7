"""Tests for warbler.cli — entrypoint, app resolution, ``routes`` and ``match``."""

import sys
import types

import pytest

from warbler.app import App
from warbler.cli import main
from warbler.cli._resolve import resolve_app
from warbler.cli._routes import format_routes


def _build_app() -> App:
    app = App()

    @app.route("/")
    def home():
        return "home"

    app.add_route("widgets", "/widgets/{_action}/{id}", "Widgets", method="get")
    app.add_route("admin", "/admin/*", "Admin", action="dashboard", security=["admin", "root"])
    return app


@pytest.fixture
def _fake_app_module(monkeypatch: pytest.MonkeyPatch) -> None:
    """Register a fake module with warbler apps on sys.modules."""
    mod = types.ModuleType("_fake_warbler_app")
    mod.app = _build_app()  # type: ignore[attr-defined]
    mod.empty = App()  # type: ignore[attr-defined]
    mod.create_app = _build_app  # type: ignore[attr-defined]
    mod.not_an_app = "just a string"  # type: ignore[attr-defined]
    monkeypatch.setitem(sys.modules, "_fake_warbler_app", mod)


class TestCLIHelp:
    def test_no_command_prints_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0
        assert "routes" in capsys.readouterr().out

    def test_help_exits_zero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])
        assert exc_info.value.code == 0

    def test_unknown_command(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["serve"])
        assert exc_info.value.code == 2


@pytest.mark.usefixtures("_fake_app_module")
class TestResolveApp:
    def test_default_attribute(self) -> None:
        assert isinstance(resolve_app("_fake_warbler_app"), App)

    def test_factory(self) -> None:
        app = resolve_app("_fake_warbler_app:create_app")
        assert [r.name for r in app.routes] == ["home", "widgets", "admin"]

    def test_missing_module(self) -> None:
        with pytest.raises(ModuleNotFoundError):
            resolve_app("nonexistent_module_xyz:app")

    def test_wrong_type(self) -> None:
        with pytest.raises(TypeError, match=r"not a warbler\.App instance"):
            resolve_app("_fake_warbler_app:not_an_app")


class TestFormatRoutes:
    def test_table(self) -> None:
        lines = format_routes(_build_app().routes).splitlines()

        assert lines[0].split() == ["NAME", "METHOD", "PATTERN", "HANDLER"]
        assert lines[2].split() == ["home", "ANY", "/", "home"]
        assert lines[3].split() == ["widgets", "GET", "/widgets/{_action}/{id}", "Widgets"]
        assert "Admin.dashboard  [admin, root]" in lines[4]

    def test_empty(self) -> None:
        assert format_routes([]).splitlines()[0].split() == ["NAME", "METHOD", "PATTERN", "HANDLER"]


@pytest.mark.usefixtures("_fake_app_module")
class TestRoutesCommand:
    def test_lists_routes(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["routes", "_fake_warbler_app:create_app"])
        out = capsys.readouterr().out
        assert "/widgets/{_action}/{id}" in out
        assert out.index("home") < out.index("widgets") < out.index("admin")

    def test_no_routes(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["routes", "_fake_warbler_app:empty"])
        assert capsys.readouterr().out.strip() == "No routes registered."

    def test_bad_import(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes", "_fake_warbler_app:not_an_app"])
        assert exc_info.value.code == 1
        assert "Error:" in capsys.readouterr().err


@pytest.mark.usefixtures("_fake_app_module")
class TestMatchCommand:
    def test_plugin_route(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["match", "_fake_warbler_app:create_app", "/widgets/edit/42"])
        out = capsys.readouterr().out

        assert "route:   widgets" in out
        assert "handler: Widgets" in out
        assert "action:  edit" in out
        assert "param:   id = '42'" in out

    def test_roles_shown(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["match", "_fake_warbler_app:create_app", "/admin/users"])
        out = capsys.readouterr().out

        assert "action:  dashboard" in out
        assert "roles:   admin, root" in out

    def test_callable_route(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["match", "_fake_warbler_app:create_app", "/"])
        assert "handler: home" in capsys.readouterr().out

    def test_method_filter(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["match", "_fake_warbler_app:create_app", "/widgets/edit/1", "--method", "post"])
        assert exc_info.value.code == 1
        assert "No route matches POST '/widgets/edit/1'" in capsys.readouterr().out

    def test_no_routes(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["match", "_fake_warbler_app:empty", "/"])
        assert exc_info.value.code == 1
        assert "No routes have been defined" in capsys.readouterr().err
