"""Tests for warbler.routing.loader — routes from JSON, TOML, and config data."""

import json
from pathlib import Path

import pytest

from warbler.errors import InvalidRoute
from warbler.routing.loader import RouteSpec, load_routes_file, register_routes, routes_from_config
from warbler.routing.table import RouteTable


class TestRoutesFromConfig:
    def test_mapping_keyed_by_name(self) -> None:
        specs = routes_from_config(
            {
                "home": {"url": "/", "handler": "Home"},
                "post": {"url": "/posts/{id}", "handler": "PostController", "method": "get"},
            }
        )
        assert [s.name for s in specs] == ["home", "post"]
        assert specs[1] == RouteSpec(name="post", pattern="/posts/{id}", handler="PostController", method="get")

    def test_list_with_names(self) -> None:
        specs = routes_from_config(
            [
                {"name": "b", "url": "/b", "handler": "B"},
                {"name": "a", "url": "/a", "handler": "A"},
            ]
        )
        assert [s.name for s in specs] == ["b", "a"]

    def test_pattern_alias_for_url(self) -> None:
        (spec,) = routes_from_config({"x": {"pattern": "/x", "handler": "X"}})
        assert spec.pattern == "/x"

    def test_extra_keys_become_options(self) -> None:
        (spec,) = routes_from_config(
            {"blog": {"url": "/blog", "handler": "Blog", "per_page": 5, "options": {"title": "News"}}}
        )
        assert spec.options == {"per_page": 5, "title": "News"}

    def test_security_list_becomes_tuple(self) -> None:
        (spec,) = routes_from_config({"admin": {"url": "/admin", "handler": "Admin", "security": ["admin", "root"]}})
        assert spec.security == ("admin", "root")

    def test_security_string_kept(self) -> None:
        (spec,) = routes_from_config({"admin": {"url": "/admin", "handler": "Admin", "security": "admin"}})
        assert spec.security == "admin"

    def test_missing_url(self) -> None:
        with pytest.raises(InvalidRoute, match="'home'.*'url'"):
            routes_from_config({"home": {"handler": "Home"}})

    def test_missing_handler(self) -> None:
        with pytest.raises(InvalidRoute, match="'handler'"):
            routes_from_config({"home": {"url": "/"}})

    def test_entry_not_mapping(self) -> None:
        with pytest.raises(InvalidRoute, match="'home'"):
            routes_from_config({"home": "/"})

    def test_list_entry_without_name(self) -> None:
        with pytest.raises(InvalidRoute, match="position 1"):
            routes_from_config([{"name": "a", "url": "/a", "handler": "A"}, {"url": "/b", "handler": "B"}])

    def test_nested_options_must_be_mapping(self) -> None:
        with pytest.raises(InvalidRoute, match="'options'"):
            routes_from_config({"x": {"url": "/x", "handler": "X", "options": [1, 2]}})

    def test_string_rejected(self) -> None:
        with pytest.raises(InvalidRoute):
            routes_from_config("/home")  # type: ignore[arg-type]


class TestLoadRoutesFile:
    def test_json(self, tmp_path: Path) -> None:
        path = tmp_path / "routes.json"
        path.write_text(json.dumps({"home": {"url": "/", "handler": "Home"}}))
        specs = load_routes_file(path)
        assert specs[0].handler == "Home"

    def test_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "routes.toml"
        path.write_text(
            '[routes.home]\nurl = "/"\nhandler = "Home"\n\n'
            '[routes.admin]\nurl = "/admin/{_action}"\nhandler = "Admin"\nsecurity = ["admin"]\n'
        )
        specs = load_routes_file(str(path))
        assert [s.name for s in specs] == ["home", "admin"]
        assert specs[1].security == ("admin",)

    def test_empty_path(self) -> None:
        with pytest.raises(InvalidRoute, match="Empty routes file"):
            load_routes_file("")

    def test_unsupported_suffix(self, tmp_path: Path) -> None:
        path = tmp_path / "routes.yaml"
        path.write_text("home: /")
        with pytest.raises(InvalidRoute, match="Only JSON and TOML"):
            load_routes_file(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(InvalidRoute, match="does not exist"):
            load_routes_file(tmp_path / "nope.json")

    def test_parse_error(self, tmp_path: Path) -> None:
        path = tmp_path / "routes.json"
        path.write_text("{not json")
        with pytest.raises(InvalidRoute, match="Could not parse"):
            load_routes_file(path)

    def test_empty_contents(self, tmp_path: Path) -> None:
        path = tmp_path / "routes.json"
        path.write_text("{}")
        with pytest.raises(InvalidRoute, match="does not define any routes"):
            load_routes_file(path)

    def test_toml_without_routes_key(self, tmp_path: Path) -> None:
        path = tmp_path / "routes.toml"
        path.write_text('[home]\nurl = "/"\nhandler = "Home"\n')
        with pytest.raises(InvalidRoute, match="does not define any routes"):
            load_routes_file(path)


class TestRegisterRoutes:
    def test_adds_in_order(self) -> None:
        table = RouteTable()
        register_routes(
            table,
            routes_from_config(
                {
                    "admin": {"url": "/admin/{_action}", "handler": "Admin", "security": ["admin"], "theme": "dark"},
                    "home": {"url": "/", "handler": "Home", "action": "index"},
                }
            ),
        )
        admin, home = table.routes
        assert admin.security == frozenset({"admin"})
        assert admin.options == {"theme": "dark"}
        assert home.action == "index"
