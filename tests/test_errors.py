"""Tests for warbler.errors — exception hierarchy."""

import pytest

from warbler.errors import (
    ConfigurationError,
    HandlerNotFound,
    HTTPError,
    InvalidHandler,
    InvalidRoute,
    NoRoutesConfigured,
    PluginError,
    RouteError,
    WarblerError,
)


class TestHierarchy:
    @pytest.mark.parametrize("cls", [InvalidRoute, InvalidHandler, NoRoutesConfigured])
    def test_route_errors_are_configuration_errors(self, cls: type) -> None:
        assert issubclass(cls, RouteError)
        assert issubclass(cls, ConfigurationError)
        assert issubclass(cls, WarblerError)

    @pytest.mark.parametrize("cls", [HandlerNotFound, PluginError, HTTPError])
    def test_runtime_errors_are_warbler_errors(self, cls: type) -> None:
        assert issubclass(cls, WarblerError)
        assert not issubclass(cls, ConfigurationError)


class TestNoRoutesConfigured:
    def test_default_message(self) -> None:
        assert str(NoRoutesConfigured()) == "No routes have been defined for the application."


class TestHandlerNotFound:
    def test_default_message(self) -> None:
        exc = HandlerNotFound("Blog", "plugins/Blog.py")
        assert exc.reference == "Blog"
        assert exc.path == "plugins/Blog.py"
        assert str(exc) == "Invalid source provided for plugin 'Blog'"

    def test_custom_detail(self) -> None:
        assert str(HandlerNotFound("Blog", detail="no class")) == "no class"


class TestHTTPError:
    def test_str_with_detail(self) -> None:
        assert str(HTTPError(404, "Post 7 not found")) == "404: Post 7 not found"

    def test_str_without_detail(self) -> None:
        assert str(HTTPError(410)) == "410"

    def test_raisable(self) -> None:
        with pytest.raises(HTTPError) as exc_info:
            raise HTTPError(status=403, detail="nope")
        assert exc_info.value.status == 403
