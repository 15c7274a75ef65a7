"""Application configuration.

AppConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.

``load_config()`` builds one from a JSON or TOML file holding an ``all``
section shared by every environment plus one section per environment::

    {
        "all": {"plugin_dir": "plugins", "routes_file": "routes.json"},
        "dev": {"debug": true},
        "prod": {"template_dir": "/srv/site/templates"}
    }
"""

import dataclasses
import json
import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from warbler.errors import ConfigurationError

logger = logging.getLogger("warbler.config")


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(debug=True, plugin_dir="controllers")
    """

    debug: bool = False

    # Plugins (string handler references)
    plugin_dir: str | Path = "plugins"
    plugin_extension: str = ".py"
    default_action: str = "_default"

    # Routes loaded at freeze time
    routes_file: str | Path | None = None

    # Templates
    template_dir: str | Path = "templates"
    autoescape: bool = True

    # Status returned when a route's security check fails
    forbidden_status: int = 503


def _read_file(path: Path) -> Any:
    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")
    try:
        if suffix == ".json":
            return json.loads(text)
        if suffix == ".toml":
            return tomllib.loads(text)
    except (json.JSONDecodeError, tomllib.TOMLDecodeError) as exc:
        msg = f"Could not parse config file {str(path)!r}: {exc}"
        raise ConfigurationError(msg) from exc
    msg = f"Unsupported config file type {suffix!r}. Use .json or .toml."
    raise ConfigurationError(msg)


def load_config(path: str | Path, env: str = "dev") -> AppConfig:
    """Load an ``AppConfig`` from *path* for environment *env*.

    Keys from the ``env`` section override those from ``all``. Keys that
    are not ``AppConfig`` fields are ignored with a warning.

    Raises ``ConfigurationError`` if the file is missing, cannot be
    parsed, or has neither an ``all`` nor an *env* section.
    """
    path = Path(path)
    if not path.is_file():
        msg = f"Config file {str(path)!r} does not exist."
        raise ConfigurationError(msg)

    data = _read_file(path)
    if not isinstance(data, dict) or not data:
        msg = f"Config file {str(path)!r} is empty or not a mapping."
        raise ConfigurationError(msg)

    if "all" not in data and env not in data:
        msg = f"Invalid config properties. Please ensure you have a section named 'all' and/or {env!r}."
        raise ConfigurationError(msg)

    merged: dict[str, Any] = {}
    for section in ("all", env):
        values = data.get(section) or {}
        if not isinstance(values, dict):
            msg = f"Config section {section!r} must be a mapping."
            raise ConfigurationError(msg)
        merged.update(values)

    known = {f.name for f in dataclasses.fields(AppConfig)}
    for key in sorted(merged.keys() - known):
        logger.warning("Ignoring unknown config key %r in %s", key, path)

    return AppConfig(**{k: v for k, v in merged.items() if k in known})
