"""Route pattern compilation.

A pattern is a URL path with two kinds of dynamic parts:

- ``*`` matches any run of characters, including none. A ``/*`` segment
  also matches the bare prefix, so ``/blog/*`` matches ``/blog`` and
  ``/blog/2024/post-1`` alike.
- ``/{name}`` is a named placeholder: an optional ``/`` followed by zero
  or more non-slash characters, captured positionally so the Nth
  placeholder is the Nth group of the compiled regex.

Everything else matches literally. Compiled patterns are anchored at
both ends and case-insensitive. Trailing slashes are insignificant.
"""

import re
from functools import lru_cache

# "/{name}": a whole segment that is only a placeholder
_PLACEHOLDER_RE = re.compile(r"/\{([^/{}]+)\}")

# Tokens: "/{name}", "/*", "*"
_TOKEN_RE = re.compile(r"/\{([^/{}]+)\}|/\*|\*")

_SLASHES_RE = re.compile(r"/{2,}")
_WILDCARD_RUN_RE = re.compile(r"\*(?:/*\*)+")

PLACEHOLDER_GROUP = r"(?:/([^/]*))?"
SLASH_WILDCARD = r"(?:/.*)?"
WILDCARD = r".*"


def normalize_pattern(pattern: str) -> str:
    """Collapse repeated slashes and wildcards and drop the trailing slash.

    Examples::

        "/blog//posts/"  -> "/blog/posts"
        "/*/*"           -> "/*"
        "/files/**"      -> "/files/*"
    """
    pattern = _SLASHES_RE.sub("/", pattern)
    pattern = _WILDCARD_RUN_RE.sub("*", pattern)
    return pattern.rstrip("/")


def _translate(pattern: str) -> str:
    parts: list[str] = []
    pos = 0
    for token in _TOKEN_RE.finditer(pattern):
        parts.append(re.escape(pattern[pos : token.start()]))
        if token.group(1) is not None:
            parts.append(PLACEHOLDER_GROUP)
        elif token.group(0) == "/*":
            parts.append(SLASH_WILDCARD)
        else:
            parts.append(WILDCARD)
        pos = token.end()
    parts.append(re.escape(pattern[pos:]))
    return "".join(parts)


@lru_cache(maxsize=512)
def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a route pattern into an anchored, case-insensitive regex.

    The result depends on *pattern* alone and is memoised, so the same
    pattern always yields the same matcher.
    """
    return re.compile(f"^{_translate(normalize_pattern(pattern))}$", re.IGNORECASE)


def placeholder_names(pattern: str) -> tuple[str, ...]:
    """Return the placeholder names of *pattern*, left to right.

    Only placeholders that fill a whole segment count: ``/users/{id}``
    declares ``id``, ``/file-{id}`` declares nothing.
    """
    return tuple(_PLACEHOLDER_RE.findall(normalize_pattern(pattern)))


def base_url(pattern: str) -> str:
    """Return the part of *pattern* before its first placeholder.

    ``/widgets/{_action}/{id}`` -> ``/widgets``. Handlers use it to build
    links back to their own route.
    """
    normalized = normalize_pattern(pattern)
    match = _PLACEHOLDER_RE.search(normalized)
    if match is None:
        return normalized
    return normalized[: match.start()]
