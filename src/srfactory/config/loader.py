"""Configuration sources: environment variables and ``.properties`` files."""

from __future__ import annotations

import logging
import os
from os import PathLike
from pathlib import Path
from typing import Mapping

logger = logging.getLogger(__name__)

_COMMENT_MARKERS = ("#", "!")
_KEY_TERMINATORS = "=: \t\f"
_WHITESPACE = " \t\f"
_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}


def _trailing_backslashes(line: str) -> int:
    return len(line) - len(line.rstrip("\\"))


def _unescape(text: str) -> str:
    """Resolve ``\\t``, ``\\n``, ``\\uXXXX`` and ``\\<char>`` escapes."""
    if "\\" not in text:
        return text

    chars: list[str] = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch != "\\" or i + 1 == len(text):
            chars.append(ch)
            i += 1
            continue

        escaped = text[i + 1]
        if escaped == "u":
            digits = text[i + 2:i + 6]
            if len(digits) != 4:
                raise ValueError(f"Malformed \\uXXXX escape in {text!r}")
            try:
                chars.append(chr(int(digits, 16)))
            except ValueError as exc:
                raise ValueError(f"Malformed \\uXXXX escape in {text!r}") from exc
            i += 6
            continue

        chars.append(_ESCAPES.get(escaped, escaped))
        i += 2
    return "".join(chars)


def _split_property(line: str) -> tuple[str, str]:
    # Key ends at the first unescaped '=', ':' or whitespace
    end = 0
    while end < len(line) and line[end] not in _KEY_TERMINATORS:
        end += 2 if line[end] == "\\" else 1
    end = min(end, len(line))
    key = line[:end]

    rest = line[end:].lstrip(_WHITESPACE)
    if rest[:1] in ("=", ":"):
        rest = rest[1:].lstrip(_WHITESPACE)
    return _unescape(key), _unescape(rest)


def parse_properties(text: str) -> dict[str, str]:
    """Parse Java-style properties text into a dict of strings.

    Keys end at the first unescaped ``=``, ``:`` or whitespace. Supports ``#``/``!``
    comments, blank lines, continuation lines ending in an odd number of
    backslashes, and ``\\``-escapes (including ``\\uXXXX``) in keys and values.
    Later keys win.

    Raises:
        ValueError: If a ``\\uXXXX`` escape is malformed
    """
    result: dict[str, str] = {}
    pending: str | None = None
    for raw in text.splitlines():
        line = raw.lstrip(_WHITESPACE)
        if pending is None and (not line or line.startswith(_COMMENT_MARKERS)):
            continue

        if _trailing_backslashes(line) % 2 == 1:
            pending = (pending or "") + line[:-1]
            continue

        line = (pending or "") + line
        pending = None
        key, value = _split_property(line)
        if key:
            result[key] = value

    if pending:
        key, value = _split_property(pending)
        if key:
            result[key] = value

    return result


def load_properties(path: str | PathLike[str]) -> dict[str, str]:
    """Load a ``.properties`` file.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    properties_path = Path(path)
    properties = parse_properties(properties_path.read_text(encoding="utf-8"))
    logger.debug(
        "Loaded properties file",
        extra={"path": str(properties_path), "key_count": len(properties)},
    )
    return properties


def config_from_env(
    environ: Mapping[str, str] | None = None,
    *,
    env_prefix: str = "SRFACTORY_",
) -> dict[str, str]:
    """Collect configuration from environment variables.

    ``SRFACTORY_SSL_PROTOCOL=TLSv1.2`` becomes ``ssl.protocol``: the env prefix is
    removed, the rest lowercased and underscores turned into dots.

    Args:
        environ: Environment mapping (defaults to ``os.environ``)
        env_prefix: Prefix selecting the relevant variables
    """
    if environ is None:
        environ = os.environ

    result: dict[str, str] = {}
    for name, value in environ.items():
        if not name.startswith(env_prefix) or len(name) == len(env_prefix):
            continue
        key = name[len(env_prefix):].lower().replace("_", ".")
        result[key] = value
    return result
